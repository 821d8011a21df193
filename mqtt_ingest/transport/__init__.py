"""Transport layer - Recepción de mensajes MQTT."""

from .message_handler import MessageHandler
from .mqtt_client import MQTTClient
from .validators import InboundMessage, ValidationResult, validate_inbound

__all__ = [
    "InboundMessage",
    "MQTTClient",
    "MessageHandler",
    "ValidationResult",
    "validate_inbound",
]
