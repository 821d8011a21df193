"""Validación de mensajes MQTT entrantes.

Normaliza (message_id, topic, payload) antes de pasarlos al parser:
el payload llega como bytes desde paho y se decodifica como UTF-8.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)


class InboundMessage(BaseModel):
    """Mensaje tal como lo entrega el transporte."""

    message_id: int
    topic: str
    payload: str

    @field_validator("topic", "payload", mode="before")
    @classmethod
    def decode_bytes(cls, v: Any) -> Any:
        if isinstance(v, (bytes, bytearray)):
            try:
                return bytes(v).decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValueError(f"not valid UTF-8: {e.reason}") from e
        return v


@dataclass
class ValidationResult:
    """Resultado de validación."""

    valid: bool
    message: Optional[InboundMessage] = None
    error: Optional[str] = None


def validate_inbound(message_id: int, topic: Any, payload: Any) -> ValidationResult:
    """Valida un mensaje entrante.

    Returns:
        ValidationResult con el mensaje normalizado o el error
    """
    try:
        message = InboundMessage(message_id=message_id, topic=topic, payload=payload)
        return ValidationResult(valid=True, message=message)
    except ValidationError as e:
        logger.warning("[VALIDATOR] Message #%s rejected: %s", message_id, e)
        return ValidationResult(valid=False, error=str(e))
