"""Cliente MQTT para recepción de mensajes."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import paho.mqtt.client as mqtt

from common.config import MQTTSettings

logger = logging.getLogger(__name__)

# handler(topic, payload)
MessageCallback = Callable[[str, bytes], object]


class MQTTClient:
    """Cliente MQTT ligero.

    Responsabilidades:
    - Conexión/desconexión a broker MQTT
    - Suscripción a los topics configurados (también tras reconectar)
    - Delegación de mensajes a handler
    """

    def __init__(self, settings: MQTTSettings):
        self._settings = settings
        self.client_id = f"{settings.client_id}-{int(time.time())}"

        self._client: Optional[mqtt.Client] = None
        self._connected = False
        self._message_handler: Optional[MessageCallback] = None

    def set_message_handler(self, handler: MessageCallback):
        """Configura el handler de mensajes."""
        self._message_handler = handler

    def connect(self, timeout_seconds: float = 5.0) -> bool:
        """Conecta al broker MQTT y arranca el loop de red."""
        try:
            self._client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=self.client_id,
                protocol=mqtt.MQTTv311,
            )

            self._client.on_connect = self._on_connect
            self._client.on_disconnect = self._on_disconnect
            self._client.on_message = self._on_message

            if self._settings.username:
                self._client.username_pw_set(self._settings.username, self._settings.password)

            logger.info("[MQTT] Connecting to %s:%d", self._settings.host, self._settings.port)
            self._client.connect(self._settings.host, self._settings.port, keepalive=60)
            self._client.loop_start()

            # Esperar conexión
            deadline = time.monotonic() + timeout_seconds
            while time.monotonic() < deadline:
                if self._connected:
                    return True
                time.sleep(0.1)

            logger.error("[MQTT] Connection timeout")
            return False

        except Exception as e:
            logger.exception("[MQTT] Connection failed: %s", e)
            return False

    def disconnect(self):
        """Desconecta del broker."""
        if self._client:
            try:
                self._client.loop_stop()
                self._client.disconnect()
            except Exception as e:
                logger.warning("[MQTT] Disconnect error: %s", e)
        self._connected = False

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de conexión."""
        if reason_code == 0:
            self._connected = True
            logger.info("[MQTT] Connected to broker")
            for topic in self._settings.topics:
                client.subscribe(topic, qos=self._settings.qos)
                logger.info("[MQTT] Subscribed to %s (qos=%d)", topic, self._settings.qos)
        else:
            self._connected = False
            logger.error("[MQTT] Connection failed: %s", reason_code)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        """Callback de desconexión."""
        self._connected = False
        logger.warning("[MQTT] Disconnected (%s)", reason_code)

    def _on_message(self, client, userdata, msg):
        """Callback de mensaje - delega al handler."""
        if self._message_handler:
            self._message_handler(msg.topic, msg.payload)

    @property
    def is_connected(self) -> bool:
        return self._connected
