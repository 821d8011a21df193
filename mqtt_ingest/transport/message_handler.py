"""Handler de mensajes MQTT."""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Optional

from ..monitoring.stats import Stats
from ..parsing.assembler import MessageParser
from ..parsing.errors import PayloadDecodeError
from ..storage.base import RecordStore
from .validators import validate_inbound

logger = logging.getLogger(__name__)


class MessageHandler:
    """Maneja mensajes MQTT y los procesa a través del pipeline.

    Responsabilidades:
    - Asignación de message_id para correlación en logs
    - Validación del mensaje entrante
    - Parseo topic/payload → Record(s)
    - Delegación al storage
    - Tracking de estadísticas

    Nunca propaga excepciones: corre en el thread de red de paho.
    """

    def __init__(
        self,
        parser: MessageParser,
        storage: RecordStore,
        log_every: int = 100,
    ):
        self._parser = parser
        self._storage = storage
        self._log_every = max(1, log_every)
        self._ids = itertools.count(1)
        self._stats = Stats()

    def handle(self, topic: Any, payload: Any, message_id: Optional[int] = None) -> bool:
        """Procesa un mensaje MQTT.

        Returns:
            True si el mensaje llegó al storage, False si se ignoró o falló.
        """
        if message_id is None:
            message_id = next(self._ids)

        self._stats.received += 1
        self._stats.last_message_at = time.time()

        try:
            # 1. Validar y decodificar
            result = validate_inbound(message_id, topic, payload)
            if not result.valid:
                self._stats.failed += 1
                return False
            message = result.message

            # 2. Parsear
            try:
                records = self._parser.parse(message.message_id, message.topic, message.payload)
            except PayloadDecodeError as e:
                logger.warning(
                    "[HANDLER] Message #%s dropped: %s (topic=%s)",
                    message.message_id, e, message.topic,
                )
                self._stats.failed += 1
                return False

            if records is None:
                logger.debug("[HANDLER] Message #%s skipped: empty topic", message.message_id)
                self._stats.skipped += 1
                return False

            if not isinstance(records, list):
                records = [records]

            # 3. Almacenar
            self._storage.store(message.message_id, message.topic, records)

            self._stats.processed += 1
            self._stats.records += len(records)

            # Log periódico
            if self._stats.processed % self._log_every == 0:
                logger.info("[HANDLER] %s", self._stats)

            return True

        except Exception as e:
            logger.exception("[HANDLER] Error on message #%s: %s", message_id, e)
            self._stats.failed += 1
            return False

    @property
    def stats(self) -> Stats:
        return self._stats
