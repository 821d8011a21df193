"""RecordStore - Interface base para destinos de escritura."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Sequence, Union

from ..domain.record import Record

# (topic, mensaje de error)
ErrorListener = Callable[[str, str], None]


class RecordStore(ABC):
    """Contrato común de los destinos de escritura.

    Cada implementación es responsable de la persistencia, del conteo de
    concurrencia y de reportar fallos como pares (topic, mensaje).
    """

    def __init__(self):
        self._error_listeners: List[ErrorListener] = []

    @abstractmethod
    def store(
        self,
        message_id: Any,
        topic: str,
        records: Union[Record, Sequence[Record]],
    ) -> None:
        """Persiste uno o varios Record de un mismo mensaje."""

    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def _emit_error(self, topic: str, message: str) -> None:
        for listener in self._error_listeners:
            listener(topic, message)
