"""Ensamblado de registros y facade del parser."""

from __future__ import annotations

from typing import Any, List, Optional, Union

from ..domain.record import FieldSets, ParsedTopic, Record
from .config import ParserConfig
from .payload import PayloadInterpreter
from .topic import TopicDecomposer

AssembledRecords = Union[Record, List[Record]]


class RecordAssembler:
    """Combina topic + field-sets en uno o varios Record."""

    def __init__(self, decomposer: Optional[TopicDecomposer] = None):
        self._decomposer = decomposer or TopicDecomposer()

    def assemble(self, topic: str, field_sets: FieldSets) -> Optional[AssembledRecords]:
        """Retorna None si el topic está vacío.

        Una lista de field-sets produce un Record por field-set, todos con
        el mismo measurement y tags.
        """
        parsed = self._decomposer.decompose(topic)
        if parsed is None:
            return None

        if isinstance(field_sets, list):
            return [
                Record(parsed.measurement, dict(parsed.tags), fields)
                for fields in field_sets
            ]

        return Record(parsed.measurement, dict(parsed.tags), field_sets)


class MessageParser:
    """Facade: (message_id, topic, payload) → Record | List[Record] | None.

    Construye y valida todos los componentes una sola vez; falla con
    ConfigurationError antes de procesar ningún mensaje.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self._config = config or ParserConfig()
        self._decomposer = TopicDecomposer()
        self._interpreter = PayloadInterpreter(self._config)
        self._assembler = RecordAssembler(self._decomposer)

    @property
    def config(self) -> ParserConfig:
        return self._config

    def parse(self, message_id: Any, topic: str, payload: Any) -> Optional[AssembledRecords]:
        """Parsea un mensaje.

        Returns:
            None si el mensaje debe ignorarse (topic vacío).

        Raises:
            PayloadDecodeError: JSON inválido en modo mapFields
        """
        # el topic se revisa primero: un mensaje ignorado no decodifica payload
        if self._decomposer.decompose(topic) is None:
            return None

        field_sets = self._interpreter.interpret(payload, message_id)
        return self._assembler.assemble(topic, field_sets)

    def parse_topic(self, topic: str) -> Optional[ParsedTopic]:
        return self._decomposer.decompose(topic)

    def parse_payload(self, payload: Any, message_id: Any = None) -> FieldSets:
        return self._interpreter.interpret(payload, message_id)
