"""Interpretación del payload según el modo configurado."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from ..domain.record import FieldSets
from .config import ParserConfig, PayloadMode
from .errors import ConfigurationError, PayloadDecodeError
from .flattener import JsonKind, RecordFlattener, kind_of
from .numeric import NumericClassifier

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 80


class PayloadInterpreter:
    """Convierte un payload en uno o varios field-sets.

    Modos:
    - static:    {static_field: payload} sin clasificar.
    - auto:      número → {numeric_field: valor}; si no → {text_field: payload}.
    - mapFields: JSON aplanado con RecordFlattener (uno o varios field-sets).

    El modo se resuelve en el constructor; la instancia es inmutable.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        classifier: Optional[NumericClassifier] = None,
        flattener: Optional[RecordFlattener] = None,
    ):
        self._config = config or ParserConfig()

        try:
            self._mode = PayloadMode(self._config.mode)
        except ValueError:
            raise ConfigurationError(
                "mode", self._config.mode, tuple(m.value for m in PayloadMode)
            ) from None

        self._classifier = classifier or NumericClassifier(
            self._config.numeric_parser_mode
        )
        self._flattener = flattener or RecordFlattener()

        handlers: dict[PayloadMode, Callable[[Any, Any], FieldSets]] = {
            PayloadMode.STATIC: self._interpret_static,
            PayloadMode.AUTO: self._interpret_auto,
            PayloadMode.MAP_FIELDS: self._interpret_map_fields,
        }
        self._interpret = handlers[self._mode]

    @property
    def mode(self) -> PayloadMode:
        return self._mode

    def interpret(self, payload: Any, message_id: Any = None) -> FieldSets:
        """Interpreta un payload.

        Args:
            payload: Texto del mensaje (o documento ya estructurado en mapFields)
            message_id: Solo para correlación en logs

        Raises:
            PayloadDecodeError: bytes no UTF-8, o JSON inválido o demasiado
                anidado en modo mapFields
        """
        if isinstance(payload, (bytes, bytearray)):
            payload = self._decode_utf8(payload)
        return self._interpret(payload, message_id)

    def _interpret_static(self, payload: Any, message_id: Any) -> FieldSets:
        return {self._config.static_field: payload}

    def _interpret_auto(self, payload: Any, message_id: Any) -> FieldSets:
        text = payload if isinstance(payload, str) else json.dumps(payload)

        # se clasifica el texto recortado pero se guarda el original
        number = self._classifier.classify(text.strip())
        if number is not None:
            logger.debug("[PARSER] Message #%s payload is number", message_id)
            return {self._config.numeric_field: number}

        logger.debug("[PARSER] Message #%s payload is text", message_id)
        return {self._config.text_field: text}

    def _interpret_map_fields(self, payload: Any, message_id: Any) -> FieldSets:
        logger.debug("[PARSER] Message #%s payload should be JSON", message_id)
        document = self._load_json(payload) if isinstance(payload, str) else payload

        if kind_of(document) is not JsonKind.OBJECT:
            # documento raíz no-objeto: se cuelga del campo estático
            document = {self._config.static_field: document}

        try:
            return self._flattener.flatten(document, "")
        except RecursionError as e:
            raise PayloadDecodeError(
                "document nested too deeply", _preview(payload)
            ) from e

    @staticmethod
    def _load_json(payload: str) -> Any:
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            raise PayloadDecodeError(str(e), _preview(payload)) from e
        except RecursionError as e:
            raise PayloadDecodeError(
                "document nested too deeply", _preview(payload)
            ) from e

    @staticmethod
    def _decode_utf8(payload: bytes) -> str:
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadDecodeError(
                f"not valid UTF-8: {e}", _preview(payload)
            ) from e


def _preview(payload: Any) -> str:
    if isinstance(payload, (bytes, bytearray)):
        payload = bytes(payload[:_PREVIEW_CHARS]).decode("utf-8", errors="replace")
    if isinstance(payload, str):
        return payload[:_PREVIEW_CHARS]
    # documentos ya estructurados: solo el tipo, sin recorrerlos
    return f"<{type(payload).__name__}>"
