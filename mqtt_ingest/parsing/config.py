"""Configuración del parser de mensajes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


class PayloadMode(str, Enum):
    """Modo de interpretación del payload."""
    STATIC = "static"
    AUTO = "auto"
    MAP_FIELDS = "mapFields"


class NumericParserMode(str, Enum):
    """Política de detección numérica en modo auto."""
    STRICT = "strict"
    TOLERANT = "tolerant"
    EAGER = "eager"


@dataclass(frozen=True)
class ParserConfig:
    """Configuración del parser.

    Los valores se guardan tal como llegan; los componentes los validan
    al construirse y fallan con ConfigurationError si no son válidos.
    """
    mode: str = PayloadMode.AUTO.value
    static_field: str = "payload"
    text_field: str = "text"
    numeric_field: str = "value"
    numeric_parser_mode: str = NumericParserMode.TOLERANT.value

    @classmethod
    def from_env(cls) -> "ParserConfig":
        return cls(
            mode=os.getenv("PARSER_MODE", PayloadMode.AUTO.value),
            static_field=os.getenv("PARSER_STATIC_FIELD", "payload"),
            text_field=os.getenv("PARSER_TEXT_FIELD", "text"),
            numeric_field=os.getenv("PARSER_NUMERIC_FIELD", "value"),
            numeric_parser_mode=os.getenv(
                "PARSER_NUMERIC_MODE", NumericParserMode.TOLERANT.value
            ),
        )

    @classmethod
    def from_mapping(cls, options: dict) -> "ParserConfig":
        """Construye desde un dict de opciones; las claves ausentes o vacías usan el default."""
        defaults = cls()
        return cls(
            mode=options.get("mode") or defaults.mode,
            static_field=options.get("static_field") or defaults.static_field,
            text_field=options.get("text_field") or defaults.text_field,
            numeric_field=options.get("numeric_field") or defaults.numeric_field,
            numeric_parser_mode=(
                options.get("numeric_parser_mode") or defaults.numeric_parser_mode
            ),
        )
