"""Clasificador numérico para payloads de texto.

Tres políticas, fijadas al construir:

- strict:   el string completo debe ser un número.
- tolerant: basta con que el string *empiece* por un número
            ("123.456 lorem" → 123.456). No busca a mitad de string.
- eager:    toma el primer número que aparezca en cualquier posición
            ("Lorem 123.456 dolorem 42." → 123.456).
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from .config import NumericParserMode
from .errors import ConfigurationError

# signo, dígitos, parte decimal y exponente opcionales
_NUMBER = r"[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"

_STRICT_RE = re.compile(_NUMBER)
_EAGER_RE = re.compile(_NUMBER)
# "123." y ".5" son prefijos válidos; un exponente incompleto ("1e") se ignora
_TOLERANT_RE = re.compile(
    r"^\s*([-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?)"
)


def _parse_strict(value: str) -> Optional[float]:
    if _STRICT_RE.fullmatch(value):
        return float(value)
    return None


def _parse_tolerant(value: str) -> Optional[float]:
    match = _TOLERANT_RE.match(value)
    if match is None:
        return None
    return float(match.group(1))


def _parse_eager(value: str) -> Optional[float]:
    match = _EAGER_RE.search(value)
    if match is None:
        return None
    return float(match.group(0))


_STRATEGIES: dict[NumericParserMode, Callable[[str], Optional[float]]] = {
    NumericParserMode.STRICT: _parse_strict,
    NumericParserMode.TOLERANT: _parse_tolerant,
    NumericParserMode.EAGER: _parse_eager,
}


class NumericClassifier:
    """Decide si un string representa un número.

    La estrategia se resuelve una sola vez en el constructor; la instancia
    es inmutable y puede compartirse entre threads.
    """

    def __init__(self, mode: str = NumericParserMode.TOLERANT.value):
        try:
            self._mode = NumericParserMode(mode)
        except ValueError:
            raise ConfigurationError(
                "numeric_parser_mode",
                mode,
                tuple(m.value for m in NumericParserMode),
            ) from None
        self._parse = _STRATEGIES[self._mode]

    @property
    def mode(self) -> NumericParserMode:
        return self._mode

    def classify(self, value: str) -> Optional[float]:
        """Retorna el valor numérico, o None si no es un número."""
        return self._parse(value)
