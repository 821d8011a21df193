"""Modelos de dominio: topic parseado y registro de series temporales."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

# Valor de field: str, int, float, bool o lista de primitivos
FieldValue = Any
FieldSet = Dict[str, FieldValue]
FieldSets = Union[FieldSet, List[FieldSet]]


@dataclass(frozen=True)
class ParsedTopic:
    """Topic descompuesto en measurement + tags.

    tags siempre contiene "topic" y "tp0".."tp(N-1)", en orden.
    """
    measurement: str
    tags: Dict[str, str]


@dataclass
class Record:
    """Registro de series temporales - contrato entre parser y storage.

    MQTT → Parser → Record → InfluxDB
    """
    measurement: str
    tags: Dict[str, str] = field(default_factory=dict)
    fields: FieldSet = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convierte a dict {measurement, tags, fields}."""
        return {
            "measurement": self.measurement,
            "tags": dict(self.tags),
            "fields": dict(self.fields),
        }
