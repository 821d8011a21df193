"""Domain layer - Modelos de dominio."""

from .record import FieldSet, FieldSets, ParsedTopic, Record

__all__ = ["FieldSet", "FieldSets", "ParsedTopic", "Record"]
