"""Storage layer - Persistencia de Record."""

from .base import ErrorListener, RecordStore
from .influx_writer import InfluxWriter

__all__ = ["ErrorListener", "InfluxWriter", "RecordStore"]
