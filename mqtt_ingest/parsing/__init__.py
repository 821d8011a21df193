"""Parsing layer - Transformación mensaje → registros.

Núcleo puro: sin I/O, sin estado compartido entre llamadas.
"""

from .assembler import MessageParser, RecordAssembler
from .config import NumericParserMode, ParserConfig, PayloadMode
from .errors import ConfigurationError, IngestError, PayloadDecodeError
from .flattener import JsonKind, RecordFlattener
from .numeric import NumericClassifier
from .payload import PayloadInterpreter
from .topic import TopicDecomposer

__all__ = [
    "ConfigurationError",
    "IngestError",
    "JsonKind",
    "MessageParser",
    "NumericClassifier",
    "NumericParserMode",
    "ParserConfig",
    "PayloadDecodeError",
    "PayloadInterpreter",
    "PayloadMode",
    "RecordAssembler",
    "RecordFlattener",
    "TopicDecomposer",
]
