"""Aplanado recursivo de documentos JSON anidados.

Convierte un objeto JSON arbitrario en uno o varios field-sets planos
con claves en notación de puntos:

    {"a": {"x": "0"}, "field": [{"attrA": "1"}, {"attrA": "2"}]}
    →
    [{"a.x": "0", "field.attrA": "1"},
     {"a.x": "0", "field.attrA": "2"}]

Los arrays de objetos del mismo nivel ("sibling arrays") se combinan por
posición (zip por índice). Si tienen longitudes distintas, las filas que
faltan en los arrays cortos se rellenan con "" para que todas las filas
tengan el mismo conjunto de claves.

El zip es puramente posicional: dos arrays sin relación entre sí quedan
emparejados por índice aunque semánticamente no se correspondan.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

from ..domain.record import FieldSet, FieldSets

KEY_SEPARATOR = "."
PAD_VALUE = ""


class JsonKind(Enum):
    """Variantes de un valor JSON relevantes para el aplanado."""
    SCALAR = "scalar"
    PRIMITIVE_ARRAY = "primitive_array"
    OBJECT_ARRAY = "object_array"
    OBJECT = "object"


def kind_of(value: Any) -> JsonKind:
    """Clasifica un valor JSON.

    Un array se considera de primitivos si está vacío o si su primer
    elemento no es objeto/array; el primer elemento decide todo el array.
    """
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        if not value or not isinstance(value[0], (dict, list)):
            return JsonKind.PRIMITIVE_ARRAY
        return JsonKind.OBJECT_ARRAY
    return JsonKind.SCALAR


class RecordFlattener:
    """Reduce un objeto JSON a un field-set o a una lista de field-sets.

    Sin estado: una instancia puede usarse desde varios threads.
    """

    def __init__(self, separator: str = KEY_SEPARATOR, pad_value: Any = PAD_VALUE):
        self._separator = separator
        self._pad_value = pad_value

    def flatten(self, value: Dict[str, Any], prefix: str = "") -> FieldSets:
        """Aplana `value` usando `prefix` como raíz de las claves.

        Returns:
            Un dict si el objeto no contiene arrays de objetos a ninguna
            profundidad; en caso contrario, una lista con una fila por
            índice del array más largo.
        """
        base: FieldSet = {}
        siblings: List[List[FieldSet]] = []

        for key, item in value.items():
            full_key = self._join(prefix, key)
            kind = kind_of(item)

            if kind is JsonKind.OBJECT_ARRAY:
                siblings.append(self._flatten_elements(item, full_key))
            elif kind is JsonKind.OBJECT:
                nested = self.flatten(item, full_key)
                if isinstance(nested, list):
                    siblings.append(nested)
                else:
                    base.update(nested)
            else:
                # SCALAR o PRIMITIVE_ARRAY: el array se guarda entero
                base[full_key] = item

        max_len = max((len(rows) for rows in siblings), default=0)
        if max_len == 0:
            return self._normalize(base)

        return self._zip(base, siblings, max_len)

    def _flatten_elements(self, items: List[Any], full_key: str) -> List[FieldSet]:
        """Aplana cada elemento de un array de objetos.

        Un elemento que a su vez produce varias filas aporta todas ellas,
        en orden, al mismo sibling array.
        """
        rows: List[FieldSet] = []
        for element in items:
            kind = kind_of(element)
            if kind is JsonKind.OBJECT:
                flat = self.flatten(element, full_key)
                if isinstance(flat, list):
                    rows.extend(flat)
                else:
                    rows.append(flat)
            elif kind is JsonKind.OBJECT_ARRAY:
                rows.extend(self._flatten_elements(element, full_key))
            else:
                # primitivo (o array de primitivos) mezclado con objetos
                rows.append({full_key: element})
        return rows

    def _zip(
        self,
        base: FieldSet,
        siblings: List[List[FieldSet]],
        max_len: int,
    ) -> List[FieldSet]:
        sibling_keys = [self._union_keys(rows) for rows in siblings]

        merged: List[FieldSet] = []
        for j in range(max_len):
            row = dict(base)
            for rows, keys in zip(siblings, sibling_keys):
                element = rows[j] if j < len(rows) else {}
                for key in keys:
                    row[key] = element.get(key, self._pad_value)
            merged.append(row)
        return merged

    def _normalize(self, fields: FieldSet, prefix: str = "") -> FieldSet:
        """Expande cualquier objeto que haya quedado sin aplanar."""
        flat: FieldSet = {}
        for key, value in fields.items():
            full_key = self._join(prefix, key)
            if isinstance(value, dict) and value:
                flat.update(self._normalize(value, full_key))
            else:
                flat[full_key] = value
        return flat

    def _join(self, prefix: str, key: str) -> str:
        if prefix:
            return f"{prefix}{self._separator}{key}"
        return key

    @staticmethod
    def _union_keys(rows: List[FieldSet]) -> List[str]:
        keys: Dict[str, None] = {}
        for row in rows:
            for key in row:
                keys.setdefault(key, None)
        return list(keys)
