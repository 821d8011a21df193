"""Descomposición de topics MQTT en measurement + tags."""

from __future__ import annotations

from typing import Optional

from ..domain.record import ParsedTopic

TOPIC_SEPARATOR = "/"
TAG_PREFIX = "tp"


class TopicDecomposer:
    """Convierte un topic en ParsedTopic.

    "m1/a/b" → measurement="m1",
               tags={"topic": "m1/a/b", "tp0": "m1", "tp1": "a", "tp2": "b"}

    No valida ni escapa el contenido de los segmentos.
    """

    def decompose(self, topic: str) -> Optional[ParsedTopic]:
        """Retorna None si el topic queda vacío (mensaje a ignorar)."""
        topic = topic.strip()

        if topic.startswith(TOPIC_SEPARATOR):
            topic = topic[1:]
        if topic.endswith(TOPIC_SEPARATOR):
            topic = topic[:-1]

        if not topic:
            return None

        parts = topic.split(TOPIC_SEPARATOR)

        tags = {"topic": topic}
        for i, part in enumerate(parts):
            tags[f"{TAG_PREFIX}{i}"] = part

        return ParsedTopic(measurement=parts[0], tags=tags)
