"""Escritura de Record en InfluxDB.

Usa la write API síncrona de influxdb-client. Sin reintentos: un fallo se
registra y se notifica a los listeners como (topic, mensaje).
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, List, Optional, Sequence, Set, Union

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS
from influxdb_client.rest import ApiException

from common.config import InfluxSettings

from ..domain.record import Record
from .base import RecordStore

logger = logging.getLogger(__name__)


class InfluxWriter(RecordStore):
    """Destino InfluxDB con conteo de escrituras concurrentes.

    Estadísticas (ver collect_stats):
    - total:          escrituras desde el arranque
    - interval:       escrituras desde la última recolección
    - max_concurrent: máximo de escrituras en vuelo en el intervalo
    """

    def __init__(self, settings: InfluxSettings, client: Optional[InfluxDBClient] = None):
        super().__init__()
        self._settings = settings
        self._client = client or InfluxDBClient(
            url=settings.url,
            token=settings.token,
            org=settings.org,
            timeout=settings.timeout_ms,
        )
        self._write_api = self._client.write_api(write_options=SYNCHRONOUS)

        self._lock = threading.Lock()
        self._write_counter = 0
        self._current_writes = 0
        self._max_current_writes = 0
        self._stat_begin_counter = 0

        logger.info(
            "[INFLUX] Connect to %s (org: %s, bucket: %s)",
            settings.url, settings.org, settings.bucket,
        )

    def store(
        self,
        message_id: Any,
        topic: str,
        records: Union[Record, Sequence[Record]],
    ) -> None:
        if isinstance(records, Record):
            records = [records]

        points = self._to_points(message_id, records)
        if not points:
            logger.warning("[INFLUX] Message #%s (%s) has no fields, not stored", message_id, topic)
            return

        with self._lock:
            self._write_counter += 1
            self._current_writes += 1
            self._max_current_writes = max(self._current_writes, self._max_current_writes)

        try:
            self._write_api.write(
                bucket=self._settings.bucket,
                org=self._settings.org,
                record=points,
            )
            logger.debug(
                "[INFLUX] Message #%s stored to '%s' (%d points)",
                message_id, records[0].measurement, len(points),
            )
        except ApiException as e:
            self._fail(message_id, topic, f"{e.status} {e.reason}")
        except Exception as e:
            self._fail(message_id, topic, str(e))
        finally:
            with self._lock:
                self._current_writes -= 1

    def collect_stats(self) -> dict:
        """Retorna las estadísticas del intervalo y abre uno nuevo."""
        with self._lock:
            stat = {
                "total": self._write_counter,
                "interval": self._write_counter - self._stat_begin_counter,
                "max_concurrent": self._max_current_writes,
            }
            self._stat_begin_counter = self._write_counter
            self._max_current_writes = self._current_writes
        return stat

    def close(self) -> None:
        try:
            self._write_api.close()
        finally:
            self._client.close()

    def _fail(self, message_id: Any, topic: str, message: str) -> None:
        message = message.strip()
        logger.error("[INFLUX] Fail to store message #%s (%s): %s", message_id, topic, message)
        self._emit_error(topic, message)

    def _to_points(self, message_id: Any, records: Sequence[Record]) -> List[Point]:
        # timestamps consecutivos: las filas de un fan-out comparten
        # measurement y tags y se pisarían con el mismo timestamp
        base_ns = time.time_ns()
        typed_keys = _non_string_keys(records)
        points = []
        for i, record in enumerate(records):
            point = Point(record.measurement)
            for key, value in record.tags.items():
                point.tag(key, value)
            written = 0
            for key, value in record.fields.items():
                # relleno "" en un campo numérico de otra fila: se omite,
                # InfluxDB rechaza tipos distintos para un mismo campo
                if (value is None or value == "") and key in typed_keys:
                    continue
                point.field(key, self._field_value(value))
                written += 1
            if not written:
                logger.debug("[INFLUX] Message #%s row %d has no fields", message_id, i)
                continue
            point.time(base_ns + i, WritePrecision.NS)
            points.append(point)
        return points

    @staticmethod
    def _field_value(value: Any) -> Any:
        # InfluxDB no tiene arrays: se guardan como JSON
        if isinstance(value, list):
            return json.dumps(value)
        if value is None:
            return ""
        return value


def _non_string_keys(records: Sequence[Record]) -> Set[str]:
    """Campos con valor numérico o booleano en alguna fila del mensaje."""
    return {
        key
        for record in records
        for key, value in record.fields.items()
        if isinstance(value, (int, float, bool))
    }
