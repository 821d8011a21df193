"""mqtt_ingest - Puente MQTT → InfluxDB.

Estructura:
- parsing/     → Transformación mensaje → registros (núcleo puro, sin I/O)
- domain/      → Modelos de dominio (ParsedTopic, Record)
- transport/   → Recepción MQTT y validación de mensajes
- storage/     → Escritura en InfluxDB
- monitoring/  → Estadísticas de procesamiento
"""

__version__ = "0.1.0"
