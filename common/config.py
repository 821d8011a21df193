from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from mqtt_ingest.parsing.config import ParserConfig


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class MQTTSettings:
    host: str = "localhost"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    client_id: str = "mqtt-influx-ingest"
    topics: Tuple[str, ...] = ("#",)
    qos: int = 0

    @classmethod
    def from_env(cls) -> "MQTTSettings":
        return cls(
            host=os.getenv("MQTT_HOST", "localhost"),
            port=int(os.getenv("MQTT_PORT", "1883")),
            username=os.getenv("MQTT_USERNAME") or None,
            password=os.getenv("MQTT_PASSWORD") or None,
            client_id=os.getenv("MQTT_CLIENT_ID", "mqtt-influx-ingest"),
            topics=_env_list("MQTT_TOPICS", "#"),
            qos=int(os.getenv("MQTT_QOS", "0")),
        )


@dataclass(frozen=True)
class InfluxSettings:
    url: str = "http://localhost:8086"
    token: str = ""
    org: str = ""
    bucket: str = "telemetry"
    timeout_ms: int = 10_000

    @classmethod
    def from_env(cls) -> "InfluxSettings":
        return cls(
            url=os.getenv("INFLUX_URL", "http://localhost:8086"),
            token=os.getenv("INFLUX_TOKEN", ""),
            org=os.getenv("INFLUX_ORG", ""),
            bucket=os.getenv("INFLUX_BUCKET", "telemetry"),
            timeout_ms=int(os.getenv("INFLUX_TIMEOUT_MS", "10000")),
        )


@dataclass(frozen=True)
class Settings:
    mqtt: MQTTSettings = field(default_factory=MQTTSettings)
    influx: InfluxSettings = field(default_factory=InfluxSettings)
    parser: ParserConfig = field(default_factory=ParserConfig)
    stats_interval_seconds: float = 60.0
    verbose: bool = False


def get_settings(env_file: Optional[str] = None) -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = env_file or os.getenv("MQTT_INGEST_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    return Settings(
        mqtt=MQTTSettings.from_env(),
        influx=InfluxSettings.from_env(),
        parser=ParserConfig.from_env(),
        stats_interval_seconds=float(os.getenv("STATS_INTERVAL_SECONDS", "60")),
        verbose=_env_bool("VERBOSE"),
    )
