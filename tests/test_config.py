"""Tests de configuración (entorno + .env) y del CLI."""

from dataclasses import FrozenInstanceError
from unittest.mock import MagicMock

import pytest

from common.config import InfluxSettings, MQTTSettings, Settings, get_settings
from mqtt_ingest import main as cli
from mqtt_ingest.parsing.config import ParserConfig

ENV_VARS = [
    "MQTT_HOST", "MQTT_PORT", "MQTT_USERNAME", "MQTT_PASSWORD", "MQTT_CLIENT_ID",
    "MQTT_TOPICS", "MQTT_QOS",
    "INFLUX_URL", "INFLUX_TOKEN", "INFLUX_ORG", "INFLUX_BUCKET", "INFLUX_TIMEOUT_MS",
    "PARSER_MODE", "PARSER_STATIC_FIELD", "PARSER_TEXT_FIELD", "PARSER_NUMERIC_FIELD",
    "PARSER_NUMERIC_MODE",
    "STATS_INTERVAL_SECONDS", "VERBOSE", "MQTT_INGEST_ENV_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Entorno sin variables del servicio; se restaura al terminar."""
    for name in ENV_VARS:
        # setenv + delenv: monkeypatch registra el estado original y lo restaura
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def missing_env_file(tmp_path) -> str:
    return str(tmp_path / "missing.env")


class TestSettings:

    def test_defaults(self, clean_env, missing_env_file):
        settings = get_settings(missing_env_file)

        assert settings == Settings()
        assert settings.mqtt.topics == ("#",)
        assert settings.parser.mode == "auto"
        assert settings.parser.numeric_parser_mode == "tolerant"

    def test_environment(self, clean_env, missing_env_file):
        clean_env.setenv("MQTT_HOST", "broker")
        clean_env.setenv("MQTT_PORT", "8883")
        clean_env.setenv("MQTT_TOPICS", "sensors/#, perf/+ ,")
        clean_env.setenv("INFLUX_BUCKET", "iot")
        clean_env.setenv("PARSER_MODE", "mapFields")
        clean_env.setenv("VERBOSE", "yes")

        settings = get_settings(missing_env_file)

        assert settings.mqtt.host == "broker"
        assert settings.mqtt.port == 8883
        assert settings.mqtt.topics == ("sensors/#", "perf/+")
        assert settings.influx.bucket == "iot"
        assert settings.parser.mode == "mapFields"
        assert settings.verbose is True

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("PARSER_NUMERIC_MODE=eager\nINFLUX_ORG=acme\n")

        settings = get_settings(str(env_file))

        assert settings.parser.numeric_parser_mode == "eager"
        assert settings.influx.org == "acme"

    def test_real_environment_wins_over_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("INFLUX_ORG=from-file\n")
        clean_env.setenv("INFLUX_ORG", "from-env")

        assert get_settings(str(env_file)).influx.org == "from-env"

    def test_blank_credentials_are_none(self, clean_env, missing_env_file):
        clean_env.setenv("MQTT_USERNAME", "")
        assert get_settings(missing_env_file).mqtt.username is None


class TestParserConfig:

    def test_from_mapping(self):
        config = ParserConfig.from_mapping({"mode": "static", "static_field": "raw"})

        assert config.mode == "static"
        assert config.static_field == "raw"
        assert config.text_field == "text"

    def test_from_mapping_blank_values_use_defaults(self):
        assert ParserConfig.from_mapping({"mode": "", "numeric_field": None}) == ParserConfig()

    def test_frozen_settings(self):
        with pytest.raises(FrozenInstanceError):
            MQTTSettings().host = "other"
        with pytest.raises(FrozenInstanceError):
            InfluxSettings().url = "other"


class TestCli:

    def test_invalid_parser_config_exits_before_connecting(self, clean_env, missing_env_file):
        clean_env.setenv("PARSER_NUMERIC_MODE", "fuzzy")
        writer_cls = MagicMock()
        clean_env.setattr(cli, "InfluxWriter", writer_cls)

        assert cli.main(["--env-file", missing_env_file]) == cli.EXIT_CONFIG_ERROR
        writer_cls.assert_not_called()
