"""Tests del handler MQTT (validación → parser → storage).

Ejecutar:
    pytest tests/test_message_handler.py -v
"""

from unittest.mock import MagicMock

import pytest

from mqtt_ingest.domain.record import Record
from mqtt_ingest.parsing.assembler import MessageParser
from mqtt_ingest.parsing.config import ParserConfig
from mqtt_ingest.transport.message_handler import MessageHandler
from mqtt_ingest.transport.validators import validate_inbound


@pytest.fixture
def mock_storage():
    """Mock del storage."""
    storage = MagicMock()
    storage.store = MagicMock()
    return storage


@pytest.fixture
def handler(mock_storage) -> MessageHandler:
    return MessageHandler(MessageParser(), mock_storage)


@pytest.fixture
def map_fields_handler(mock_storage) -> MessageHandler:
    return MessageHandler(MessageParser(ParserConfig(mode="mapFields")), mock_storage)


# =============================================================================
# VALIDACIÓN
# =============================================================================

class TestInboundValidation:

    def test_bytes_decoded(self):
        result = validate_inbound(1, "a/b", b"12.5")

        assert result.valid is True
        assert result.message.payload == "12.5"
        assert result.message.topic == "a/b"

    def test_invalid_utf8_rejected(self):
        result = validate_inbound(1, "a/b", b"\xff\xfe")

        assert result.valid is False
        assert "UTF-8" in result.error

    def test_non_string_payload_rejected(self):
        assert validate_inbound(1, "a/b", 12).valid is False


# =============================================================================
# FLUJO NORMAL
# =============================================================================

class TestHandleMessage:

    def test_number_stored(self, handler, mock_storage):
        assert handler.handle("m/a", b"12.5") is True

        mock_storage.store.assert_called_once_with(
            1,
            "m/a",
            [Record("m", {"topic": "m/a", "tp0": "m", "tp1": "a"}, {"value": 12.5})],
        )
        assert handler.stats.processed == 1
        assert handler.stats.records == 1

    def test_text_stored(self, handler, mock_storage):
        handler.handle("m", b"on")
        records = mock_storage.store.call_args.args[2]
        assert records[0].fields == {"text": "on"}

    def test_message_ids_increment(self, handler, mock_storage):
        handler.handle("m", b"1")
        handler.handle("m", b"2")
        ids = [call.args[0] for call in mock_storage.store.call_args_list]
        assert ids == [1, 2]

    def test_explicit_message_id(self, handler, mock_storage):
        handler.handle("m", b"1", message_id=99)
        assert mock_storage.store.call_args.args[0] == 99

    def test_fan_out_counts_records(self, map_fields_handler, mock_storage):
        map_fields_handler.handle("m", b'{"k": [{"v": 1}, {"v": 2}]}')

        records = mock_storage.store.call_args.args[2]
        assert len(records) == 2
        assert map_fields_handler.stats.processed == 1
        assert map_fields_handler.stats.records == 2


# =============================================================================
# MENSAJES IGNORADOS Y FALLIDOS
# =============================================================================

class TestSkippedAndFailed:

    def test_empty_topic_skipped(self, handler, mock_storage):
        assert handler.handle(" / ", b"1") is False

        mock_storage.store.assert_not_called()
        assert handler.stats.skipped == 1
        assert handler.stats.failed == 0

    def test_invalid_utf8_counted_as_failed(self, handler, mock_storage):
        assert handler.handle("m", b"\xff") is False
        mock_storage.store.assert_not_called()
        assert handler.stats.failed == 1

    def test_malformed_json_does_not_stop_pipeline(self, map_fields_handler, mock_storage):
        assert map_fields_handler.handle("m", b"{broken") is False
        assert map_fields_handler.handle("m", b'{"ok": 1}') is True

        assert map_fields_handler.stats.failed == 1
        assert map_fields_handler.stats.processed == 1
        mock_storage.store.assert_called_once()

    def test_storage_error_not_propagated(self, handler, mock_storage):
        mock_storage.store.side_effect = RuntimeError("influx down")

        assert handler.handle("m", b"1") is False
        assert handler.stats.failed == 1

    def test_stats_received(self, handler):
        handler.handle("m", b"1")
        handler.handle("", b"1")
        handler.handle("m", b"\xff")

        stats = handler.stats.to_dict()
        assert stats["received"] == 3
        assert stats["processed"] == 1
        assert stats["skipped"] == 1
        assert stats["failed"] == 1
        assert stats["success_rate"] == pytest.approx(0.5)
