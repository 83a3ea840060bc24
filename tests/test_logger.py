"""
Logger Tests

Tests for:
- Component tag and details formatting
- Qt signal mirroring of every record
- Console level from GENSYNTH_LOG_LEVEL
"""
import logging

import pytest

from gensynth.utils.logger import LogLevel, _level_from_env, logger


@pytest.fixture
def records(qapp):
    received = []

    def on_log_message(message, level, timestamp):
        received.append((message, level, timestamp))

    logger.signal_emitter.log_message.connect(on_log_message)
    yield received
    logger.signal_emitter.log_message.disconnect(on_log_message)


class TestFormatting:
    """[COMP] msg - details"""

    def test_component_and_details(self, records):
        logger.warning("Settings write failed", component="STORE", details="disk full")
        message, level, _ = records[-1]
        assert message == "[STORE] Settings write failed - disk full"
        assert level == LogLevel.WARNING

    def test_bare_message(self, records):
        logger.info("plain")
        assert records[-1][0] == "plain"


class TestSignal:
    """Every level reaches the GUI signal, timestamped HH:MM:SS."""

    def test_levels(self, records):
        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        assert [level for _, level, _ in records[-4:]] == [
            logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR]

    def test_helpers_log_debug_with_component(self, records):
        logger.engine("Started")
        logger.store("Flushed", details="3 plugins")
        assert records[-2][:2] == ("[ENGINE] Started", logging.DEBUG)
        assert records[-1][:2] == ("[STORE] Flushed - 3 plugins", logging.DEBUG)

    def test_timestamp_format(self, records):
        logger.info("tick")
        timestamp = records[-1][2]
        assert len(timestamp) == 8
        assert timestamp[2] == ":" and timestamp[5] == ":"


class TestLevelFromEnv:
    """GENSYNTH_LOG_LEVEL picks the console level."""

    @pytest.mark.parametrize("raw, expected", [
        ("debug", LogLevel.DEBUG),
        (" ERROR ", LogLevel.ERROR),
        ("verbose", LogLevel.INFO),
        ("", LogLevel.INFO),
    ])
    def test_level(self, monkeypatch, raw, expected):
        monkeypatch.setenv("GENSYNTH_LOG_LEVEL", raw)
        assert _level_from_env(LogLevel.INFO) == expected

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("GENSYNTH_LOG_LEVEL", raising=False)
        assert _level_from_env(LogLevel.WARNING) == LogLevel.WARNING
