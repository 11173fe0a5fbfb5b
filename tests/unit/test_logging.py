"""Unit tests for `datamodeler.logging`."""

import logging
from logging.handlers import MemoryHandler

from rich.logging import RichHandler

from datamodeler.logging import (
    ThirdPartyPrefixFilter,
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

# pylint: disable=magic-value-comparison


def _record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)


def test_prefix_filter_tags_foreign_loggers():
    flt = ThirdPartyPrefixFilter()
    ours, theirs = _record("datamodeler.audit"), _record("sqlalchemy.engine.Engine")
    assert flt.filter(ours) and flt.filter(theirs)
    assert ours.prefix == ""
    assert theirs.prefix == "[sqlalchemy]"


def test_console_handler_levels():
    quiet = config_console_handler(level=logging.WARNING)
    debug = config_console_handler(level=logging.WARNING, debug_mode=True)
    assert isinstance(quiet, RichHandler)
    assert quiet.level == logging.WARNING
    assert any(isinstance(f, ThirdPartyPrefixFilter) for f in quiet.filters)
    assert debug.level == logging.DEBUG
    assert not debug.filters


def test_flight_recorder_dumps_on_warning(tmp_path):
    path = tmp_path / "flight.log"
    recorder = config_flight_recorder(path, capacity=10)
    target = recorder.target
    logger = logging.getLogger("datamodeler.test.flight")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(recorder)
    try:
        logger.debug("quiet detail")
        assert path.read_text(encoding="utf-8") == ""
        logger.warning("something broke")
        text = path.read_text(encoding="utf-8")
        assert "quiet detail" in text
        assert "WARNING datamodeler.test.flight" in text
    finally:
        logger.removeHandler(recorder)
        recorder.close()
        target.close()


def test_flight_recorder_flush_on_close(tmp_path):
    path = tmp_path / "flight.log"
    recorder = config_flight_recorder(path, flush_on_close=True)
    assert isinstance(recorder, MemoryHandler)
    target = recorder.target
    recorder.handle(_record("datamodeler.x"))
    recorder.close()
    target.close()
    assert "datamodeler.x" in path.read_text(encoding="utf-8")


def test_log_startup_summary(caplog, tmp_path):
    caplog.set_level(logging.DEBUG, logger="datamodeler.test.startup")
    log_startup(
        logging.getLogger("datamodeler.test.startup"),
        app_version="0.1.0",
        level=logging.INFO,
        handlers=[],
        log_path=tmp_path / "f.log",
        flight_recorder=True,
        flight_capacity=50,
        force_flush_fr=False,
        logger_levels={"sqlalchemy": logging.WARNING},
    )
    assert "DATAMODELER 0.1.0 - console=INFO, flight-recorder=ON" in caplog.text
    assert "capacity=50, flush_on_close=False" in caplog.text
    assert "Per-logger overrides: {'sqlalchemy': 'WARNING'}" in caplog.text
