"""Unit tests for line sinks."""

import logging

from dashenc.core.sinks import LoggerSink, null_sink


def test_logger_sink_forwards_lines(caplog) -> None:
    logger = logging.getLogger("dashenc.test.sink")
    sink = LoggerSink(logger, logging.INFO)

    with caplog.at_level(logging.INFO, logger="dashenc.test.sink"):
        sink("frame=  100 fps=25")

    assert caplog.records[0].getMessage() == "frame=  100 fps=25"
    assert caplog.records[0].levelno == logging.INFO


def test_logger_sink_does_not_interpolate(caplog) -> None:
    sink = LoggerSink(logging.getLogger("dashenc.test.sink"), logging.WARNING)

    sink("100% done %s")

    assert "100% done %s" in caplog.text


def test_null_sink_accepts_anything() -> None:
    assert null_sink("line") is None
    assert null_sink(0.5) is None
