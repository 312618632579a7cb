"""Tests for the logging bridge into the writer."""

import logging

import pytest

from log_retention.handler import WriterHandler
from log_retention.writer import ActiveFileWriter


@pytest.fixture
def test_logger():
    logger = logging.getLogger("log_retention.tests.handler")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


class TestWriterHandler:
    def test_records_are_written_as_lines(self, make_config, clock, test_logger):
        writer = ActiveFileWriter(make_config(), time_func=clock)
        handler = WriterHandler(writer)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        test_logger.addHandler(handler)

        test_logger.info("service started")
        test_logger.warning("disk at %d%%", 91)
        path = writer.current_path
        writer.close()

        with open(path, "rb") as f:
            assert f.read() == b"[INFO] service started\n[WARNING] disk at 91%\n"

    def test_reentrant_records_are_dropped(self, make_config, clock, monkeypatch):
        writer = ActiveFileWriter(make_config(max_bytes=1), time_func=clock)
        handler = WriterHandler(writer)
        handler.setFormatter(logging.Formatter("%(message)s"))
        writer_logger = logging.getLogger("log_retention.writer")
        writer_logger.addHandler(handler)

        def _fail(now):
            raise OSError("disk full")

        monkeypatch.setattr(writer, "_create_next", _fail)
        try:
            # The rotation error is logged back through the same handler
            handler.handle(logging.makeLogRecord({"msg": "trigger", "levelno": logging.INFO}))
        finally:
            writer_logger.removeHandler(handler)

        path = writer.current_path
        writer.close()
        with open(path, "rb") as f:
            assert f.read() == b"trigger\n"

    def test_write_errors_go_to_handle_error(self, make_config, clock, monkeypatch):
        writer = ActiveFileWriter(make_config(), time_func=clock)
        writer.close()
        handler = WriterHandler(writer)
        seen = []
        monkeypatch.setattr(handler, "handleError", lambda record: seen.append(record.getMessage()))

        handler.handle(logging.makeLogRecord({"msg": "lost", "levelno": logging.INFO}))

        assert seen == ["lost"]
