"""Unit tests for structured logging configuration."""

import json
import logging
import sys

from hmc_k2.infrastructure.logging_config import StructuredFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord(
        name="hmc_k2.adapters.k2_parser",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg="Skipping feed entry %d",
        args=(2,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log formatting."""

    def test_standard_fields(self):
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "WARNING"
        assert data["logger"] == "hmc_k2.adapters.k2_parser"
        assert data["message"] == "Skipping feed entry 2"
        assert "timestamp" in data

    def test_extra_fields_included(self):
        data = json.loads(StructuredFormatter().format(make_record(type_name="QuantumProcessor", entry_index=2)))

        assert data["type_name"] == "QuantumProcessor"
        assert data["entry_index"] == 2

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(StructuredFormatter().format(record))

        assert "ValueError: boom" in data["exception"]


class TestSetupLogging:
    """Test root logger setup."""

    def teardown_method(self):
        logging.getLogger().handlers.clear()
        logging.getLogger().setLevel(logging.WARNING)

    def test_json_handler(self):
        setup_logging(use_json=True, log_level="debug")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)

    def test_text_handler_and_unknown_level(self):
        setup_logging(log_level="chatty")

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert not isinstance(root.handlers[0].formatter, StructuredFormatter)
