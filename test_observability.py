"""
Observability Validation Test

This test validates the logging stack:
1. Correlation context carries board / target identifiers
2. Context vars are isolated and restored
3. Structured and human-readable formatters include correlation IDs
4. CorrelatedLogger keeps tracebacks for exception()
"""

import json
import logging

import pytest


def test_observability_imports():
    """Verify the observability package exports import correctly."""
    from core.observability import (
        get_logger, configure_logging, CorrelationContext, with_correlation,
    )
    assert get_logger is not None
    assert configure_logging is not None
    assert CorrelationContext is not None
    assert with_correlation is not None


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    """Attach a collecting handler to a dedicated logger."""
    base = logging.getLogger("test.observability")
    handler = _ListHandler()
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    base.propagate = False
    yield handler
    base.removeHandler(handler)


class TestCorrelationContext:

    def test_context_creation(self):
        from core.observability.logging import CorrelationContext

        ctx = CorrelationContext(board_id=101, target_project="Fabrikam", connector_type="tfs")
        assert ctx.to_dict() == {"board_id": 101, "target_project": "Fabrikam", "connector_type": "tfs"}

    def test_merge_ignores_none(self):
        from core.observability.logging import CorrelationContext

        ctx = CorrelationContext(board_id=101).merge(target_host="tfs.acme.local", board_id=None)
        assert ctx.board_id == 101
        assert ctx.target_host == "tfs.acme.local"

    def test_context_var_isolation(self):
        from core.observability.logging import get_correlation_context, with_correlation

        assert get_correlation_context().board_id is None

        with with_correlation(board_id=7):
            assert get_correlation_context().board_id == 7
            with with_correlation(target_project="Tailspin"):
                inner = get_correlation_context()
                assert inner.board_id == 7
                assert inner.target_project == "Tailspin"
            assert get_correlation_context().target_project is None

        assert get_correlation_context().board_id is None


class TestFormatters:

    def _record(self, msg="Getting list of TFS projects"):
        return logging.LogRecord(
            name="connectors.tfs.tfs_connector",
            level=logging.INFO,
            pathname="tfs_connector.py",
            lineno=10,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_structured_formatter_json_output(self):
        from core.observability.logging import StructuredFormatter, with_correlation

        with with_correlation(board_id=101, target_host="tfs.acme.local"):
            data = json.loads(StructuredFormatter().format(self._record()))

        assert data["message"] == "Getting list of TFS projects"
        assert data["level"] == "INFO"
        assert data["board_id"] == 101
        assert data["target_host"] == "tfs.acme.local"

    def test_human_readable_formatter_prefix(self):
        from core.observability.logging import HumanReadableFormatter, with_correlation

        with with_correlation(board_id=101, target_project="Fabrikam"):
            line = HumanReadableFormatter().format(self._record())

        assert "[board:101/proj:Fabrikam]" in line
        assert line.endswith("Getting list of TFS projects")

    def test_human_readable_formatter_connector_type(self):
        from core.observability.logging import HumanReadableFormatter, with_correlation

        with with_correlation(connector_type="tfs", target_host="tfs.acme.local"):
            line = HumanReadableFormatter().format(self._record())

        assert "[tfs/tfs.acme.local]" in line

    def test_human_readable_formatter_without_context(self):
        from core.observability.logging import HumanReadableFormatter

        assert "[-]" in HumanReadableFormatter().format(self._record())


class TestCorrelatedLogger:

    def test_extra_fields_attached(self, captured):
        from core.observability.logging import get_logger

        get_logger("test.observability").info("Discovered projects", extra_fields={"count": 2})
        assert captured.records[-1].extra_fields == {"count": 2}

    def test_exception_keeps_traceback(self, captured):
        from core.observability.logging import get_logger

        logger = get_logger("test.observability")
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            logger.exception("Failed to connect: boom")

        record = captured.records[-1]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None
        assert record.exc_info[0] is RuntimeError

    def test_debug_respects_level(self, captured):
        from core.observability.logging import get_logger

        logger = get_logger("test.observability")
        logger.setLevel(logging.INFO)
        try:
            logger.debug("hidden")
            assert all(r.getMessage() != "hidden" for r in captured.records)
        finally:
            logger.setLevel(logging.DEBUG)


class TestLoggingConfiguration:

    def test_level_from_env(self, monkeypatch):
        from core.observability.logging import _level_from_env

        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert _level_from_env(logging.INFO) == logging.DEBUG

    def test_unknown_level_uses_default(self, monkeypatch):
        from core.observability.logging import _level_from_env

        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert _level_from_env(logging.WARNING) == logging.WARNING

        monkeypatch.delenv("LOG_LEVEL")
        assert _level_from_env(logging.WARNING) == logging.WARNING
