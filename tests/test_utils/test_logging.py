"""Tests for the structured logging utilities."""

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from sheet_layout.utils.logging import (
    LogContext,
    PerformanceMetrics,
    StructuredLogFormatter,
    StructuredLogger,
    clear_context,
    configure_logging,
    get_extra_context,
    get_logger,
    get_request_id,
    set_extra_context,
    set_request_id,
    timed_operation,
)


def _record(msg: str = "Parsed workbook") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestContextVariables:
    """Tests for context variable management."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_defaults(self) -> None:
        assert get_request_id() is None
        assert get_extra_context() == {}

    def test_set_and_clear(self) -> None:
        set_request_id("req-1")
        set_extra_context({"workbook": "report.xlsx"})

        assert get_request_id() == "req-1"
        assert get_extra_context() == {"workbook": "report.xlsx"}

        clear_context()
        assert get_request_id() is None
        assert get_extra_context() == {}

    def test_copied_context_reaches_worker_threads(self) -> None:
        """Worker threads see the request ID when run in a copied context."""
        set_request_id("req-threads")
        with ThreadPoolExecutor(max_workers=2) as executor:
            copied = executor.submit(
                contextvars.copy_context().run, get_request_id
            ).result()

        assert copied == "req-threads"


class TestPerformanceMetrics:
    """Tests for PerformanceMetrics dataclass."""

    def test_initialization(self) -> None:
        metrics = PerformanceMetrics(operation="parse_workbook")

        assert metrics.operation == "parse_workbook"
        assert metrics.end_time is None
        assert metrics.sheets_processed == 0
        assert metrics.merges_applied == 0

    def test_finish_calculates_duration(self) -> None:
        metrics = PerformanceMetrics(operation="parse_workbook")
        metrics.finish()

        assert metrics.end_time is not None
        assert metrics.duration_seconds >= 0

    def test_to_dict_excludes_zero_counters(self) -> None:
        metrics = PerformanceMetrics(operation="parse_workbook")
        metrics.duration_seconds = 0.25
        metrics.sheets_processed = 3

        result = metrics.to_dict()

        assert result == {
            "operation": "parse_workbook",
            "duration_seconds": "0.250",
            "sheets_processed": 3,
        }

    def test_to_dict_with_all_counters(self) -> None:
        metrics = PerformanceMetrics(
            operation="parse_workbook",
            sheets_processed=2,
            rows_processed=40,
            cells_processed=320,
            merges_applied=5,
            custom_metrics={"max_workers": 4},
        )

        result = metrics.to_dict()

        assert result["rows_processed"] == 40
        assert result["cells_processed"] == 320
        assert result["merges_applied"] == 5
        assert result["custom_metrics"] == {"max_workers": 4}


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def setup_method(self) -> None:
        self.logger = get_logger("test_logger")

    def test_get_logger_returns_structured_logger(self) -> None:
        assert isinstance(get_logger(__name__), StructuredLogger)
        assert isinstance(self.logger.logger, logging.Logger)

    def test_build_message(self) -> None:
        assert self.logger._build_message("Parsed") == "Parsed"
        assert (
            self.logger._build_message("Parsed", sheet="Sheet1", cols=5)
            == "Parsed | sheet=Sheet1, cols=5"
        )

    @patch.object(logging.Logger, "info")
    def test_info_logging(self, mock_info: MagicMock) -> None:
        self.logger.info("Parsing workbook", size_bytes=2048)

        mock_info.assert_called_once_with("Parsing workbook | size_bytes=2048")

    @patch.object(logging.Logger, "warning")
    def test_warning_logging(self, mock_warning: MagicMock) -> None:
        self.logger.warning("Skipping layout group", group=[9, 1])

        mock_warning.assert_called_once_with("Skipping layout group | group=[9, 1]")

    @patch.object(logging.Logger, "error")
    def test_error_logging(self, mock_error: MagicMock) -> None:
        self.logger.error("Parse failed", error_code="E4010")

        mock_error.assert_called_once_with(
            "Parse failed | error_code=E4010", exc_info=False
        )

    @patch.object(logging.Logger, "exception")
    def test_exception_logging(self, mock_exception: MagicMock) -> None:
        self.logger.exception("Unexpected error")

        mock_exception.assert_called_once()

    @patch.object(logging.Logger, "info")
    def test_log_performance(self, mock_info: MagicMock) -> None:
        metrics = PerformanceMetrics(operation="parse_workbook", sheets_processed=2)

        self.logger.log_performance(metrics)

        message = mock_info.call_args[0][0]
        assert message.startswith("Performance: parse_workbook")
        assert "sheets_processed=2" in message

    @patch.object(logging.Logger, "debug")
    def test_log_progress_is_debug(self, mock_debug: MagicMock) -> None:
        self.logger.log_progress("build_sheets", current=1, total=4, details="Data")

        message = mock_debug.call_args[0][0]
        assert "Progress: build_sheets" in message
        assert "25.0%" in message
        assert "details=Data" in message


class TestLogContext:
    """Tests for LogContext context manager."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_context_sets_and_restores_values(self) -> None:
        set_extra_context({"service": "api"})

        with LogContext(workbook="report.xlsx"):
            assert get_extra_context() == {
                "service": "api",
                "workbook": "report.xlsx",
            }

        assert get_extra_context() == {"service": "api"}

    def test_request_id_is_not_stored_as_extra(self) -> None:
        with LogContext(request_id="req-9", workbook="report.xlsx"):
            assert get_request_id() == "req-9"
            assert "request_id" not in get_extra_context()

        assert get_request_id() is None

    def test_nested_contexts(self) -> None:
        with LogContext(sheet="Summary"):
            with LogContext(sheet="Detail"):
                assert get_extra_context()["sheet"] == "Detail"
            assert get_extra_context()["sheet"] == "Summary"


class TestTimedOperation:
    """Tests for timed_operation context manager."""

    @patch.object(StructuredLogger, "log_performance")
    def test_logs_metrics_on_exit(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        with timed_operation(logger, "parse_workbook") as metrics:
            assert isinstance(metrics, PerformanceMetrics)
            metrics.sheets_processed = 3

        logged = mock_log.call_args[0][0]
        assert logged.operation == "parse_workbook"
        assert logged.sheets_processed == 3
        assert logged.end_time is not None

    @patch.object(StructuredLogger, "log_performance")
    def test_logs_metrics_when_body_raises(self, mock_log: MagicMock) -> None:
        logger = get_logger("test")
        with (
            pytest.raises(RuntimeError),
            timed_operation(logger, "parse_workbook"),
        ):
            raise RuntimeError("boom")

        mock_log.assert_called_once()


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_with_string_level(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_with_int_level(self) -> None:
        configure_logging(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING

    def test_structured_formatter_by_default(self) -> None:
        configure_logging()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, StructuredLogFormatter)

    def test_standard_formatter(self) -> None:
        configure_logging(use_structured_formatter=False)
        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, StructuredLogFormatter)


class TestStructuredLogFormatter:
    """Tests for StructuredLogFormatter class."""

    def setup_method(self) -> None:
        clear_context()

    def teardown_method(self) -> None:
        clear_context()

    def test_format_without_context(self) -> None:
        formatter = StructuredLogFormatter("%(message)s")
        assert formatter.format(_record()) == "Parsed workbook"

    def test_format_with_request_id_and_extra(self) -> None:
        set_request_id("req-123")
        set_extra_context({"workbook": "report.xlsx"})
        formatter = StructuredLogFormatter("%(message)s")

        result = formatter.format(_record())

        assert result == "[request_id=req-123 workbook=report.xlsx] Parsed workbook"

    def test_record_message_is_restored(self) -> None:
        set_request_id("req-123")
        record = _record()

        StructuredLogFormatter("%(message)s").format(record)

        assert record.msg == "Parsed workbook"
