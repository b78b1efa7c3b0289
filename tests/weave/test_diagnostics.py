"""
Weave Diagnostics and Handling Tests
======================================
Covers:
- Log mode filtering
- StdlibRuleLogger levels
- FatalErrorHandler and LoggingErrorHandler behavior
"""

import logging

import pytest

from weave.diagnostics.loggers import Diagnostics, StdlibRuleLogger
from weave.diagnostics.records import LogMode, LogType, RuleLog
from weave.handling.handlers import ErrorContext, FatalErrorHandler, LoggingErrorHandler


class Sink:
    def __init__(self):
        self.records = []

    def log(self, record):
        self.records.append(record)


def emit_all(diagnostics):
    diagnostics.creation("c")
    diagnostics.destruction("d")
    diagnostics.interaction("i")
    diagnostics.error("e")


# ══════════════════════════════════════════════════════════════
# FILTERING
# ══════════════════════════════════════════════════════════════

class TestDiagnostics:
    def test_off_logs_nothing(self):
        sink = Sink()
        emit_all(Diagnostics(LogMode.OFF, sink))
        assert sink.records == []

    def test_debug_logs_everything(self):
        sink = Sink()
        emit_all(Diagnostics(LogMode.DEBUG, sink))
        assert [record.type for record in sink.records] == [
            LogType.CREATION, LogType.DESTRUCTION, LogType.INTERACTION, LogType.ERROR,
        ]

    def test_custom_default_skips_destruction(self):
        sink = Sink()
        emit_all(Diagnostics(LogMode.CUSTOM, sink))
        assert LogType.DESTRUCTION not in {record.type for record in sink.records}
        assert len(sink.records) == 3

    def test_custom_selected_types(self):
        sink = Sink()
        emit_all(Diagnostics("custom", sink, log_types=["error"]))
        assert sink.records == [RuleLog(LogType.ERROR, "e")]

    def test_can_log(self):
        diagnostics = Diagnostics(LogMode.CUSTOM, Sink(), [LogType.CREATION])
        assert diagnostics.can_log(LogType.CREATION)
        assert not diagnostics.can_log(LogType.ERROR)


class TestStdlibRuleLogger:
    def test_levels_and_format(self, caplog):
        caplog.set_level(logging.INFO, logger="weave.rules")
        rule_logger = StdlibRuleLogger()

        rule_logger.log(RuleLog(LogType.CREATION, "built Account"))
        rule_logger.log(RuleLog(LogType.ERROR, "it broke"))

        messages = [(record.levelno, record.getMessage()) for record in caplog.records]
        assert (logging.INFO, "[creation] built Account") in messages
        assert (logging.ERROR, "[error] it broke") in messages


# ══════════════════════════════════════════════════════════════
# ERROR HANDLERS
# ══════════════════════════════════════════════════════════════

CONTEXT = ErrorContext(rule=None, event="signup", event_args=("a@b.com",))


class TestFatalErrorHandler:
    def test_exits_with_failure_code(self, caplog):
        with pytest.raises(SystemExit) as exc_info:
            FatalErrorHandler().handle(ValueError("bad"), CONTEXT)

        assert exc_info.value.code == 1
        critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
        assert "signup" in critical[0].getMessage()

    def test_graceful_exit_code(self):
        with pytest.raises(SystemExit) as exc_info:
            FatalErrorHandler(exit_gracefully=True).handle(ValueError("bad"), CONTEXT)
        assert exc_info.value.code == 0


class TestLoggingErrorHandler:
    def test_logs_and_returns(self, caplog):
        LoggingErrorHandler().handle(ValueError("bad input"), CONTEXT)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.name == "weave.handling"
        assert "ValueError: bad input" in record.getMessage()
        assert record.exc_info[0] is ValueError

    def test_custom_logger_name(self, caplog):
        LoggingErrorHandler("app.rules").handle(RuntimeError("x"), CONTEXT)
        assert caplog.records[-1].name == "app.rules"
