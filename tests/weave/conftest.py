"""
Shared fixtures for the Weave test suite.

Engines built here never exit the process: failures are collected by
CollectingErrorHandler so tests can assert on them.
"""

from datetime import datetime, timezone

import pytest

from weave.bus.signals import SignalBus
from weave.config.settings import EngineSettings
from weave.diagnostics.records import LogMode
from weave.engine.engine import OrchestrationEngine
from weave.time.clock import FixedClock

FIXED_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class CollectingErrorHandler:
    """Records (error, context) pairs instead of acting on them."""

    def __init__(self):
        self.failures = []

    def handle(self, error, context):
        self.failures.append((error, context))

    @property
    def errors(self):
        return [error for error, _ in self.failures]


class CollectingRuleLogger:
    def __init__(self):
        self.records = []

    def log(self, record):
        self.records.append(record)


@pytest.fixture
def clock():
    return FixedClock(FIXED_NOW)


@pytest.fixture
def bus(clock):
    return SignalBus(clock=clock)


@pytest.fixture
def errors():
    return CollectingErrorHandler()


@pytest.fixture
def rule_log():
    return CollectingRuleLogger()


@pytest.fixture
def engine(bus, errors, rule_log):
    return OrchestrationEngine(
        bus,
        error_handler=errors,
        rule_logger=rule_log,
        settings=EngineSettings(log_mode=LogMode.DEBUG),
    )
