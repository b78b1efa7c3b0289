"""
Weave Engine — Routing Tests
==============================
Covers:
- Correlation isolation
- Requirements against history
- once() retirement, including during re-entrant delivery
- then-callbacks deferred until the outermost delivery finishes
- Chain depth guard
- Error handler escalation and default policies
"""

import pytest

from weave.bus.signals import SignalBus
from weave.config.settings import EngineSettings, ErrorPolicy
from weave.diagnostics.records import LogMode
from weave.engine.engine import OrchestrationEngine
from weave.errors import ChainDepthExceeded
from weave.primitives.path import PathResolver

FIRST = PathResolver().index(0)


class Widget:
    def __init__(self, label=None):
        self.label = label


def counting_rule(engine, event, correlation="c", **clauses):
    """Creation rule whose then-callback counts firings."""
    fired = []
    builder = engine.upon(event).build(Widget).using(FIRST).correlation(correlation)
    if clauses.get("once"):
        builder = builder.once()
    if "requirements" in clauses:
        builder = builder.requirements(clauses["requirements"])
    if "when" in clauses:
        builder = builder.when(clauses["when"]).equals(clauses["equals"])
    builder.then(fired.append)
    return fired


# ══════════════════════════════════════════════════════════════
# CORRELATION
# ══════════════════════════════════════════════════════════════

class TestCorrelation:
    def test_rule_ignores_other_correlations(self, engine):
        fired = counting_rule(engine, "evt", correlation="A")

        engine.emit("evt", "B", "x")
        assert fired == []

        engine.emit("evt", "A", "y")
        assert [widget.label for widget in fired] == ["y"]

    def test_history_records_all_correlations(self, engine):
        counting_rule(engine, "evt", correlation="A")

        engine.emit("evt", "B", "x")
        engine.emit("evt", "A", "y")

        assert len(engine.history) == 2

    def test_two_correlations_route_independently(self, engine):
        first = counting_rule(engine, "evt", correlation="A")
        second = counting_rule(engine, "evt", correlation="B")

        engine.emit("evt", "A", 1)
        engine.emit("evt", "B", 2)
        engine.emit("evt", "B", 3)

        assert [widget.label for widget in first] == [1]
        assert [widget.label for widget in second] == [2, 3]


# ══════════════════════════════════════════════════════════════
# REQUIREMENTS
# ══════════════════════════════════════════════════════════════

class TestRequirements:
    def test_waits_for_required_event(self, engine):
        engine.track("login")
        fired = counting_rule(engine, "checkout", requirements=["login"])

        engine.emit("checkout", "c", "early")
        assert fired == []

        engine.emit("login", "other-correlation")
        engine.emit("checkout", "c", "late")

        assert [widget.label for widget in fired] == ["late"]

    def test_untracked_events_are_not_in_history(self, engine):
        fired = counting_rule(engine, "checkout", requirements=["login"])

        engine.emit("login", "c")
        engine.emit("checkout", "c", "x")

        assert fired == []
        assert not engine.history.has_occurred("login")

    def test_all_requirements_needed(self, engine):
        engine.track("login", "verified")
        fired = counting_rule(engine, "checkout", requirements=["login", "verified"])

        engine.emit("login", "c")
        engine.emit("checkout", "c", 1)
        engine.emit("verified", "c")
        engine.emit("checkout", "c", 2)

        assert [widget.label for widget in fired] == [2]


# ══════════════════════════════════════════════════════════════
# ONCE
# ══════════════════════════════════════════════════════════════

class TestOnce:
    def test_fires_only_first_time(self, engine):
        fired = counting_rule(engine, "evt", once=True)

        engine.emit("evt", "c", 1)
        engine.emit("evt", "c", 2)
        engine.emit("evt", "c", 3)

        assert [widget.label for widget in fired] == [1]
        assert engine.registry.get(Widget).label == 1

    def test_rejected_emission_does_not_consume_once(self, engine):
        fired = counting_rule(engine, "evt", once=True, when=FIRST, equals="go")

        engine.emit("evt", "c", "wait")
        engine.emit("evt", "c", "go")
        engine.emit("evt", "c", "go")

        assert [widget.label for widget in fired] == ["go"]

    def test_other_rules_keep_firing(self, engine):
        once = counting_rule(engine, "evt", once=True)
        always = counting_rule(engine, "evt")

        engine.emit("evt", "c", 1)
        engine.emit("evt", "c", 2)

        assert len(once) == 1
        assert len(always) == 2

    def test_rule_list_is_not_shrunk(self, engine):
        counting_rule(engine, "evt", once=True)
        engine.emit("evt", "c", 1)
        assert len(engine.contracts) == 1

    def test_retired_during_reentrant_delivery(self, engine):
        engine.upon("X").build(Widget, token="echo").correlation("c") \
            .once().emit("X").then()
        fired = []
        engine.upon("X").build(Widget, token="listener").correlation("c") \
            .once().then(fired.append)

        engine.emit("X", "c", 1)

        assert len(fired) == 1
        assert len(engine.history) == 2

    def test_once_interaction_retired_during_reentrant_delivery(self, engine):
        calls = []

        class Counter:
            def hit(self):
                calls.append("hit")

        engine.registry.register(Counter, Counter)
        engine.upon("X").build(Widget, token="echo").correlation("c") \
            .once().emit("X").then()
        engine.upon("X").use(Counter).call("hit").correlation("c").once().then()

        engine.emit("X", "c")

        assert calls == ["hit"]


# ══════════════════════════════════════════════════════════════
# CALLBACK ORDERING
# ══════════════════════════════════════════════════════════════

class TestCallbackOrdering:
    def test_creation_then_runs_after_whole_delivery(self, engine):
        order = []

        def follow_up():
            order.append("follow-up")
            return object()

        def sibling():
            order.append("sibling")
            return object()

        engine.upon("signup").build(Widget).correlation("c") \
            .emit("created").then(lambda widget: order.append("then"))
        engine.upon("created").build(follow_up).correlation("c").then()
        engine.upon("signup").build(sibling).correlation("c").then()

        engine.emit("signup", "c")
        order.append("emit returned")

        assert order == ["follow-up", "sibling", "then", "emit returned"]

    def test_interaction_then_runs_after_sibling_rules(self, engine):
        order = []

        class Service:
            def first(self):
                order.append("first")
                return "done"

            def second(self):
                order.append("second")

        engine.registry.register(Service, Service)
        engine.upon("go").use(Service).call("first").correlation("c") \
            .then(lambda result: order.append(f"then:{result}"))
        engine.upon("go").use(Service).call("second").correlation("c").then()

        engine.emit("go", "c")

        assert order == ["first", "second", "then:done"]

    def test_callbacks_keep_registration_order(self, engine):
        order = []
        engine.upon("go").build(Widget, token="a").correlation("c") \
            .then(lambda widget: order.append("a"))
        engine.upon("go").build(Widget, token="b").correlation("c") \
            .then(lambda widget: order.append("b"))

        engine.emit("go", "c")

        assert order == ["a", "b"]

    def test_callback_emit_is_delivered(self, engine):
        seen = []
        engine.track("welcomed")
        engine.bus.on("welcomed", lambda envelope: seen.append(envelope.payload))
        engine.upon("signup").build(Widget).correlation("c") \
            .then(lambda widget: engine.emit("welcomed", "c", "hi"))

        engine.emit("signup", "c")

        assert seen == [("hi",)]
        assert engine.history.has_occurred("welcomed")


# ══════════════════════════════════════════════════════════════
# CHAIN DEPTH
# ══════════════════════════════════════════════════════════════

class TestChainDepth:
    def test_runaway_chain_is_stopped(self, bus, errors):
        engine = OrchestrationEngine(
            bus,
            error_handler=errors,
            settings=EngineSettings(log_mode=LogMode.OFF, max_chain_depth=5),
        )
        engine.upon("ping").build(Widget).correlation("c").emit("ping").then()

        engine.emit("ping", "c")

        assert len(engine.history) == 5
        assert len(errors.failures) == 1
        error = errors.errors[0]
        assert isinstance(error, ChainDepthExceeded)
        assert error.limit == 5
        assert error.event == "ping"

    def test_depth_resets_after_delivery(self, bus, errors):
        engine = OrchestrationEngine(
            bus,
            error_handler=errors,
            settings=EngineSettings(log_mode=LogMode.OFF, max_chain_depth=2),
        )
        engine.upon("a").build(Widget).correlation("c").emit("b").then()
        engine.track("b")

        for _ in range(5):
            engine.emit("a", "c")

        assert errors.failures == []
        assert len(engine.history) == 10


# ══════════════════════════════════════════════════════════════
# ERROR HANDLERS
# ══════════════════════════════════════════════════════════════

def _exploding_engine(**settings):
    engine = OrchestrationEngine(
        SignalBus(), settings=EngineSettings(log_mode=LogMode.OFF, **settings)
    )

    def explode():
        raise RuntimeError("boom")

    engine.upon("boot").build(explode, token="exploding").correlation("sys").then()
    return engine


class TestErrorHandlers:
    def test_raising_handler_aborts_delivery(self, engine):
        class Abort(Exception):
            pass

        class Escalate:
            def handle(self, error, context):
                raise Abort() from error

        def explode():
            raise RuntimeError("boom")

        later = counting_rule(engine, "boot", correlation="sys")
        engine.upon("boot").build(explode, token="x").correlation("sys") \
            .catch(Escalate()).then()
        after = counting_rule(engine, "boot", correlation="sys")

        with pytest.raises(Abort):
            engine.emit("boot", "sys", "v")

        assert len(later) == 1
        assert after == []

    def test_default_policy_exits_with_failure(self):
        engine = _exploding_engine()
        with pytest.raises(SystemExit) as exc_info:
            engine.emit("boot", "sys")
        assert exc_info.value.code == 1

    def test_graceful_exit(self):
        engine = _exploding_engine(exit_gracefully=True)
        with pytest.raises(SystemExit) as exc_info:
            engine.emit("boot", "sys")
        assert exc_info.value.code == 0

    def test_log_policy_continues(self, caplog):
        engine = _exploding_engine(error_policy=ErrorPolicy.LOG)

        engine.emit("boot", "sys")

        assert any("boom" in record.getMessage() for record in caplog.records)
        assert engine.history.has_occurred("boot")
