"""
Weave Engine — Public API
===========================
Rules declare. The engine evaluates. The registry remembers.
"""

from weave.engine.builders import CreationBuilder, InteractionBuilder, RuleGateway
from weave.engine.engine import OrchestrationEngine
from weave.engine.rules import CreationRule, InteractionRule

__all__ = [
    # ── Engine ────────────────────────────────────────────────
    "OrchestrationEngine",
    # ── Rules ─────────────────────────────────────────────────
    "CreationRule",
    "InteractionRule",
    # ── Builders ──────────────────────────────────────────────
    "RuleGateway",
    "CreationBuilder",
    "InteractionBuilder",
]
