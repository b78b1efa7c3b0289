"""
Weave History — Public API
============================
What happened, in the order it happened. Never rewritten.
"""

from weave.history.log import EmissionRecord, EventHistory
from weave.history.query import HistoryQuery

__all__ = [
    "EmissionRecord",
    "EventHistory",
    "HistoryQuery",
]
