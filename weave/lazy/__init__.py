"""
Weave Lazy — Public API
=========================
"""

from weave.lazy.reference import Deferred, LazyHistoryValue, LazyReference

__all__ = [
    "Deferred",
    "LazyHistoryValue",
    "LazyReference",
]
