"""
Weave Time — Public API
=========================
"""

from weave.time.clock import Clock, FixedClock, SystemClock

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
]
