"""
Weave Config — Public API
===========================
"""

from weave.config.settings import (
    DEFAULT_MAX_CHAIN_DEPTH,
    EngineSettings,
    ErrorPolicy,
)

__all__ = [
    "DEFAULT_MAX_CHAIN_DEPTH",
    "EngineSettings",
    "ErrorPolicy",
]
