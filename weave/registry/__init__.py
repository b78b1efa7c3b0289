"""
Weave Registry — Public API
=============================
Where instances live, how long they live, and who can see them.
"""

from weave.registry.container import InstanceRegistry, Registration
from weave.registry.options import Lifecycle, RegistrationOptions

__all__ = [
    "InstanceRegistry",
    "Registration",
    "Lifecycle",
    "RegistrationOptions",
]
