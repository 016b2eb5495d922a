"""BestSub Application Package — subscription management backend.

Invariants:
    - Package root holds only the version constant (no import side-effects)

Design Decisions:
    - Explicit imports only, no star exports
"""

__version__ = "1.0.0"
