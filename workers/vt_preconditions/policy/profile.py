"""
Profile — frozen configuration for the precondition checks.

All tunable parameters live here.  The profile is immutable at
construction time and threaded through every validator so that results
are reproducible given the same profile + inputs.
"""
from __future__ import annotations

import math
from dataclasses import dataclass


NORETURN_DIFFERENCE_THRESHOLD_LABEL = (
    "Maximum percentage difference between number of no-return functions "
    "in each program"
)
NORETURN_DIFFERENCE_THRESHOLD_DEFAULT = 0.0


@dataclass(frozen=True)
class PreconditionProfile:
    """Immutable configuration for the precondition checks (v1)."""

    # ── No-return count check ─────────────────────────────────────────────
    # Fraction in [0, 1]; 0.0 warns on any difference.
    noreturn_difference_threshold: float = NORETURN_DIFFERENCE_THRESHOLD_DEFAULT

    # ── Identity ──────────────────────────────────────────────────────────
    profile_id: str = "vt-preconditions-v1"

    def __post_init__(self) -> None:
        t = self.noreturn_difference_threshold
        if isinstance(t, bool) or not isinstance(t, (int, float)):
            raise ValueError(
                f"noreturn_difference_threshold must be a number, got {t!r}"
            )
        if math.isnan(t) or not 0.0 <= t <= 1.0:
            raise ValueError(
                f"noreturn_difference_threshold must be within [0, 1], got {t!r}"
            )

    @classmethod
    def v1(cls) -> PreconditionProfile:
        """Return the canonical v1 profile with all defaults."""
        return cls()
