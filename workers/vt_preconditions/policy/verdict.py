"""
Verdict — status vocabulary and the decision math for precondition checks.

Pure functions; no IO, no state.
"""
from __future__ import annotations

from enum import Enum, unique


@unique
class ConditionStatus(str, Enum):
    PASSED = "PASSED"
    WARNING = "WARNING"
    CANCELLED = "CANCELLED"


# Higher rank wins when several results are folded into one report status.
_STATUS_RANK = {
    ConditionStatus.PASSED: 0,
    ConditionStatus.WARNING: 1,
    ConditionStatus.CANCELLED: 2,
}


def worst_status(statuses) -> ConditionStatus:
    """Fold statuses into one; an empty sequence is PASSED."""
    worst = ConditionStatus.PASSED
    for status in statuses:
        if _STATUS_RANK[status] > _STATUS_RANK[worst]:
            worst = status
    return worst


def percent_difference(n_source: int, n_destination: int) -> float:
    """Relative difference ``|a - b| / max(a, b)`` as a fraction.

    Both counts zero means there is nothing to disagree about: 0.0.
    """
    if n_source < 0 or n_destination < 0:
        raise ValueError(
            f"counts must be non-negative, got {n_source} and {n_destination}"
        )
    denom = max(n_source, n_destination)
    if denom == 0:
        return 0.0
    return abs(n_source - n_destination) / denom


def exceeds_threshold(percent: float, threshold: float) -> bool:
    """Strictly greater: a difference equal to the threshold passes."""
    return percent > threshold


def format_percent(fraction: float) -> str:
    """``0.123`` → ``"12.3%"``."""
    return f"{fraction * 100.0:.1f}%"


def build_no_return_warning(
    source_name: str,
    destination_name: str,
    n_source: int,
    n_destination: int,
    percent: float,
    threshold: float,
) -> str:
    """Two-line warning naming both artifacts, their counts and the percentages."""
    return (
        f"{source_name} and {destination_name} have {n_source} and "
        f"{n_destination} no-return functions respectively,\n"
        f"which is a {format_percent(percent)} difference, greater than "
        f"the threshold of {format_percent(threshold)}\n"
    )
