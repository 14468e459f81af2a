"""
Counting — the per-artifact pass behind the no-return precondition.

Pure with respect to the artifact: reads functions and instruction
lookups, writes only to the monitor.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from vt_preconditions.core.artifact import Artifact
from vt_preconditions.core.monitor import TaskMonitor

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoReturnCount:
    """Outcome of one counting pass over a single artifact."""

    artifact_name: str
    n_visited: int
    n_synthetic: int
    n_no_return: int
    cancelled: bool = False


def count_no_return_functions(
    artifact: Artifact,
    monitor: TaskMonitor,
) -> NoReturnCount:
    """Count no-return functions that have real code at their entry.

    Functions are visited in the artifact's own order.  A function with no
    decoded instruction at its entry address is a placeholder (typically an
    import address table entry) and is skipped, whatever its no-return flag.

    Cancellation is checked before each function; when observed, the pass
    stops and returns the partial count with ``cancelled=True``.  Callers
    must not base a decision on a cancelled count.
    """
    n_visited = 0
    n_synthetic = 0
    n_no_return = 0
    cancelled = False

    monitor.set_indeterminate(True)
    for func in artifact.iter_functions():
        if monitor.is_cancelled():
            cancelled = True
            break
        monitor.increment_progress(1)
        n_visited += 1

        if not artifact.has_instruction_at(func.entry_va):
            n_synthetic += 1
            continue
        if func.no_return:
            n_no_return += 1

    log.debug(
        "%s: %d functions visited, %d synthetic, %d no-return%s",
        artifact.name,
        n_visited,
        n_synthetic,
        n_no_return,
        " (cancelled)" if cancelled else "",
    )
    return NoReturnCount(
        artifact_name=artifact.name,
        n_visited=n_visited,
        n_synthetic=n_synthetic,
        n_no_return=n_no_return,
        cancelled=cancelled,
    )
