"""
No-return functions validator.

Two artifacts analyzed with the same settings should flag roughly the
same number of functions as non-returning.  A large gap usually means one
side was analyzed differently, so correlating them is likely to go badly.
"""
from __future__ import annotations

from vt_preconditions.core.artifact import Artifact
from vt_preconditions.core.counting import count_no_return_functions
from vt_preconditions.core.monitor import NULL_MONITOR, TaskMonitor
from vt_preconditions.policy.profile import PreconditionProfile
from vt_preconditions.policy.verdict import (
    ConditionStatus,
    build_no_return_warning,
    exceeds_threshold,
    percent_difference,
)
from vt_preconditions.validators.base import ConditionResult, PreconditionValidator


class NoReturnCountValidator(PreconditionValidator):

    NAME = "Number Of No-Returns Functions Validator"
    DESCRIPTION = (
        "Makes sure the two programs have nearly the same number of "
        "no-return functions."
    )

    def do_run(self, monitor: TaskMonitor) -> ConditionResult:
        threshold = self.profile.noreturn_difference_threshold

        source_count = count_no_return_functions(self.source, monitor)
        if source_count.cancelled:
            return ConditionResult.cancelled()
        destination_count = count_no_return_functions(self.destination, monitor)
        if destination_count.cancelled or monitor.is_cancelled():
            return ConditionResult.cancelled()

        n_source = source_count.n_no_return
        n_destination = destination_count.n_no_return
        percent = percent_difference(n_source, n_destination)
        details = {
            "source": n_source,
            "destination": n_destination,
            "source_synthetic": source_count.n_synthetic,
            "destination_synthetic": destination_count.n_synthetic,
            "percent_difference": percent,
            "threshold": threshold,
        }

        if exceeds_threshold(percent, threshold):
            message = build_no_return_warning(
                self.source.name,
                self.destination.name,
                n_source,
                n_destination,
                percent,
                threshold,
            )
            return ConditionResult(ConditionStatus.WARNING, message, details)

        return ConditionResult.passed(details)


def validate_no_return_counts(
    source: Artifact,
    destination: Artifact,
    threshold: float = 0.0,
    monitor: TaskMonitor = NULL_MONITOR,
) -> ConditionResult:
    """Run the no-return check without building a profile by hand."""
    profile = PreconditionProfile(noreturn_difference_threshold=threshold)
    return NoReturnCountValidator(source, destination, profile).run(monitor)
