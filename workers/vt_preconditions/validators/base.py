"""
Base — shared contract for every precondition validator.

A validator is built for one (source, destination) pair and run once.
``run`` is the template method: it short-circuits on a monitor that is
already cancelled, delegates to ``do_run``, and logs the outcome.
Subclasses only implement ``do_run`` plus their name and description.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from vt_preconditions.core.artifact import Artifact
from vt_preconditions.core.monitor import NULL_MONITOR, TaskMonitor
from vt_preconditions.policy.profile import PreconditionProfile
from vt_preconditions.policy.verdict import ConditionStatus

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConditionResult:
    """Outcome of one validator run.

    ``message`` is empty unless ``status`` is WARNING.  ``details`` carries
    the metric values behind the decision for reporting; it is None when
    the check did not complete.
    """

    status: ConditionStatus
    message: str = ""
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def passed(cls, details: Optional[Dict[str, Any]] = None) -> ConditionResult:
        return cls(ConditionStatus.PASSED, "", details)

    @classmethod
    def cancelled(cls) -> ConditionResult:
        return cls(ConditionStatus.CANCELLED, "")


class PreconditionValidator(ABC):
    """Compares one property of *source* against *destination*."""

    NAME: str = ""
    DESCRIPTION: str = ""

    def __init__(
        self,
        source: Artifact,
        destination: Artifact,
        profile: Optional[PreconditionProfile] = None,
    ) -> None:
        self.source = source
        self.destination = destination
        self.profile = profile if profile is not None else PreconditionProfile.v1()

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def description(self) -> str:
        return self.DESCRIPTION

    def run(self, monitor: TaskMonitor = NULL_MONITOR) -> ConditionResult:
        if monitor.is_cancelled():
            log.info("%s: skipped, monitor already cancelled", self.name)
            return ConditionResult.cancelled()

        result = self.do_run(monitor)

        if result.status == ConditionStatus.WARNING:
            log.warning("%s: %s", self.name, result.message.strip())
        else:
            log.info("%s: %s", self.name, result.status.value)
        return result

    @abstractmethod
    def do_run(self, monitor: TaskMonitor) -> ConditionResult:
        ...
