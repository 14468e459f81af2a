"""
Runner — top-level orchestration: (source, destination) → report.

Public entry point: ``run_preconditions()``.  ``main()`` is the CLI,
which loads both artifacts from disk first.
"""
from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Type

from vt_preconditions.core.artifact import Artifact
from vt_preconditions.core.monitor import CancellableMonitor, NULL_MONITOR, TaskMonitor
from vt_preconditions.io.loader import load_artifact
from vt_preconditions.io.schema import (
    NoReturnCountsSummary,
    PreconditionReport,
    ValidatorResultEntry,
)
from vt_preconditions.io.writer import write_report
from vt_preconditions.policy.profile import (
    NORETURN_DIFFERENCE_THRESHOLD_DEFAULT,
    NORETURN_DIFFERENCE_THRESHOLD_LABEL,
    PreconditionProfile,
)
from vt_preconditions.policy.verdict import ConditionStatus, worst_status
from vt_preconditions.validators.base import PreconditionValidator
from vt_preconditions.validators.no_return import NoReturnCountValidator
from vt_preconditions.validators.registry import DEFAULT_VALIDATORS

log = logging.getLogger(__name__)

EXIT_PASSED = 0
EXIT_WARNING = 1
EXIT_LOAD_ERROR = 2
EXIT_CANCELLED = 130


def run_preconditions(
    source: Artifact,
    destination: Artifact,
    profile: Optional[PreconditionProfile] = None,
    monitor: Optional[TaskMonitor] = None,
    validators: Sequence[Type[PreconditionValidator]] = DEFAULT_VALIDATORS,
    output_dir: Optional[Path] = None,
) -> PreconditionReport:
    """Run every validator in *validators* over one artifact pair.

    Validators run sequentially in the given order.  Once the monitor is
    cancelled, the remaining validators are recorded as CANCELLED without
    being run.

    Parameters
    ----------
    source, destination:
        Artifacts to compare.
    profile:
        Precondition profile.  Defaults to ``PreconditionProfile.v1()``.
    monitor:
        Progress / cancellation monitor.  Defaults to a no-op monitor.
    validators:
        Validator classes to run.
    output_dir:
        If provided, write ``precondition_report.json`` there.
    """
    if profile is None:
        profile = PreconditionProfile.v1()
    if monitor is None:
        monitor = NULL_MONITOR

    started_at = datetime.now(timezone.utc)
    log.info(
        "Running %d precondition(s): %s vs %s (profile %s)",
        len(validators),
        source.name,
        destination.name,
        profile.profile_id,
    )

    entries: List[ValidatorResultEntry] = []
    noreturn_counts: Optional[NoReturnCountsSummary] = None

    for validator_cls in validators:
        validator = validator_cls(source, destination, profile)
        result = validator.run(monitor)
        entries.append(
            ValidatorResultEntry(
                validator=validator.name,
                status=result.status.value,
                message=result.message,
            )
        )
        if isinstance(validator, NoReturnCountValidator) and result.details is not None:
            noreturn_counts = NoReturnCountsSummary(**result.details)

    status = worst_status(ConditionStatus(e.status) for e in entries)
    report = PreconditionReport(
        profile_id=profile.profile_id,
        source=source.name,
        destination=destination.name,
        source_sha256=getattr(source, "binary_sha256", None),
        destination_sha256=getattr(destination, "binary_sha256", None),
        threshold=profile.noreturn_difference_threshold,
        status=status.value,
        results=entries,
        noreturn_counts=noreturn_counts,
        started_at=started_at,
        ended_at=datetime.now(timezone.utc),
    )
    log.info("Preconditions finished: %s", report.status)

    if output_dir is not None:
        write_report(report, output_dir)

    return report


def exit_code_for(status: str) -> int:
    return {
        ConditionStatus.PASSED.value: EXIT_PASSED,
        ConditionStatus.WARNING.value: EXIT_WARNING,
        ConditionStatus.CANCELLED.value: EXIT_CANCELLED,
    }[status]


# ── CLI ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for vt_preconditions."""
    parser = argparse.ArgumentParser(
        description="vt_preconditions — sanity checks before correlating two programs",
    )
    parser.add_argument("source", type=Path, help="Source artifact directory")
    parser.add_argument("destination", type=Path, help="Destination artifact directory")
    parser.add_argument(
        "-t", "--threshold",
        type=float,
        default=NORETURN_DIFFERENCE_THRESHOLD_DEFAULT,
        help=f"{NORETURN_DIFFERENCE_THRESHOLD_LABEL}, as a fraction (default: %(default)s)",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help="Directory to write precondition_report.json",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        profile = PreconditionProfile(noreturn_difference_threshold=args.threshold)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        source = load_artifact(args.source)
        destination = load_artifact(args.destination)
    except (FileNotFoundError, ValueError) as exc:
        log.error("%s", exc)
        return EXIT_LOAD_ERROR

    # Worker thread; Ctrl-C only flips the monitor, checked between functions.
    monitor = CancellableMonitor()
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(
            run_preconditions,
            source,
            destination,
            profile,
            monitor,
            DEFAULT_VALIDATORS,
            args.output_dir,
        )
        try:
            report = future.result()
        except KeyboardInterrupt:
            log.warning("Interrupted, cancelling")
            monitor.cancel()
            report = future.result()

    for entry in report.results:
        print(f"{entry.validator}: {entry.status}")
        if entry.message:
            print(entry.message, end="")
    if args.output_dir:
        print(f"Report written to: {args.output_dir}")

    return exit_code_for(report.status)


if __name__ == "__main__":
    sys.exit(main())
