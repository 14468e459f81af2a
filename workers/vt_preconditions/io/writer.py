"""
Writer — deterministic serialization for the precondition report.

Conventions (matching the other workers):
  - JSON: indent=2, sort_keys=True, trailing newline.
  - Directories created with mkdir(parents=True, exist_ok=True).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from vt_preconditions.io.schema import PreconditionReport

log = logging.getLogger(__name__)

REPORT_FILE = "precondition_report.json"


def write_report(report: PreconditionReport, output_dir: Path) -> Path:
    """Write ``precondition_report.json`` into *output_dir* and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / REPORT_FILE
    report_path.write_text(
        json.dumps(report.model_dump(mode="json"), indent=2, sort_keys=True)
        + "\n",
        encoding="utf-8",
    )
    log.info("Wrote %s", report_path)
    return report_path
