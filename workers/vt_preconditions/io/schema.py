"""
Schema — Pydantic models for vt_preconditions inputs and outputs.

Inputs per artifact directory:
  1. artifact.json     — artifact identity (name, sha256, image base).
  2. functions.jsonl   — one record per function.

Output per run:
  precondition_report.json — per-validator results + provenance.

Runtime contract fields (present in report):
  package_name, checker_version, schema_version, profile_id.
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from vt_preconditions import CHECKER_VERSION, PACKAGE_NAME, SCHEMA_VERSION


# ═══════════════════════════════════════════════════════════════════════════════
# Inputs
# ═══════════════════════════════════════════════════════════════════════════════

class ArtifactInfo(BaseModel):
    """Identity of one analyzed program (artifact.json)."""

    name: str = Field(..., min_length=1)
    binary_sha256: Optional[str] = None


class ArtifactFunctionEntry(BaseModel):
    """One function record from functions.jsonl.

    Either ``entry_va`` or ``entry_hex`` must be present; ``entry_hex``
    accepts the Ghidra spellings ``"00101159"``, ``"0x00101159"``, ``"101159"``.
    """

    entry_va: Optional[int] = None
    entry_hex: Optional[str] = None
    name: str = ""

    no_return: bool = False
    # False for placeholder entries (import table, external block) that have
    # no decoded instruction at their entry address.
    entry_insn_decoded: bool = True

    @model_validator(mode="after")
    def resolve_entry(self) -> "ArtifactFunctionEntry":
        if self.entry_va is None:
            if not self.entry_hex:
                raise ValueError("function row needs entry_va or entry_hex")
            self.entry_va = int(self.entry_hex.strip().lower(), 16)
        if self.entry_va < 0:
            raise ValueError(f"entry_va must be non-negative, got {self.entry_va}")
        return self


# ═══════════════════════════════════════════════════════════════════════════════
# Report (precondition_report.json)
# ═══════════════════════════════════════════════════════════════════════════════

class ValidatorResultEntry(BaseModel):
    """Outcome of one validator."""

    validator: str
    status: str                 # PASSED | WARNING | CANCELLED
    message: str = ""


class NoReturnCountsSummary(BaseModel):
    """Metric values behind the no-return decision (completed runs only)."""

    source: int
    destination: int
    source_synthetic: int = 0
    destination_synthetic: int = 0
    percent_difference: float
    threshold: float


class PreconditionReport(BaseModel):
    """Top-level report for one (source, destination) pair."""

    package_name: str = PACKAGE_NAME
    checker_version: str = CHECKER_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str

    source: str
    destination: str
    source_sha256: Optional[str] = None
    destination_sha256: Optional[str] = None

    threshold: float
    status: str                 # worst of results: CANCELLED > WARNING > PASSED
    results: List[ValidatorResultEntry] = Field(default_factory=list)
    noreturn_counts: Optional[NoReturnCountsSummary] = None

    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: Optional[datetime] = None
