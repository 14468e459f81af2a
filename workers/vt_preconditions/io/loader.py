"""
Loader — read an artifact directory into a ``ProgramArtifact``.

Directory layout:
    <artifact_dir>/artifact.json
    <artifact_dir>/functions.jsonl

Missing files and malformed records raise; a bad artifact is the
provider's fault and the check cannot proceed without it.  The single
exception is a JSONL line that is not valid JSON at all, which is logged
and skipped the same way the other workers treat their JSONL inputs.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Set

from pydantic import ValidationError

from vt_preconditions.core.artifact import FunctionRecord, ProgramArtifact
from vt_preconditions.io.schema import ArtifactFunctionEntry, ArtifactInfo

log = logging.getLogger(__name__)

ARTIFACT_INFO_FILE = "artifact.json"
FUNCTIONS_FILE = "functions.jsonl"


def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _load_jsonl(path: Path) -> List[tuple[int, dict]]:
    """Read a JSONL file; returns (lineno, row) pairs."""
    rows: List[tuple[int, dict]] = []
    with open(path, "r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, 1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                rows.append((lineno, json.loads(stripped)))
            except json.JSONDecodeError as exc:
                log.warning("JSONL parse error at %s:%d — %s", path, lineno, exc)
    return rows


def load_artifact_info(artifact_dir: Path) -> ArtifactInfo:
    path = artifact_dir / ARTIFACT_INFO_FILE
    if not path.is_file():
        raise FileNotFoundError(f"{ARTIFACT_INFO_FILE} not found in {artifact_dir}")
    try:
        return ArtifactInfo.model_validate(_load_json(path))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Malformed {path}: {exc}") from exc


def load_function_entries(artifact_dir: Path) -> List[ArtifactFunctionEntry]:
    path = artifact_dir / FUNCTIONS_FILE
    if not path.is_file():
        raise FileNotFoundError(f"{FUNCTIONS_FILE} not found in {artifact_dir}")
    entries: List[ArtifactFunctionEntry] = []
    # One function per entry address; a repeat would let a placeholder row
    # borrow the decoded instruction of a real one.
    seen: Set[int] = set()
    for lineno, row in _load_jsonl(path):
        try:
            entry = ArtifactFunctionEntry.model_validate(row)
        except ValidationError as exc:
            raise ValueError(f"Invalid function row at {path}:{lineno}: {exc}") from exc
        va = entry.entry_va
        if va in seen:
            raise ValueError(f"duplicate function entry {va:#x} at {path}:{lineno}")
        seen.add(va)  # type: ignore[arg-type]
        entries.append(entry)
    return entries


def load_artifact(artifact_dir: Path) -> ProgramArtifact:
    """Build a ``ProgramArtifact`` from *artifact_dir*.

    Every function whose ``entry_insn_decoded`` is true contributes its
    entry address to the decoded-instruction set.
    """
    artifact_dir = Path(artifact_dir)
    if not artifact_dir.is_dir():
        raise FileNotFoundError(f"Artifact directory not found: {artifact_dir}")

    info = load_artifact_info(artifact_dir)
    entries = load_function_entries(artifact_dir)

    functions = [
        FunctionRecord(entry_va=e.entry_va, name=e.name, no_return=e.no_return)  # type: ignore[arg-type]
        for e in entries
    ]
    instructions = [e.entry_va for e in entries if e.entry_insn_decoded]

    artifact = ProgramArtifact(
        name=info.name,
        functions=functions,
        instruction_addresses=instructions,  # type: ignore[arg-type]
        binary_sha256=info.binary_sha256,
    )
    log.info(
        "Loaded artifact %s: %d functions (%d without decoded entry)",
        info.name,
        len(functions),
        len(functions) - len(instructions),
    )
    return artifact
