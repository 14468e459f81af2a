"""
Test fixtures for vt_preconditions.

All fixtures are pure-Python: no real binaries, no Ghidra.  Artifacts are
built in memory, or written to ``tmp_path`` in the on-disk layout the
loader reads.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from vt_preconditions.core.artifact import FunctionRecord, ProgramArtifact
from vt_preconditions.core.monitor import CancellableMonitor

TEST_SHA256 = "a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2"

_BASE_VA = 0x101000


# ═══════════════════════════════════════════════════════════════════════════════
# Monitors
# ═══════════════════════════════════════════════════════════════════════════════

class StopAfterMonitor(CancellableMonitor):
    """Cancels itself once *limit* units of progress have been reported."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit

    def increment_progress(self, n: int = 1) -> None:
        super().increment_progress(n)
        if self.progress >= self.limit:
            self.cancel()


# ═══════════════════════════════════════════════════════════════════════════════
# Builders
# ═══════════════════════════════════════════════════════════════════════════════

def build_artifact(
    name: str,
    n_functions: int,
    n_no_return: int,
    n_synthetic: int = 0,
    n_synthetic_no_return: int = 0,
) -> ProgramArtifact:
    """Artifact with *n_functions* real functions, the first *n_no_return*
    of them no-return, followed by *n_synthetic* placeholder entries (no
    decoded instruction), the first *n_synthetic_no_return* flagged no-return.
    """
    functions: List[FunctionRecord] = []
    instructions: List[int] = []
    for i in range(n_functions):
        va = _BASE_VA + i * 0x10
        functions.append(FunctionRecord(va, f"FUN_{va:08x}", no_return=i < n_no_return))
        instructions.append(va)
    for i in range(n_synthetic):
        va = 0x200000 + i * 0x8
        functions.append(
            FunctionRecord(va, f"import_{i}", no_return=i < n_synthetic_no_return)
        )
    return ProgramArtifact(name, functions, instructions)


def write_artifact_dir(
    root: Path,
    name: str,
    rows: List[Dict],
    binary_sha256: Optional[str] = TEST_SHA256,
) -> Path:
    """Write ``artifact.json`` + ``functions.jsonl`` under ``root/name``."""
    d = root / name
    d.mkdir(parents=True, exist_ok=True)
    info = {"name": name}
    if binary_sha256 is not None:
        info["binary_sha256"] = binary_sha256
    (d / "artifact.json").write_text(json.dumps(info), encoding="utf-8")
    with open(d / "functions.jsonl", "w", encoding="utf-8") as fh:
        for row in rows:
            fh.write(json.dumps(row) + "\n")
    return d


def rows_for(n_functions: int, n_no_return: int, n_synthetic: int = 0) -> List[Dict]:
    rows = [
        {
            "entry_va": _BASE_VA + i * 0x10,
            "name": f"FUN_{_BASE_VA + i * 0x10:08x}",
            "no_return": i < n_no_return,
        }
        for i in range(n_functions)
    ]
    rows += [
        {
            "entry_hex": f"{0x200000 + i * 0x8:08x}",
            "name": f"import_{i}",
            "no_return": True,
            "entry_insn_decoded": False,
        }
        for i in range(n_synthetic)
    ]
    return rows


# ═══════════════════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def matching_pair():
    """Scenario A: 10 no-return out of 100 on both sides."""
    return build_artifact("src.elf", 100, 10), build_artifact("dst.elf", 100, 10)


@pytest.fixture
def diverging_pair():
    """Scenario B: 10 vs 20 no-return out of 100."""
    return build_artifact("src.elf", 100, 10), build_artifact("dst.elf", 100, 20)


@pytest.fixture
def empty_pair():
    """Scenario C: no qualifying functions at all."""
    return build_artifact("src.elf", 0, 0), build_artifact("dst.elf", 0, 0)


@pytest.fixture
def artifact_dirs(tmp_path: Path) -> Dict[str, Path]:
    """On-disk scenario B, with two import stubs on the source side."""
    return {
        "source": write_artifact_dir(tmp_path, "src.elf", rows_for(100, 10, n_synthetic=2)),
        "destination": write_artifact_dir(tmp_path, "dst.elf", rows_for(100, 20)),
        "output": tmp_path / "out",
    }
