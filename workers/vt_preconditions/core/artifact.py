"""
Artifact — read-only view of an analyzed program.

The precondition checks only need two things from an artifact:
  - an ordered, restartable enumeration of its functions, and
  - whether a decoded instruction exists at a given address.

``Artifact`` is the structural protocol any provider must satisfy.
``ProgramArtifact`` is the in-memory implementation built by the
loader (io/loader.py) and by tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, Optional, Protocol, Tuple


@dataclass(frozen=True)
class FunctionRecord:
    """One function as seen by the analyzer."""

    entry_va: int
    name: str
    no_return: bool = False


class Artifact(Protocol):
    """Anything the checks can enumerate functions and instructions on."""

    name: str

    def iter_functions(self) -> Iterator[FunctionRecord]:
        ...

    def has_instruction_at(self, address: int) -> bool:
        ...


class ProgramArtifact:
    """Immutable in-memory artifact.

    Functions are held sorted by ascending ``entry_va`` so that every
    enumeration sees the same deterministic order.  Decoded instruction
    addresses are a frozenset; a function whose entry is not in it is a
    placeholder (import-table stub, external thunk) rather than real code.
    """

    def __init__(
        self,
        name: str,
        functions: Iterable[FunctionRecord],
        instruction_addresses: Iterable[int],
        binary_sha256: Optional[str] = None,
    ) -> None:
        self.name = name
        self.binary_sha256 = binary_sha256
        self._functions: Tuple[FunctionRecord, ...] = tuple(
            sorted(functions, key=lambda f: (f.entry_va, f.name))
        )
        self._instructions: FrozenSet[int] = frozenset(instruction_addresses)

    def iter_functions(self) -> Iterator[FunctionRecord]:
        return iter(self._functions)

    def has_instruction_at(self, address: int) -> bool:
        return address in self._instructions

    def __len__(self) -> int:
        return len(self._functions)

    def __repr__(self) -> str:
        return (
            f"ProgramArtifact(name={self.name!r}, "
            f"functions={len(self._functions)}, "
            f"instructions={len(self._instructions)})"
        )
