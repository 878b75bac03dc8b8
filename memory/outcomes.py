from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

class Outcome(Enum):
    ALLOCATED = 'allocated'
    FREED = 'freed'
    INSUFFICIENT_TOTAL_SPACE = 'insufficient_total_space'
    NO_SUFFICIENT_HOLE = 'no_sufficient_hole'
    UNSATISFIABLE = 'unsatisfiable'
    UNKNOWN_PROCESS = 'unknown_process'

@dataclass
class AllocResult:
    outcome: Outcome
    pid: int
    size: int
    base: Optional[int] = None
    compacted: bool = False
    moved: int = 0      # units relocated by the compaction, if one ran

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.ALLOCATED

@dataclass
class FreeResult:
    outcome: Outcome
    pid: int
    size: int = 0
    base: Optional[int] = None    # merged hole after coalescing
    limit: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.FREED

class AllocatorError(Exception):
    """Caller errors; allocation failures are reported as outcomes instead."""

class DuplicateProcessError(AllocatorError, ValueError):
    pass
