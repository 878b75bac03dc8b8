from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, Optional

@dataclass
class Block:
    owner: Optional[int]   # pid, or None for a hole
    base: int
    limit: int
    prev: Optional[int] = None
    next: Optional[int] = None

    @property
    def is_free(self) -> bool:
        return self.owner is None

    @property
    def end(self) -> int:
        return self.base + self.limit

class SnapshotEntry(NamedTuple):
    pid: Optional[int]
    base: int
    limit: int
