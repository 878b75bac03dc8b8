from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from memory.free_index import FreeIndex

class FitPolicy(Enum):
    FIRST_FIT = 1
    BEST_FIT = 2
    WORST_FIT = 3

    @classmethod
    def from_mode(cls, mode: int) -> 'FitPolicy':
        try:
            return cls(mode)
        except ValueError:
            raise ValueError(f"unknown fit mode {mode} (expected 1, 2 or 3)") from None

    @classmethod
    def from_name(cls, name: str) -> 'FitPolicy':
        key = name.strip().lower().replace('-', '_')
        for p in cls:
            if key in (p.name.lower(), p.short):
                return p
        raise ValueError(f"unknown fit policy {name!r}")

    @property
    def short(self) -> str:
        return self.name.split('_')[0].lower()

@dataclass
class PlacementDecision:
    hole: Optional[int]
    reason: str

def select_hole(policy: FitPolicy, holes: FreeIndex, size: int) -> PlacementDecision:
    """Pick the hole that should receive `size` units under `policy`.

    first: lowest-address hole that is large enough.
    best:  smallest hole that is large enough, lowest address on ties.
    worst: largest hole overall, only if it is large enough.
    """
    if policy is FitPolicy.FIRST_FIT:
        h = holes.first_fitting(size)
    elif policy is FitPolicy.BEST_FIT:
        h = holes.smallest_at_least(size)
    elif policy is FitPolicy.WORST_FIT:
        h = holes.largest()
        if h is not None and holes.order[h].limit < size:
            return PlacementDecision(None, f'largest={holes.order[h].limit}<need={size}')
    else:
        raise ValueError(f"unsupported policy {policy!r}")

    if h is None:
        return PlacementDecision(None, f'{policy.short}: no hole>={size} among {len(holes)}')
    blk = holes.order[h]
    return PlacementDecision(h, f'{policy.short}: hole base={blk.base} limit={blk.limit}')
