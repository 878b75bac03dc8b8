from __future__ import annotations
from dataclasses import dataclass
from typing import List
import math
from memory.allocator import ContiguousAllocator

@dataclass
class FragMetrics:
    total_free: int
    occupied: int
    lfe: int               # largest free extent
    external_frag: float
    entropy: float
    hole_count: int
    utilization: float

def _entropy(hole_sizes: List[int]) -> float:
    total = sum(hole_sizes)
    if total <= 0:
        return 0.0
    ps = [s/total for s in hole_sizes if s>0]
    return max(0.0, -sum(p*math.log2(p) for p in ps))

def compute_metrics(alloc: ContiguousAllocator) -> FragMetrics:
    sizes = [size for _, size in alloc.extents_free()]
    total_free = alloc.free_bytes()
    lfe = alloc.largest_free_extent()
    external = 0.0 if total_free==0 else 1.0 - lfe/total_free
    return FragMetrics(
        total_free=total_free,
        occupied=alloc.used(),
        lfe=lfe,
        external_frag=external,
        entropy=_entropy(sizes),
        hole_count=len(sizes),
        utilization=alloc.used()/alloc.total_size,
    )
