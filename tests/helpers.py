from memory.allocator import ContiguousAllocator
from memory.outcomes import Outcome
from policy.fit import FitPolicy
from typing import Iterable, List, Optional, Tuple


def check_invariants(alloc: ContiguousAllocator) -> None:
    blocks = list(alloc.order.blocks())
    assert blocks, "address order must never be empty"
    assert blocks[0].base == 0
    assert blocks[-1].end == alloc.total_size
    assert sum(b.limit for b in blocks) == alloc.total_size
    for prev, cur in zip(blocks, blocks[1:]):
        assert cur.base == prev.end
        assert not (prev.is_free and cur.is_free), "adjacent holes"
    for b in blocks:
        assert b.limit > 0

    owned = [b for b in blocks if not b.is_free]
    assert sorted(b.owner for b in owned) == sorted(alloc.procs)
    assert len({b.owner for b in owned}) == len(owned)
    for pid, h in alloc.procs.items():
        assert alloc.order[h].owner == pid
    assert alloc.occupied_size == sum(b.limit for b in owned)

    free_handles = {h for h in alloc.order if alloc.order[h].is_free}
    assert set(alloc.holes) == free_handles
    assert len(alloc.holes) == len(free_handles)
    assert len(alloc.holes.by_size) == len(free_handles)


def layout(alloc: ContiguousAllocator) -> List[Tuple[Optional[int], int, int]]:
    return [tuple(e) for e in alloc.snapshot()]


def fill(alloc: ContiguousAllocator, sizes: Iterable[int], first_pid: int = 1) -> None:
    for pid, size in enumerate(sizes, start=first_pid):
        assert alloc.allocate(pid, size).outcome is Outcome.ALLOCATED


def holes_of(alloc: ContiguousAllocator) -> List[Tuple[int, int]]:
    return sorted(alloc.extents_free())


ALL_POLICIES = tuple(FitPolicy)
