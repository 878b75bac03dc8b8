from __future__ import annotations
import logging
from typing import List, Optional, Tuple
from memory.address_order import AddressOrder
from memory.block import Block, SnapshotEntry
from memory.free_index import FreeIndex
from memory.outcomes import AllocResult, DuplicateProcessError, FreeResult, Outcome
from memory.process_index import ProcessIndex
from policy.fit import FitPolicy, select_hole

logger = logging.getLogger(__name__)

class ContiguousAllocator:
    """One fixed address space shared by processes, one block per pid.

    The address order owns the blocks; the process and free indexes hold
    handles into it. `occupied_size` is kept as a running total.
    """
    def __init__(self, total_size: int, policy: FitPolicy = FitPolicy.FIRST_FIT):
        if total_size <= 0:
            raise ValueError(f"total size must be positive, got {total_size}")
        self.total_size = total_size
        self.policy = policy
        self.order = AddressOrder()
        self.procs = ProcessIndex()
        self.holes = FreeIndex(self.order)
        self.occupied_size = 0
        self.holes.insert(self.order.append_tail(None, total_size))

    @property
    def capacity(self) -> int:
        return self.total_size

    # ---------------- placement ----------------
    def allocate(self, pid: int, size: int, policy: Optional[FitPolicy] = None) -> AllocResult:
        if size <= 0:
            raise ValueError(f"allocation size must be positive, got {size}")
        policy = policy or self.policy
        if pid in self.procs:
            raise DuplicateProcessError(f"pid {pid} is already allocated")

        if size + self.occupied_size > self.total_size:
            logger.debug("pid %s: need=%d free=%d", pid, size, self.free_bytes())
            return AllocResult(Outcome.INSUFFICIENT_TOTAL_SPACE, pid, size)

        dec = select_hole(policy, self.holes, size)
        logger.debug("pid %s size=%d %s", pid, size, dec.reason)
        if dec.hole is None:
            return AllocResult(Outcome.NO_SUFFICIENT_HOLE, pid, size)

        self.holes.remove(dec.hole)
        h = self.order.split_free(dec.hole, size, pid)
        if h != dec.hole:
            self.holes.insert(dec.hole)
        self.procs.register(pid, h)
        self.occupied_size += size
        return AllocResult(Outcome.ALLOCATED, pid, size, base=self.order[h].base)

    def manage_allocation(self, pid: int, size: int, policy: Optional[FitPolicy] = None) -> AllocResult:
        res = self.allocate(pid, size, policy)
        if res.outcome is not Outcome.NO_SUFFICIENT_HOLE:
            return res
        moved = self.compaction()
        res = self.allocate(pid, size, policy)
        res.compacted = True
        res.moved = moved
        if res.outcome is Outcome.NO_SUFFICIENT_HOLE:
            res.outcome = Outcome.UNSATISFIABLE
        return res

    # ---------------- deallocation ----------------
    def deallocate(self, pid: int) -> FreeResult:
        h = self.procs.release(pid)
        if h is None:
            return FreeResult(Outcome.UNKNOWN_PROCESS, pid)
        blk = self.order[h]
        freed = blk.limit
        self.occupied_size -= freed
        blk.owner = None

        if blk.next is not None and self.order[blk.next].is_free:
            self.holes.remove(blk.next)
            blk.limit += self.order.remove_free(blk.next)
        if blk.prev is not None and self.order[blk.prev].is_free:
            self.holes.remove(blk.prev)
            blk.limit += self.order.remove_free(blk.prev)
        # takes over the absorbed predecessor's base
        blk.base = 0 if blk.prev is None else self.order[blk.prev].end
        self.holes.insert(h)
        return FreeResult(Outcome.FREED, pid, freed, base=blk.base, limit=blk.limit)

    # ---------------- compaction ----------------
    def compaction(self) -> int:
        """Pack owned blocks from base 0 in their current order, one trailing hole.

        Returns the number of units whose address changed.
        """
        old: List[Block] = list(self.order.blocks())
        self.order.reset()
        self.procs.clear()
        self.holes.clear()

        pooled = 0
        moved = 0
        for b in old:
            if b.is_free:
                pooled += b.limit
                continue
            h = self.order.append_tail(b.owner, b.limit)
            self.procs.register(b.owner, h)
            if self.order[h].base != b.base:
                moved += b.limit
        if pooled:
            self.holes.insert(self.order.append_tail(None, pooled))
        logger.info("compaction: moved=%d pooled_free=%d blocks=%d", moved, pooled, len(self.order))
        return moved

    # ---------------- queries ----------------
    def snapshot(self) -> List[SnapshotEntry]:
        return [SnapshotEntry(b.owner, b.base, b.limit) for b in self.order.blocks()]

    def in_mem(self, pid: int) -> bool:
        return pid in self.procs

    def block_of(self, pid: int) -> Optional[SnapshotEntry]:
        h = self.procs.get(pid)
        if h is None:
            return None
        b = self.order[h]
        return SnapshotEntry(b.owner, b.base, b.limit)

    def used(self) -> int:
        return self.occupied_size

    def free_bytes(self) -> int:
        return self.total_size - self.occupied_size

    def extents_free(self) -> List[Tuple[int, int]]:
        return [(self.order[h].base, self.order[h].limit) for h in self.holes]

    def largest_free_extent(self) -> int:
        h = self.holes.largest()
        return 0 if h is None else self.order[h].limit
