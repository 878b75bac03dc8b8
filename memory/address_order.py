from __future__ import annotations
from typing import Iterator, List, Optional
from memory.block import Block

class AddressOrder:
    """Doubly-linked sequence of blocks by increasing base.

    Blocks live in an arena; every other structure refers to them by handle
    (the arena index). Slots of unlinked blocks are recycled.
    """
    def __init__(self):
        self.reset()

    def reset(self):
        self._arena: List[Optional[Block]] = []
        self._recycled: List[int] = []
        self.head: Optional[int] = None
        self.tail: Optional[int] = None
        self._count = 0

    def __getitem__(self, handle: int) -> Block:
        block = self._arena[handle]
        if block is None:
            raise KeyError(f"stale block handle {handle}")
        return block

    def get(self, handle: int) -> Optional[Block]:
        if 0 <= handle < len(self._arena):
            return self._arena[handle]
        return None

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[int]:
        h = self.head
        while h is not None:
            yield h
            h = self._arena[h].next

    def blocks(self) -> Iterator[Block]:
        for h in self:
            yield self._arena[h]

    def _new(self, block: Block) -> int:
        self._count += 1
        if self._recycled:
            h = self._recycled.pop()
            self._arena[h] = block
            return h
        self._arena.append(block)
        return len(self._arena) - 1

    def _end_of(self, handle: Optional[int]) -> int:
        return 0 if handle is None else self._arena[handle].end

    def append_tail(self, owner: Optional[int], size: int) -> int:
        h = self._new(Block(owner, self._end_of(self.tail), size, prev=self.tail))
        if self.tail is None:
            self.head = h
        else:
            self._arena[self.tail].next = h
        self.tail = h
        return h

    def split_free(self, hole: int, owned_size: int, owner: int) -> int:
        blk = self[hole]
        if not blk.is_free:
            raise ValueError(f"block {hole} is owned by pid {blk.owner}")
        if not 0 < owned_size <= blk.limit:
            raise ValueError(f"cannot carve {owned_size} out of a hole of {blk.limit}")
        if owned_size == blk.limit:
            blk.owner = owner
            return hole

        h = self._new(Block(owner, self._end_of(blk.prev), owned_size, prev=blk.prev, next=hole))
        if blk.prev is None:
            self.head = h
        else:
            self._arena[blk.prev].next = h
        blk.prev = h
        blk.limit -= owned_size
        blk.base = self._arena[h].end
        return h

    def remove_free(self, handle: int) -> int:
        blk = self[handle]
        if not blk.is_free:
            raise ValueError(f"block {handle} is owned by pid {blk.owner}")
        if blk.prev is None:
            self.head = blk.next
        else:
            self._arena[blk.prev].next = blk.next
        if blk.next is None:
            self.tail = blk.prev
        else:
            self._arena[blk.next].prev = blk.prev
        self._arena[handle] = None
        self._recycled.append(handle)
        self._count -= 1
        return blk.limit
