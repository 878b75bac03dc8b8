from __future__ import annotations
from bisect import bisect_left, insort
from typing import Iterator, List, Optional, Tuple
from memory.address_order import AddressOrder

class FreeIndex:
    """Holes of an AddressOrder, kept sorted by address and by (size, base).

    Keys are read from the blocks at insert time, so a hole must be removed
    before its base or limit changes and re-inserted afterwards.
    """
    def __init__(self, order: AddressOrder):
        self.order = order
        # by_base: [..., (base, handle)]
        self.by_base: List[Tuple[int, int]] = []
        # by_size: [..., (size, base, handle)]; base keeps equal sizes distinct
        self.by_size: List[Tuple[int, int, int]] = []

    def __len__(self) -> int:
        return len(self.by_base)

    def __contains__(self, handle: int) -> bool:
        blk = self.order.get(handle)
        if blk is None or not blk.is_free:
            return False
        key = (blk.base, handle)
        i = bisect_left(self.by_base, key)
        return i < len(self.by_base) and self.by_base[i] == key

    def __iter__(self) -> Iterator[int]:
        return (h for _, h in self.by_base)

    def _keys(self, handle: int) -> Tuple[Tuple[int, int], Tuple[int, int, int]]:
        blk = self.order[handle]
        if not blk.is_free:
            raise ValueError(f"block {handle} is owned by pid {blk.owner}")
        return (blk.base, handle), (blk.limit, blk.base, handle)

    def insert(self, handle: int):
        base_key, size_key = self._keys(handle)
        insort(self.by_base, base_key)
        insort(self.by_size, size_key)

    @staticmethod
    def _discard(keys: list, key: tuple):
        i = bisect_left(keys, key)
        if i == len(keys) or keys[i] != key:
            raise KeyError(f"hole {key[-1]} is not indexed")
        del keys[i]

    def remove(self, handle: int):
        base_key, size_key = self._keys(handle)
        self._discard(self.by_base, base_key)
        self._discard(self.by_size, size_key)

    def clear(self):
        self.by_base.clear()
        self.by_size.clear()

    def first_by_address(self) -> Optional[int]:
        return self.by_base[0][1] if self.by_base else None

    def first_fitting(self, size: int) -> Optional[int]:
        for _, h in self.by_base:
            if self.order[h].limit >= size:
                return h
        return None

    def smallest_at_least(self, size: int) -> Optional[int]:
        i = bisect_left(self.by_size, (size, -1, -1))
        if i < len(self.by_size):
            return self.by_size[i][2]
        return None

    def largest(self) -> Optional[int]:
        if not self.by_size:
            return None
        top = self.by_size[-1][0]
        # lowest base among the holes sharing the top size
        return self.by_size[bisect_left(self.by_size, (top, -1, -1))][2]
