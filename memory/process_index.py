from __future__ import annotations
from collections import UserDict
from typing import Optional
from memory.outcomes import DuplicateProcessError

class ProcessIndex(UserDict):
    # data: {..., pid: block handle}

    def register(self, pid: int, handle: int):
        if pid in self.data:
            raise DuplicateProcessError(f"pid {pid} already holds block {self.data[pid]}")
        self.data[pid] = handle

    def release(self, pid: int) -> Optional[int]:
        return self.data.pop(pid, None)
