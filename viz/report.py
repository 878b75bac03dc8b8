from __future__ import annotations
from typing import Iterable
from memory.block import SnapshotEntry

FREE_PID = -1

def format_block(entry: SnapshotEntry) -> str:
    pid = FREE_PID if entry.pid is None else entry.pid
    return f"Pid: {pid} | Base: {entry.base} | Limit: {entry.limit}"

def format_snapshot(entries: Iterable[SnapshotEntry]) -> str:
    """One line per block in address order, then a blank line."""
    return ''.join(format_block(e) + '\n' for e in entries) + '\n'
