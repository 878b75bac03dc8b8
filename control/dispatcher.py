from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Union
from memory.allocator import ContiguousAllocator
from memory.block import SnapshotEntry
from memory.outcomes import AllocResult, FreeResult, Outcome
from policy.fit import FitPolicy
from workload.script import Command

logger = logging.getLogger(__name__)

@dataclass
class DispatchEvent:
    command: Command
    result: Optional[Union[AllocResult, FreeResult]] = None
    snapshot: Optional[List[SnapshotEntry]] = None
    duplicate: bool = False

class CommandDispatcher:
    """Feeds script commands to the allocator instance it was given."""
    def __init__(self, alloc: ContiguousAllocator, policy: Optional[FitPolicy] = None):
        self.alloc = alloc
        self.policy = policy or alloc.policy
        self.stats: Dict[str, int] = {
            'alloc_events':0,'free_events':0,'print_events':0,
            'allocated':0,'freed':0,'compactions':0,'moved':0,
            'unsatisfiable':0,'insufficient':0,
            'unknown_free':0,'rejected_duplicate':0,
        }

    def dispatch(self, cmd: Command) -> DispatchEvent:
        if cmd.op == 'alloc':
            return self._alloc(cmd)
        if cmd.op == 'free':
            return self._free(cmd)
        if cmd.op == 'print':
            self.stats['print_events'] += 1
            return DispatchEvent(cmd, snapshot=self.alloc.snapshot())
        raise ValueError(f"unknown command op {cmd.op!r}")

    def _alloc(self, cmd: Command) -> DispatchEvent:
        self.stats['alloc_events'] += 1
        # the allocator refuses duplicates with an exception; a script just skips them
        if self.alloc.in_mem(cmd.pid):
            self.stats['rejected_duplicate'] += 1
            logger.warning("line %d: pid %s is already allocated, request skipped", cmd.lineno, cmd.pid)
            return DispatchEvent(cmd, duplicate=True)

        res = self.alloc.manage_allocation(cmd.pid, cmd.size, self.policy)
        if res.compacted:
            self.stats['compactions'] += 1
            self.stats['moved'] += res.moved
        if res.outcome is Outcome.ALLOCATED:
            self.stats['allocated'] += 1
        elif res.outcome is Outcome.UNSATISFIABLE:
            self.stats['unsatisfiable'] += 1
        elif res.outcome is Outcome.INSUFFICIENT_TOTAL_SPACE:
            self.stats['insufficient'] += 1
        return DispatchEvent(cmd, result=res)

    def _free(self, cmd: Command) -> DispatchEvent:
        self.stats['free_events'] += 1
        res = self.alloc.deallocate(cmd.pid)
        if res.ok:
            self.stats['freed'] += 1
        else:
            self.stats['unknown_free'] += 1
            logger.info("line %d: pid %s is not allocated, nothing to free", cmd.lineno, cmd.pid)
        return DispatchEvent(cmd, result=res)

    def run(self, commands: Iterable[Command]) -> Iterator[DispatchEvent]:
        for cmd in commands:
            yield self.dispatch(cmd)
