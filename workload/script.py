"""
Command scripts for the allocation simulator.

A script is plain text:

    1               fit mode (1 = first, 2 = best, 3 = worst)
    16384           total size of the address space
    A 1 210         allocate 210 units to pid 1
    D 1             deallocate pid 1
    P               print the block list

Commands are told apart by how many tokens they have, the leading letter is
checked against it. Blank lines and '#' comments are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from policy.fit import FitPolicy

OPS = {1: ("P", "print"), 2: ("D", "free"), 3: ("A", "alloc")}


class ScriptError(ValueError):
    def __init__(self, lineno: int, msg: str):
        super().__init__(f"line {lineno}: {msg}")
        self.lineno = lineno


@dataclass
class Command:
    op: str                      # alloc / free / print
    pid: Optional[int] = None
    size: Optional[int] = None
    lineno: int = 0


@dataclass
class Script:
    policy: FitPolicy
    total_size: int
    commands: List[Command] = field(default_factory=list)


def _int(tok: str, lineno: int, what: str) -> int:
    try:
        return int(tok)
    except ValueError:
        raise ScriptError(lineno, f"{what} must be an integer, got {tok!r}") from None


def _meaningful(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if line and not line.startswith("#"):
            yield lineno, line


def parse_command(line: str, lineno: int = 0) -> Command:
    """Turn one script line into a Command."""
    toks = line.split()
    if len(toks) not in OPS:
        raise ScriptError(lineno, f"expected 1 to 3 fields, got {len(toks)}")
    letter, op = OPS[len(toks)]
    if toks[0].upper() != letter:
        raise ScriptError(lineno, f"{len(toks)}-field command must start with {letter!r}, got {toks[0]!r}")
    cmd = Command(op, lineno=lineno)
    if len(toks) >= 2:
        cmd.pid = _int(toks[1], lineno, "pid")
        if cmd.pid < 0:
            raise ScriptError(lineno, f"pid must be non-negative, got {cmd.pid}")
    if len(toks) == 3:
        cmd.size = _int(toks[2], lineno, "size")
        if cmd.size <= 0:
            raise ScriptError(lineno, f"size must be positive, got {cmd.size}")
    return cmd


def iter_commands(numbered: Iterable[Tuple[int, str]]) -> Iterator[Command]:
    for lineno, line in numbered:
        yield parse_command(line, lineno)


def parse_script(lines: Iterable[str]) -> Script:
    numbered = _meaningful(lines)
    try:
        mode_no, mode = next(numbered)
        size_no, size = next(numbered)
    except StopIteration:
        raise ScriptError(0, "script needs a fit mode line and a total size line") from None

    try:
        policy = FitPolicy.from_mode(_int(mode, mode_no, "fit mode"))
    except ScriptError:
        raise
    except ValueError as e:
        raise ScriptError(mode_no, str(e)) from None
    total = _int(size, size_no, "total size")
    if total <= 0:
        raise ScriptError(size_no, f"total size must be positive, got {total}")
    return Script(policy, total, list(iter_commands(numbered)))


def load_script(path: str) -> Script:
    with open(Path(path), "r", encoding="utf-8") as f:
        try:
            return parse_script(f)
        except UnicodeDecodeError as e:
            raise ScriptError(0, f"not a UTF-8 text file ({e.reason} at byte {e.start})") from None
