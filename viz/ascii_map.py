from __future__ import annotations
import string
from memory.allocator import ContiguousAllocator

GLYPHS = string.digits + string.ascii_uppercase + string.ascii_lowercase

def glyph(pid: int) -> str:
    return GLYPHS[pid % len(GLYPHS)]

def render_map(alloc: ContiguousAllocator, width: int=80) -> str:
    cap=alloc.capacity
    buf=['.']*width
    for pid,base,limit in alloc.snapshot():
        if pid is None:
            continue
        s=int((base/cap)*width)
        e=int(((base+limit)/cap)*width)
        ch=glyph(pid)
        for i in range(max(0,s), min(width, max(s+1,e))):
            buf[i]=ch
    return ''.join(buf)
