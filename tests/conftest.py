import pytest

from memory.allocator import ContiguousAllocator


@pytest.fixture
def alloc() -> ContiguousAllocator:
    return ContiguousAllocator(16384)
