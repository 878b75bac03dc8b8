import pytest
from memory.address_order import AddressOrder


def make_order(*spans):
    order = AddressOrder()
    for owner, size in spans:
        order.append_tail(owner, size)
    return order


def bases(order):
    return [(b.owner, b.base, b.limit) for b in order.blocks()]


class TestAppendTail:
    def test_first_block_starts_at_zero(self):
        order = AddressOrder()
        h = order.append_tail(None, 100)
        assert order.head == order.tail == h
        assert order[h].base == 0
        assert len(order) == 1

    def test_bases_follow_predecessor(self):
        order = make_order((1, 10), (None, 20), (2, 30))
        assert bases(order) == [(1, 0, 10), (None, 10, 20), (2, 30, 30)]
        assert list(order) == [0, 1, 2]


class TestSplitFree:
    def test_partial_split_inserts_before_hole(self):
        order = make_order((None, 100))
        h = order.split_free(0, 30, 7)
        assert h != 0
        assert order.head == h
        assert bases(order) == [(7, 0, 30), (None, 30, 70)]
        assert order[0].prev == h and order[h].next == 0

    def test_split_in_the_middle(self):
        order = make_order((1, 10), (None, 90))
        h = order.split_free(1, 40, 2)
        assert bases(order) == [(1, 0, 10), (2, 10, 40), (None, 50, 50)]
        assert order[0].next == h
        assert order[h].prev == 0

    def test_exact_fit_converts_in_place(self):
        order = make_order((1, 10), (None, 90))
        assert order.split_free(1, 90, 2) == 1
        assert bases(order) == [(1, 0, 10), (2, 10, 90)]
        assert len(order) == 2

    def test_rejects_owned_block(self):
        order = make_order((1, 10), (None, 90))
        with pytest.raises(ValueError):
            order.split_free(0, 5, 2)

    def test_rejects_oversized_request(self):
        order = make_order((None, 10))
        with pytest.raises(ValueError):
            order.split_free(0, 11, 2)
        with pytest.raises(ValueError):
            order.split_free(0, 0, 2)


class TestRemoveFree:
    def test_unlinks_middle(self):
        order = make_order((1, 10), (None, 20), (2, 30))
        assert order.remove_free(1) == 20
        assert list(order) == [0, 2]
        assert order[0].next == 2
        assert order[2].prev == 0
        with pytest.raises(KeyError):
            order[1]

    def test_unlinks_head_and_tail(self):
        order = make_order((None, 10), (1, 20), (None, 30))
        order.remove_free(0)
        assert order.head == 1
        assert order[1].prev is None
        order.remove_free(2)
        assert order.tail == 1
        assert order[1].next is None
        assert len(order) == 1

    def test_slot_is_recycled(self):
        order = make_order((1, 10), (None, 20), (2, 30))
        order.remove_free(1)
        assert order.append_tail(None, 5) == 1

    def test_rejects_owned_block(self):
        order = make_order((1, 10))
        with pytest.raises(ValueError):
            order.remove_free(0)


def test_reset():
    order = make_order((1, 10), (None, 20))
    order.reset()
    assert len(order) == 0
    assert order.head is None and order.tail is None
    assert list(order) == []


def test_get():
    order = make_order((1, 10), (None, 20))
    assert order.get(0).owner == 1
    order.remove_free(1)
    assert order.get(1) is None
    assert order.get(5) is None
    assert order.get(-1) is None
