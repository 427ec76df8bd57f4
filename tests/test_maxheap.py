import random

import pytest

from triebpe.errors import EmptyQueueError
from triebpe.maxheap import MaxHeap


def test_extract_order_is_non_increasing():
    rng = random.Random(0)
    heap = MaxHeap()
    for i in range(200):
        heap.insert((rng.randint(-50, 50), f"p{i}"))

    priorities = []
    while not heap.is_empty():
        priorities.append(heap.extract_max()[0])

    assert len(priorities) == 200
    assert priorities == sorted(priorities, reverse=True)


def test_negated_counts_pop_least_frequent_first():
    heap = MaxHeap()
    for pair, freq in [("ab", 3), ("bc", 1), ("cd", 5)]:
        heap.insert((-freq, pair))

    assert heap.extract_max() == (-1, "bc")
    assert heap.extract_max() == (-3, "ab")
    assert heap.extract_max() == (-5, "cd")


def test_equal_priorities_keep_insertion_position():
    heap = MaxHeap()
    heap.insert((-2, "ab"))
    heap.insert((-2, "ba"))

    assert heap.extract_max() == (-2, "ab")
    assert heap.extract_max() == (-2, "ba")


def test_stale_entries_are_kept():
    heap = MaxHeap()
    heap.insert((2, "ab"))
    heap.insert((3, "ab"))

    assert len(heap) == 2
    assert heap.extract_max() == (3, "ab")
    assert heap.extract_max() == (2, "ab")


def test_extract_from_empty_heap():
    heap = MaxHeap()
    with pytest.raises(EmptyQueueError):
        heap.extract_max()
    with pytest.raises(IndexError):
        heap.extract_max()
