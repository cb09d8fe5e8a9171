"""
Binary-heap priority queue with updatable priorities.

Items are popped highest-priority first, where "highest" is decided by a
comparator (min-heap by default). Unlike heapq, an item's priority can be
changed after insertion and the heap re-orders in place, which is what the
solver needs when propagation shrinks a cell's candidate set.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")

# compare(a, b) < 0 means a should come out before b
Comparator = Callable[[float, float], float]


class HeapOrder(Enum):
    """Which end of the priority range pops first."""

    MIN = "min"
    MAX = "max"

    @property
    def comparator(self) -> Comparator:
        if self is HeapOrder.MIN:
            return _min_first
        return _max_first


def _min_first(a: float, b: float) -> float:
    return a - b


def _max_first(a: float, b: float) -> float:
    return b - a


class _Entry(Generic[T]):
    __slots__ = ("item", "priority")

    def __init__(self, item: T, priority: float):
        self.item = item
        self.priority = priority


class PriorityHeap(Generic[T]):
    """
    Updatable-priority binary heap.

    Usage:
        heap = PriorityHeap()            # min-heap
        heap.insert("a", 5)
        heap.insert("b", 1)
        heap.update_priority("a", 0)
        heap.pop()                        # "a"

    pop() and peek() return None on an empty heap instead of raising, so
    items themselves should never be None.
    """

    def __init__(self, order: HeapOrder | Comparator = HeapOrder.MIN):
        """
        Args:
            order: HeapOrder.MIN / HeapOrder.MAX, or a custom compare(a, b)
                   returning a negative number when a should pop before b.
        """
        self._compare: Comparator = order.comparator if isinstance(order, HeapOrder) else order
        self._heap: list[_Entry[T]] = []

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __contains__(self, item: object) -> bool:
        return self._find(item) != -1

    def __iter__(self) -> Iterator[T]:
        """Items in heap-array order (not priority order)."""
        return (entry.item for entry in self._heap)

    def _before(self, a: _Entry[T], b: _Entry[T]) -> bool:
        return self._compare(a.priority, b.priority) < 0

    def _sift_up(self, idx: int) -> None:
        entry = self._heap[idx]
        while idx > 0:
            parent_idx = (idx - 1) // 2
            parent = self._heap[parent_idx]
            # Stop once the parent already comes first (or ties)
            if not self._before(entry, parent):
                break
            self._heap[idx] = parent
            idx = parent_idx
        self._heap[idx] = entry

    def _sift_down(self, idx: int) -> None:
        length = len(self._heap)
        entry = self._heap[idx]
        while True:
            left = 2 * idx + 1
            right = left + 1
            swap_idx = idx
            best = entry

            if left < length and self._before(self._heap[left], best):
                swap_idx = left
                best = self._heap[left]
            if right < length and self._before(self._heap[right], best):
                swap_idx = right
                best = self._heap[right]

            if swap_idx == idx:
                break

            self._heap[idx] = best
            idx = swap_idx
        self._heap[idx] = entry

    def _find(self, item: object) -> int:
        # Linear scan; lattices stay in the hundreds of cells
        for i, entry in enumerate(self._heap):
            if entry.item == item:
                return i
        return -1

    def insert(self, item: T, priority: float) -> None:
        """Add an item with the given priority."""
        self._heap.append(_Entry(item, priority))
        self._sift_up(len(self._heap) - 1)

    def pop(self) -> T | None:
        """Remove and return the top item, or None if the heap is empty."""
        if not self._heap:
            return None
        top = self._heap[0]
        last = self._heap.pop()
        if self._heap:
            # Replace the root with the last entry and let it sink into place
            self._heap[0] = last
            self._sift_down(0)
        return top.item

    def peek(self) -> T | None:
        """Return the top item without removing it, or None if empty."""
        if not self._heap:
            return None
        return self._heap[0].item

    def priority_of(self, item: T) -> float | None:
        """Current priority of an item, or None if it is not in the heap."""
        idx = self._find(item)
        if idx == -1:
            return None
        return self._heap[idx].priority

    def update_priority(self, item: T, new_priority: float) -> None:
        """
        Change an item's priority and restore heap order.

        Items that are not in the heap are ignored.
        """
        idx = self._find(item)
        if idx == -1:
            return
        entry = self._heap[idx]
        old_priority = entry.priority
        entry.priority = new_priority
        if self._compare(new_priority, old_priority) < 0:
            self._sift_up(idx)
        else:
            self._sift_down(idx)

    def clear(self) -> None:
        self._heap.clear()
