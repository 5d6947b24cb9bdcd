#!/usr/bin/env python3
"""
bb_priority_queue.py - Indexed Priority Queue for Branch & Bound
================================================================
Binary min-heap over externally ranked items with an item -> slot index,
O(log n) insert/extract, O(1) priority lookup and bulk pruning of every
element at or above a threshold priority.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Tuple

from config import Config
from utils import EmptyQueue


logger = logging.getLogger(__name__)

STALE = -1


@dataclass
class QueueElement:
    """Item stored in the queue together with its priority."""
    item: Any
    priority: Any


class PriorityQueueBase(ABC):
    """
    Interface shared by priority queue implementations.
    Priorities only need rich comparisons; lower compares as more urgent.
    """

    @property
    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def is_empty(self) -> bool:
        pass

    @abstractmethod
    def insert(self, item: Hashable, priority: Any):
        pass

    @abstractmethod
    def get_lowest(self) -> Tuple[Any, Any]:
        """Remove and return (item, priority) of the most urgent element."""
        pass

    @abstractmethod
    def delete_elements_higher_than(self, priority: Any) -> int:
        """Remove every element whose priority is not below priority."""
        pass

    @abstractmethod
    def clear(self):
        pass

    @abstractmethod
    def _get_element(self, item: Hashable) -> QueueElement:
        """Return the live element holding item."""
        pass

    def get_priority(self, item: Hashable) -> Any:
        """Current priority of a queued item."""
        return self._get_element(item).priority

    def __len__(self) -> int:
        return self.size


class IndexedHeapPriorityQueue(PriorityQueueBase):
    """
    Array-backed binary min-heap.

    Every swap keeps the item -> slot index current. Extracted items are
    marked stale in the index instead of being deleted, and the index is
    compacted once it holds more than index_cleanup_ratio entries per live
    element. Storage doubles when full and halves below half utilisation.
    """

    def __init__(self, initial_capacity: Optional[int] = None,
                 index_cleanup_ratio: Optional[float] = None):
        if initial_capacity is None:
            initial_capacity = Config.QUEUE['initial_capacity']
        if index_cleanup_ratio is None:
            index_cleanup_ratio = Config.QUEUE['index_cleanup_ratio']
        if initial_capacity < 1:
            raise ValueError(f"Initial capacity must be positive, got {initial_capacity}")

        self.initial_capacity = initial_capacity
        self.index_cleanup_ratio = index_cleanup_ratio

        self._elements: List[Optional[QueueElement]] = [None] * initial_capacity
        self._size = 0
        self._indices: Dict[Hashable, int] = {}
        self._max_size = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._elements)

    @property
    def max_size(self) -> int:
        """Largest number of live elements held at once."""
        return self._max_size

    def is_empty(self) -> bool:
        return self._size == 0

    def __contains__(self, item: Hashable) -> bool:
        return self._indices.get(item, STALE) != STALE

    def peek_lowest(self) -> Tuple[Any, Any]:
        """Return (item, priority) of the most urgent element without removing it."""
        if self._size == 0:
            raise EmptyQueue("peek on an empty priority queue")
        root = self._elements[0]
        return root.item, root.priority

    def _get_element(self, item: Hashable) -> QueueElement:
        index = self._indices.get(item, STALE)
        if index == STALE:
            raise KeyError(f"Item is not in the queue: {item!r}")
        return self._elements[index]

    def is_valid_heap(self) -> bool:
        """Check that no parent compares above either of its children."""
        for index in range(1, self._size):
            parent = (index - 1) // 2
            if self._elements[parent].priority > self._elements[index].priority:
                return False
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, item: Hashable, priority: Any):
        """Append the item and bubble it up to its place."""
        if item in self:
            raise ValueError(f"Item is already queued: {item!r}")

        if self._size == len(self._elements):
            self._grow()

        index = self._size
        self._elements[index] = QueueElement(item, priority)
        self._indices[item] = index
        self._size += 1
        self._sift_up(index)

        self._max_size = max(self._max_size, self._size)
        self._maybe_clean_indices()

    def get_lowest(self) -> Tuple[Any, Any]:
        """
        Remove the root, move the last element into its place and bubble it
        down. Raises EmptyQueue when there is nothing to extract.
        """
        if self._size == 0:
            raise EmptyQueue("get_lowest on an empty priority queue")

        lowest = self._elements[0]
        self._size -= 1
        last = self._elements[self._size]
        self._elements[self._size] = None
        self._indices[lowest.item] = STALE

        if self._size > 0:
            self._elements[0] = last
            self._indices[last.item] = 0
            self._sift_down(0)
        else:
            self._elements[0] = None

        if self._size < len(self._elements) // 2:
            self._shrink()
        self._maybe_clean_indices()

        return lowest.item, lowest.priority

    def delete_elements_higher_than(self, priority: Any) -> int:
        """
        Drop every element whose priority compares >= priority and rebuild
        the heap and the index from the survivors. Returns the number removed.
        """
        original_size = self._size
        survivors = [element for element in self._elements[:self._size]
                     if element.priority < priority]

        self._size = len(survivors)
        capacity = len(self._elements)
        while capacity // 2 >= self.initial_capacity and self._size < capacity // 2:
            capacity //= 2
        self._elements = survivors + [None] * (capacity - self._size)
        self._indices = {element.item: index for index, element in enumerate(survivors)}

        # Bottom-up heapify
        for index in range(self._size // 2 - 1, -1, -1):
            self._sift_down(index)

        removed = original_size - self._size
        if removed:
            logger.debug(f"Pruned {removed} queue elements, {self._size} remain")
        return removed

    def clear(self):
        self._elements = [None] * self.initial_capacity
        self._size = 0
        self._indices = {}
        self._max_size = 0

    # ------------------------------------------------------------------
    # Heap maintenance
    # ------------------------------------------------------------------

    def _sift_up(self, index: int):
        element = self._elements[index]

        while index > 0:
            parent = (index - 1) // 2
            if not self._elements[parent].priority > element.priority:
                break
            self._elements[index] = self._elements[parent]
            self._indices[self._elements[index].item] = index
            index = parent

        self._elements[index] = element
        self._indices[element.item] = index

    def _sift_down(self, index: int):
        element = self._elements[index]

        while True:
            left = index * 2 + 1
            if left >= self._size:
                break

            child = left
            right = left + 1
            if right < self._size and self._elements[right].priority < self._elements[left].priority:
                child = right

            if not element.priority > self._elements[child].priority:
                break
            self._elements[index] = self._elements[child]
            self._indices[self._elements[index].item] = index
            index = child

        self._elements[index] = element
        self._indices[element.item] = index

    def _grow(self):
        self._elements.extend([None] * len(self._elements))

    def _shrink(self):
        capacity = len(self._elements) // 2
        if capacity < self.initial_capacity or capacity <= self._size:
            return
        del self._elements[capacity:]

    def _maybe_clean_indices(self):
        if len(self._indices) > self._size * self.index_cleanup_ratio:
            self._indices = {item: index for item, index in self._indices.items()
                             if index != STALE}
