from typing import List, Tuple

from triebpe.errors import EmptyQueueError

HeapEntry = Tuple[int, str]


class MaxHeap:
    """
    Binary max-heap over (priority, payload) entries.

    Only the priority is compared; payloads never break ties. There is no
    decrease-key: an updated priority is pushed as a new entry and older
    entries for the same payload stay queued.
    """

    def __init__(self):
        self.heap: List[HeapEntry] = []

    def insert(self, item: HeapEntry) -> None:
        self.heap.append(item)
        self._bubble_up(len(self.heap) - 1)

    def extract_max(self) -> HeapEntry:
        if self.is_empty():
            raise EmptyQueueError("Heap is empty")
        top = self.heap[0]
        last = self.heap.pop()
        if self.heap:
            self.heap[0] = last
            self._bubble_down(0)
        return top

    def is_empty(self) -> bool:
        return not self.heap

    def __len__(self) -> int:
        return len(self.heap)

    def _bubble_up(self, index: int) -> None:
        heap = self.heap
        while index > 0:
            parent = (index - 1) // 2
            if heap[parent][0] >= heap[index][0]:
                break
            heap[parent], heap[index] = heap[index], heap[parent]
            index = parent

    def _bubble_down(self, index: int) -> None:
        heap = self.heap
        size = len(heap)
        while True:
            largest = index
            left = 2 * index + 1
            right = 2 * index + 2

            if left < size and heap[left][0] > heap[largest][0]:
                largest = left
            if right < size and heap[right][0] > heap[largest][0]:
                largest = right

            if largest == index:
                break

            heap[index], heap[largest] = heap[largest], heap[index]
            index = largest
