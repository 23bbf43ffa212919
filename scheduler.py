import heapq
import itertools
from typing import List, Optional, Tuple

from events import KIND_PRIORITY, Event

class Scheduler:
    """Future event list ordered by (time, kind priority, insertion order)."""

    def __init__(self):
        self._heap: List[Tuple[float, int, int, Event]] = []
        self._seq = itertools.count()

    def add(self, ev: Event):
        heapq.heappush(self._heap, (ev.time, KIND_PRIORITY[ev.kind], next(self._seq), ev))

    def next(self) -> Optional[Event]:
        if self._heap:
            return heapq.heappop(self._heap)[3]
        return None

    def has_events(self) -> bool:
        return len(self._heap) > 0

    def clear(self):
        self._heap.clear()
        self._seq = itertools.count()

    def __len__(self):
        return len(self._heap)
