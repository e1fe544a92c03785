from __future__ import annotations
import heapq
import itertools
from typing import Callable, List, Tuple


class TimerHandle:
    __slots__ = ("due_ms", "callback", "cancelled")

    def __init__(self, due_ms: float, callback: Callable[[float], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class TimerQueue:
    """
    Deadline timers driven by the frame loop. Nothing fires on its own: the
    owner calls run_due(now_ms) once per step, so callbacks run inside the
    same sequential context as the rest of the frame.
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def schedule(self, due_ms: float, callback: Callable[[float], None]) -> TimerHandle:
        handle = TimerHandle(due_ms, callback)
        heapq.heappush(self._heap, (due_ms, next(self._seq), handle))
        return handle

    def cancel_all(self) -> None:
        for _, _, handle in self._heap:
            handle.cancel()
        self._heap.clear()

    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def run_due(self, now_ms: float) -> int:
        """Fire every live timer whose deadline has passed, earliest first."""
        fired = 0
        while self._heap and self._heap[0][0] <= now_ms:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.cancelled = True  # one-shot
            handle.callback(handle.due_ms)
            fired += 1
        return fired
