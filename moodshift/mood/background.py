"""
Detached mood recomputation for MoodShift.

Recording a rating must not wait on the mood pipeline, so recomputes are
handed to a small worker pool. A failed recompute is logged by the mood
service and never reaches the caller.
"""
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional
import threading

from ..data.schemas import MoodVector
from ..utils.logging import StructuredLogger
from .service import MoodService


class BackgroundRecomputer:
    """Fire-and-forget mood recomputation on a thread pool."""

    def __init__(self, mood_service: MoodService, max_workers: int = 2,
                 logger: Optional[StructuredLogger] = None):
        self.mood_service = mood_service
        self.logger = logger or mood_service.logger
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mood-recompute")
        self._pending: List[Future] = []
        self._lock = threading.Lock()

    def submit(self, user_id: str) -> "Future[Optional[MoodVector]]":
        """Schedule a recompute and return immediately."""
        future = self._executor.submit(self.mood_service.recompute_quietly, user_id)
        with self._lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        self.logger.debug("Scheduled background mood recompute", user_id=user_id)
        return future

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every scheduled recompute has finished. Returns False on timeout."""
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_pending)
