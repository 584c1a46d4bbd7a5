"""
Background runner with last-write-wins semantics.

Interactive controls can request a new run before the previous one has
finished. Each submit cancels the run before it, and only the most recently
submitted run may publish its result.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .config import SimulationParams
from .engine import ManifoldSimulator, SimulationCancelled
from .results import SimulationResult
from .state import StateVector

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Runs simulations on a single worker thread."""

    def __init__(self):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="manifold")
        self._lock = threading.Lock()
        self._generation = 0
        self._cancel_event: Optional[threading.Event] = None
        self._latest: Optional[SimulationResult] = None

    @property
    def latest_result(self) -> Optional[SimulationResult]:
        with self._lock:
            return self._latest

    def submit(self, start_state: StateVector, params: SimulationParams) -> "Future[Optional[SimulationResult]]":
        """Queue a run; the future resolves to None if a newer run superseded it."""
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
            self._generation += 1
            generation = self._generation
            cancel_event = threading.Event()
            self._cancel_event = cancel_event

        return self._executor.submit(self._run, generation, cancel_event, start_state, params)

    def _run(self, generation, cancel_event, start_state, params) -> Optional[SimulationResult]:
        try:
            result = ManifoldSimulator(start_state, params).run(cancel_event=cancel_event)
        except SimulationCancelled:
            logger.debug("Run %d cancelled", generation)
            return None

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale run %d (latest is %d)", generation, self._generation)
                return None
            self._latest = result
        return result

    def shutdown(self, wait: bool = True):
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.shutdown()
