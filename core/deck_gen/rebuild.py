"""Debounced rebuilds that keep the last good geometry."""

import logging
import threading
from typing import Callable, Optional

from core.deck_spec.types import DeckSpec

from .generator import BuildResult, DeckGenerator

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.4


class RebuildController:
    """Runs deck builds for an editing session.

    ``request`` debounces rapid edits: each call restarts the window and
    only the last spec is built. ``current`` always holds geometry from the
    last successful build; a failed build leaves it untouched unless no
    build has succeeded yet. ``build_complete`` is set once the most
    recently requested build has finished, whether it succeeded or not; a
    build overtaken by a newer request leaves it clear.
    """

    def __init__(
        self,
        generator: Optional[DeckGenerator] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_complete: Optional[Callable[[BuildResult], None]] = None,
    ):
        self.generator = generator or DeckGenerator()
        self.debounce_seconds = debounce_seconds
        self.on_complete = on_complete

        self.current: Optional[BuildResult] = None
        self.last_result: Optional[BuildResult] = None
        self.last_error: Optional[str] = None
        self.build_count = 0
        self.build_complete = threading.Event()

        self._pending: Optional[DeckSpec] = None
        # Request counter, the request the event waits for, and the running build
        self._generation = 0
        self._target = 0
        self._running: Optional[int] = None
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._build_lock = threading.Lock()

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def request(self, spec: DeckSpec) -> None:
        """Schedule a build of ``spec`` after the debounce window."""
        with self._lock:
            self._pending = spec.copy()
            self._generation += 1
            self._target = self._generation
            if self._timer is not None:
                self._timer.cancel()
            self.build_complete.clear()
            self._timer = threading.Timer(self.debounce_seconds, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop any pending build."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
            if self._running is None:
                self.build_complete.set()
            else:
                self._target = self._running

    def flush(self) -> Optional[BuildResult]:
        """Build the pending spec now, if there is one."""
        with self._lock:
            spec = self._pending
            generation = self._generation
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if spec is None:
            return None
        return self._build(spec, generation)

    def rebuild(self, spec: DeckSpec) -> BuildResult:
        """Build ``spec`` immediately and publish the result."""
        with self._lock:
            self._generation += 1
            self._target = self._generation
            generation = self._generation
            self.build_complete.clear()
        return self._build(spec, generation)

    def _build(self, spec: DeckSpec, generation: int) -> BuildResult:
        with self._build_lock:
            with self._lock:
                self._running = generation
            try:
                result = self.generator.generate(spec)
            except Exception as e:
                logger.exception("Deck build crashed")
                result = BuildResult(errors=[f"unexpected error: {e}"], color=spec.color)
            finally:
                self.build_count += 1

            self.last_result = result
            self.last_error = result.error
            if result.ok or self.current is None:
                self.current = result
            else:
                logger.warning(f"Keeping previous geometry: {result.error}")

            with self._lock:
                self._running = None
                if generation == self._target and self._pending is None:
                    self.build_complete.set()

        if self.on_complete is not None:
            self.on_complete(result)
        return result
