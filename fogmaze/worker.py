"""Building a maze off the main thread.

A whole level build (first layer plus every graft) runs on one background
thread. The thread owns the builder, its RNG and the half-built maze; nothing
is shared while it runs. When it finishes it puts the maze into a one-slot
queue, which the main loop polls once per frame.

Dropping the worker is enough to cancel it: the thread finishes its build and
the result is never collected.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable

from fogmaze.maze import Maze

logger = logging.getLogger(__name__)


class MazeBuildWorker:
    """Runs one maze build on a daemon thread and hands the result over once."""

    def __init__(self, build: Callable[[], Maze], name: str = "maze-build") -> None:
        self._build = build
        self._channel: queue.Queue[Maze | Exception] = queue.Queue(maxsize=1)
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._result: Maze | None = None
        self._error: Exception | None = None

    def start(self) -> MazeBuildWorker:
        self._thread.start()
        return self

    @property
    def started(self) -> bool:
        return self._thread.ident is not None

    def _run(self) -> None:
        try:
            maze = self._build()
        except Exception as e:
            # Handed to the consumer, which re-raises it on the main thread.
            logger.exception("Maze build failed")
            self._channel.put(e)
            return
        self._channel.put(maze)

    def _receive(self, item: Maze | Exception) -> Maze:
        if isinstance(item, Exception):
            self._error = item
            raise item
        self._result = item
        return item

    def poll(self) -> Maze | None:
        """Return the finished maze, or None while the build is running.

        Never blocks. Once the build has finished, further calls return the
        same maze or raise the same error.

        Raises:
            Exception: Whatever the build raised, re-raised here.
        """
        if self._error is not None:
            raise self._error
        if self._result is not None:
            return self._result
        try:
            item = self._channel.get_nowait()
        except queue.Empty:
            return None
        return self._receive(item)

    def wait(self, timeout: float | None = None) -> Maze:
        """Block until the maze is ready.

        Raises:
            TimeoutError: If the build did not finish within ``timeout`` seconds.
        """
        if self._error is not None:
            raise self._error
        if self._result is not None:
            return self._result
        try:
            item = self._channel.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError(f"Maze build not finished after {timeout}s") from None
        return self._receive(item)
