"""Current task list snapshot with change notification."""

import logging
from collections.abc import Callable, Iterable

from .core.tasks import TaskRecord

logger = logging.getLogger(__name__)

Subscriber = Callable[[tuple[TaskRecord, ...]], None]


class TaskSnapshot:
    """
    Holds the current task list and notifies subscribers when it changes.

    The list is swapped with a single assignment, so readers only ever
    see a complete snapshot. Extractions take a generation token from
    begin(); a commit from a superseded generation is discarded.
    """

    def __init__(self, tasks: Iterable[TaskRecord] = ()):
        self._tasks: tuple[TaskRecord, ...] = tuple(tasks)
        self._subscribers: list[Subscriber] = []
        self._generation = 0

    def current(self) -> tuple[TaskRecord, ...]:
        return self._tasks

    def subscribe(self, callback: Subscriber) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def begin(self) -> int:
        """Start a new extraction; returns its generation token."""
        self._generation += 1
        return self._generation

    def commit(self, token: int, tasks: Iterable[TaskRecord]) -> bool:
        """Replace the snapshot unless a newer extraction has begun."""
        if token != self._generation:
            logger.debug(f"Discarding superseded extraction {token} (current {self._generation})")
            return False
        self.replace(tasks)
        return True

    def replace(self, tasks: Iterable[TaskRecord]) -> None:
        """Swap in a new snapshot and notify subscribers."""
        self._tasks = tuple(tasks)
        snapshot = self._tasks
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Snapshot subscriber {callback!r} failed: {e}")
