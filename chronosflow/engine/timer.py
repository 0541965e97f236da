"""Focus timer state machine for ChronosFlow.

States: idle -> running -> idle. Elapsed time is the number of ticks counted
while running (one tick per second), not the difference between timestamps.
The component that drives tick() owns the periodic schedule and must stop it
when the timer stops.

Session timestamps are naive local time, the same basis the focus chart
uses to group sessions by day.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from chronosflow.models.task import Task
from chronosflow.models.time_log import TimeLog

logger = logging.getLogger(__name__)


class FocusTimer:
    """Counts focus seconds for one selected task at a time."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now
        self.task_id: str = ""
        self.running: bool = False
        self.elapsed_seconds: int = 0
        self.started_at: Optional[datetime] = None

    def select(self, task_id: str) -> None:
        """Select the task the next session is logged against."""
        if not self.running:
            self.task_id = task_id or ""

    def start(self, task_id: Optional[str] = None) -> bool:
        """Start a session.

        Args:
            task_id: Task to focus on (keeps the current selection if None)

        Returns:
            True if the timer moved to running; False if already running or no
            task is selected
        """
        if self.running:
            return False
        if task_id is not None:
            self.task_id = task_id
        if not self.task_id:
            return False

        self.started_at = self._clock()
        self.elapsed_seconds = 0
        self.running = True
        logger.debug(f"Focus session started for task {self.task_id}")
        return True

    def tick(self) -> None:
        """Count one second of focus (ignored while idle)."""
        if self.running:
            self.elapsed_seconds += 1

    def stop(self, tasks: List[Task]) -> Optional[TimeLog]:
        """Stop the session and build its log entry.

        A log is only produced when at least one second was counted and the
        selected task still exists. The counter always resets; the task
        selection is kept.

        Args:
            tasks: Current task list (the title is snapshotted from it)

        Returns:
            New TimeLog, or None if nothing should be logged
        """
        if not self.running:
            return None

        elapsed = self.elapsed_seconds
        started_at = self.started_at
        self.running = False
        self.elapsed_seconds = 0
        self.started_at = None

        task = next((t for t in tasks if t.id == self.task_id), None)
        if task is None or elapsed <= 0:
            logger.debug(f"Focus session for task {self.task_id} stopped without a log ({elapsed}s)")
            return None

        return TimeLog(
            id=str(uuid.uuid4()),
            task_id=task.id,
            task_title=task.title,
            start_time=started_at,
            end_time=self._clock(),
            duration=elapsed,
        )
