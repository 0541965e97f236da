"""Dashboard statistics for ChronosFlow."""

from datetime import date, timedelta
from typing import List, Optional
from pydantic import BaseModel, Field

from chronosflow.models.task import Task, TaskStatus
from chronosflow.models.time_log import TimeLog
from chronosflow.models.constants import XP_PER_LEVEL, CHART_DAYS
from chronosflow.engine.scoring import total_focus_seconds


_DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class ChartPoint(BaseModel):
    """Focus hours of one day."""

    name: str = Field(..., description="Short weekday name")
    day: date = Field(..., description="Calendar day")
    hours: float = Field(..., description="Focus hours, one decimal")


class DashboardStats(BaseModel):
    """Aggregate numbers shown on the dashboard."""

    focus_hours: int
    focus_minutes: int
    completion_percent: int
    level: int
    level_progress: float
    chart: List[ChartPoint]


def level_for_xp(xp: int) -> int:
    """Rank level: one level per 500 XP, starting at 1."""
    return max(0, xp) // XP_PER_LEVEL + 1


def level_progress(xp: int) -> float:
    """Progress through the current level as a percentage (0-100)."""
    return max(0.0, min(100.0, (max(0, xp) % XP_PER_LEVEL) / XP_PER_LEVEL * 100))


def completion_percent(tasks: List[Task]) -> int:
    """Share of tasks done, rounded to a whole percentage."""
    if not tasks:
        return 0
    done = sum(1 for task in tasks if task.status == TaskStatus.DONE)
    return int(done * 100 / len(tasks) + 0.5)


def focus_chart(logs: List[TimeLog], today: Optional[date] = None, days: int = CHART_DAYS) -> List[ChartPoint]:
    """Focus hours per day for the last `days` days, oldest first.

    Sessions are attributed to the day they started on.
    """
    today = today or date.today()
    chart = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        seconds = sum(log.duration for log in logs if log.start_time.date() == day)
        chart.append(ChartPoint(name=_DAY_NAMES[day.weekday()], day=day, hours=round(seconds / 3600, 1)))
    return chart


def dashboard_stats(tasks: List[Task], logs: List[TimeLog], xp: int, today: Optional[date] = None) -> DashboardStats:
    """Build every dashboard number from the current state."""
    seconds = total_focus_seconds(logs)
    return DashboardStats(
        focus_hours=seconds // 3600,
        focus_minutes=(seconds % 3600) // 60,
        completion_percent=completion_percent(tasks),
        level=level_for_xp(xp),
        level_progress=level_progress(xp),
        chart=focus_chart(logs, today),
    )


def format_duration(total_seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    hours, rest = divmod(max(0, total_seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_block_start(hour: int, minute: int) -> str:
    """Format a block start as 12-hour clock time, e.g. 05:30 AM."""
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour - 12 if hour > 12 else (12 if hour == 0 else hour)
    return f"{display_hour:02d}:{minute:02d} {period}"
