"""Task creation factory for ChronosFlow.

This module centralizes creation of tasks, goals, rewards and the starter
data so that default values stay consistent across the application.
"""

import uuid
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from chronosflow.models.task import Task, TaskStatus, Priority, ScoringProfile, SubTask, TimeBlock
from chronosflow.models.planning import PlanningTask, PlanningCategory
from chronosflow.models.reward import Reward
from chronosflow.models.state import AppState
from chronosflow.models.constants import DEFAULT_SUB_TASK_XP, DEFAULT_REWARD_ICON, SCORING_PROFILES


# Titles that carried special scoring before tasks were tagged with a profile
_PROFILE_BY_TITLE: Dict[str, ScoringProfile] = {
    "Night Routine": ScoringProfile.NIGHT_ROUTINE,
    "Morning Routine": ScoringProfile.STANDARD,
    "Training": ScoringProfile.STANDARD,
}

# Weekday (Monday=0) -> two exercises for the Training block
_DAILY_EXERCISES = {
    0: ("Burpies", "Pull ups"),
    1: ("Push ups", "Supermans"),
    2: ("Squats", "Face pulls"),
    3: ("Pull ups", "Push ups"),
    4: ("Burpies", "Supermans"),
    5: ("Squats", "Face pulls"),
    6: ("Mobility Flow", "Stretching"),
}


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid.uuid4())


def profile_for_title(title: str) -> ScoringProfile:
    """Map a legacy block title to its scoring profile.

    Only used when tasks are created; scoring itself never looks at titles.
    """
    return _PROFILE_BY_TITLE.get(title, ScoringProfile.STANDARD)


def daily_exercises(day: Optional[date] = None) -> Sequence[str]:
    """Get the two exercises of the Training block for a given day."""
    day = day or date.today()
    return _DAILY_EXERCISES[day.weekday()]


def create_sub_tasks(
    titles: Sequence[str],
    prefix: str = "st",
    xp_value: Optional[int] = None,
) -> List[SubTask]:
    """Create an unchecked sub-task list with ids unique within the task."""
    xp = xp_value if xp_value is not None else DEFAULT_SUB_TASK_XP
    return [
        SubTask(id=f"{prefix}{index}", title=title, completed=False, xp_value=xp)
        for index, title in enumerate(titles, start=1)
    ]


def create_task_base(
    title: str,
    priority: Priority = Priority.MEDIUM,
    description: str = "",
    scheduled_block: Optional[TimeBlock] = None,
    sub_task_titles: Optional[Sequence[str]] = None,
    xp_stakes: Optional[int] = None,
    scoring_profile: Optional[ScoringProfile] = None,
    task_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    Args:
        title: Task title (required)
        priority: Task priority
        description: Free-form description
        scheduled_block: Fixed daily schedule block
        sub_task_titles: Titles of the checklist items, if any
        xp_stakes: Stake wagered on the block
        scoring_profile: Sub-task scoring profile (derived from the title if None)
        task_id: Explicit id (a UUID is generated if None)
        created_at: Creation timestamp (now if None)

    Returns:
        Task in status todo with every sub-task unchecked

    Raises:
        ValueError: If the title is blank
    """
    if not title or not title.strip():
        raise ValueError("Task title must not be empty")

    profile = scoring_profile if scoring_profile is not None else profile_for_title(title)
    sub_tasks = None
    if sub_task_titles:
        per_sub_task = SCORING_PROFILES[ScoringProfile(profile)][0]
        sub_tasks = create_sub_tasks(sub_task_titles, xp_value=per_sub_task)

    return Task(
        id=task_id or new_id(),
        title=title.strip(),
        description=description,
        priority=priority,
        status=TaskStatus.TODO,
        created_at=created_at or datetime.utcnow(),
        scheduled_block=scheduled_block,
        sub_tasks=sub_tasks,
        xp_stakes=xp_stakes or None,
        scoring_profile=profile,
    )


def create_planning_task(
    title: str,
    category: PlanningCategory = PlanningCategory.WEEKLY,
    sub_task_titles: Optional[Sequence[str]] = None,
) -> PlanningTask:
    """Create an open planning goal.

    Raises:
        ValueError: If the title is blank
    """
    if not title or not title.strip():
        raise ValueError("Goal title must not be empty")
    return PlanningTask(
        id=new_id(),
        title=title.strip(),
        category=category,
        completed=False,
        sub_tasks=create_sub_tasks(sub_task_titles or [], prefix="pt"),
    )


def create_reward(title: str, cost: int, icon: Optional[str] = None) -> Reward:
    """Create a reward that has never been redeemed.

    Raises:
        ValueError: If the title is blank or the cost is negative
    """
    if not title or not title.strip():
        raise ValueError("Reward title must not be empty")
    if cost < 0:
        raise ValueError("Reward cost must not be negative")
    return Reward(id=new_id(), title=title.strip(), cost=cost, icon=icon or DEFAULT_REWARD_ICON)


def _block(hour: int, minute: int, hours: float) -> TimeBlock:
    return TimeBlock(start_hour=hour, start_minute=minute, duration_hours=hours)


def default_tasks(day: Optional[date] = None) -> List[Task]:
    """Build the fixed starter protocol of eight daily blocks."""
    exercises = daily_exercises(day)
    now = datetime.utcnow()

    def sub_tasks(prefix: str, titles: Sequence[str], xp: int) -> List[SubTask]:
        return create_sub_tasks(titles, prefix=prefix, xp_value=xp)

    return [
        Task(id="t1", title="Morning Routine", priority=Priority.HIGH, created_at=now,
             scheduled_block=_block(5, 30, 2),
             sub_tasks=sub_tasks("mr", ["Hanging", "Stretching", "Breathing", "Make Bed", "BMCJJ"], 10)),
        Task(id="t2", title="1 Thing (Deepwork)", priority=Priority.HIGH, created_at=now,
             scheduled_block=_block(7, 30, 2), xp_stakes=100),
        Task(id="t3", title="Training", priority=Priority.MEDIUM, created_at=now,
             scheduled_block=_block(9, 30, 2),
             sub_tasks=sub_tasks("tr", ["Steps", "Core", "Cardio", *exercises], 10)),
        Task(id="t4", title="B Side (Deepwork)", priority=Priority.HIGH, created_at=now,
             scheduled_block=_block(11, 30, 2), xp_stakes=75),
        Task(id="t5", title="Free Time", priority=Priority.LOW, created_at=now,
             scheduled_block=_block(13, 30, 4.5)),
        Task(id="t6", title="Education", priority=Priority.MEDIUM, created_at=now,
             scheduled_block=_block(18, 30, 1), xp_stakes=50),
        Task(id="t7", title="Yoga and Mobility", priority=Priority.LOW, created_at=now,
             scheduled_block=_block(20, 0, 0.5), xp_stakes=50),
        Task(id="t8", title="Night Routine", priority=Priority.MEDIUM, created_at=now,
             scheduled_block=_block(22, 0, 0.5), scoring_profile=ScoringProfile.NIGHT_ROUTINE,
             sub_tasks=sub_tasks("nr", ["Review Day", "Plan Tomorrow", "Bed time"], 20)),
    ]


def default_planning() -> List[PlanningTask]:
    """Build the starter planning goals."""
    return [
        PlanningTask(id="p1", title="Launch Q1 MVP", category=PlanningCategory.MONTHLY),
        PlanningTask(id="p2", title="AI Module Integration", category=PlanningCategory.WEEKLY),
    ]


def default_state(day: Optional[date] = None) -> AppState:
    """Build the complete starter state (no logs, no rewards, nothing spent)."""
    return AppState(
        tasks=default_tasks(day),
        planning=default_planning(),
        logs=[],
        rewards=[],
        spent_xp=0,
    )
