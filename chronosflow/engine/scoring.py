"""XP scoring logic for ChronosFlow.

Converts the current task list and focus logs into a non-negative XP total.
Every function here is pure and deterministic: the result is recomputed from
scratch on each call, so the same inputs always produce the same output.

All intermediate arithmetic uses Decimal so that multipliers such as 1.2 and
1.1 are exact; rounding happens once, on the final total.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence
from pydantic import BaseModel, Field

from chronosflow.models.task import Task, TaskStatus, Priority, ScoringProfile
from chronosflow.models.time_log import TimeLog
from chronosflow.models.constants import (
    PLAIN_DONE_XP,
    PLAIN_PARTIAL_XP,
    SCORING_PROFILES,
    PRIORITY_MULTIPLIERS,
    FOCUS_BONUS_INTERVAL_SECONDS,
    FOCUS_BONUS_XP,
    ADHERENCE_THRESHOLD,
    ADHERENCE_MULTIPLIER,
)


class XPBreakdown(BaseModel):
    """Result of an XP computation."""

    total_xp: int = Field(..., ge=0, description="Final XP total")
    raw_xp: float = Field(..., description="Sum of per-task contributions (may be negative)")
    focus_bonus: int = Field(..., ge=0, description="XP earned from cumulative focus time")
    focus_seconds: int = Field(..., ge=0, description="Total logged focus time")
    adherence_rate: float = Field(..., ge=0.0, le=1.0, description="Fraction of tasks done")
    adherence_multiplier: float = Field(..., description="Multiplier applied to raw XP plus focus bonus")


def round_half_away_from_zero(value: Decimal) -> int:
    """Round to the nearest integer, .5 going away from zero (16.5 -> 17, -16.5 -> -17)."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def task_base_xp(task: Task) -> Decimal:
    """Compute the contribution of a single task, priority multiplier included.

    Args:
        task: Task to score

    Returns:
        Contribution in XP (negative for lost stakes and untouched checklists)
    """
    status = TaskStatus(task.status)

    if task.has_stakes:
        base = _stake_xp(task.xp_stakes, status)
    elif task.has_sub_tasks:
        base = _sub_task_xp(task)
    else:
        base = _plain_xp(status)

    if base > 0 and status == TaskStatus.DONE:
        base *= PRIORITY_MULTIPLIERS[Priority(task.priority)]
    return base


def _stake_xp(stakes: int, status: TaskStatus) -> Decimal:
    if status == TaskStatus.DONE:
        return Decimal(stakes)
    if status == TaskStatus.TODO:
        return Decimal(-stakes)
    return Decimal(0)


def _sub_task_xp(task: Task) -> Decimal:
    per_sub_task, bonus, penalty = SCORING_PROFILES[ScoringProfile(task.scoring_profile)]
    completed_count = sum(1 for sub in task.sub_tasks if sub.completed)

    xp = completed_count * per_sub_task
    if completed_count == len(task.sub_tasks):
        xp += bonus
    if completed_count == 0:
        xp -= penalty
    return Decimal(xp)


def _plain_xp(status: TaskStatus) -> Decimal:
    if status == TaskStatus.DONE:
        return Decimal(PLAIN_DONE_XP)
    if status == TaskStatus.PARTIAL:
        return Decimal(PLAIN_PARTIAL_XP)
    return Decimal(0)


def total_focus_seconds(logs: Sequence[TimeLog]) -> int:
    """Sum the durations of all focus sessions."""
    return sum(log.duration for log in logs)


def focus_bonus(logs: Sequence[TimeLog]) -> int:
    """XP granted for every completed 30 minutes of cumulative (all-time) focus."""
    return (total_focus_seconds(logs) // FOCUS_BONUS_INTERVAL_SECONDS) * FOCUS_BONUS_XP


def adherence_rate(tasks: Sequence[Task]) -> Decimal:
    """Fraction of tasks currently done (0 when there are no tasks)."""
    if not tasks:
        return Decimal(0)
    done = sum(1 for task in tasks if task.status == TaskStatus.DONE)
    return Decimal(done) / Decimal(len(tasks))


def adherence_multiplier(tasks: Sequence[Task]) -> Decimal:
    """1.1 when at least 80% of tasks are done, otherwise 1.0."""
    if adherence_rate(tasks) >= ADHERENCE_THRESHOLD:
        return ADHERENCE_MULTIPLIER
    return Decimal(1)


def compute_xp(tasks: List[Task], logs: List[TimeLog]) -> XPBreakdown:
    """Compute the XP total and its multiplier breakdown.

    totalXP = max(0, round((sum(task_base) + focus_bonus) * adherence_multiplier))

    Args:
        tasks: Current task list
        logs: All focus sessions

    Returns:
        XPBreakdown with the final total and the intermediate values
    """
    raw_xp = sum((task_base_xp(task) for task in tasks), Decimal(0))
    bonus = focus_bonus(logs)
    rate = adherence_rate(tasks)
    multiplier = adherence_multiplier(tasks)

    total = round_half_away_from_zero((raw_xp + bonus) * multiplier)

    return XPBreakdown(
        total_xp=max(0, total),
        raw_xp=float(raw_xp),
        focus_bonus=bonus,
        focus_seconds=total_focus_seconds(logs),
        adherence_rate=float(rate),
        adherence_multiplier=float(multiplier),
    )

