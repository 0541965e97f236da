"""Data models for ChronosFlow."""

from chronosflow.models.task import Task, TaskStatus, Priority, ScoringProfile, SubTask, TimeBlock
from chronosflow.models.planning import PlanningTask, PlanningCategory
from chronosflow.models.time_log import TimeLog
from chronosflow.models.reward import Reward
from chronosflow.models.insight import InsightResult, InsightSlot
from chronosflow.models.state import AppState, STATE_KEYS

__all__ = [
    "Task",
    "TaskStatus",
    "Priority",
    "ScoringProfile",
    "SubTask",
    "TimeBlock",
    "PlanningTask",
    "PlanningCategory",
    "TimeLog",
    "Reward",
    "InsightResult",
    "InsightSlot",
    "AppState",
    "STATE_KEYS",
]
