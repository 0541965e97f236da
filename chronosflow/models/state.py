"""Application state model for ChronosFlow."""

from typing import List
from pydantic import BaseModel, Field

from chronosflow.models.task import Task
from chronosflow.models.planning import PlanningTask
from chronosflow.models.time_log import TimeLog
from chronosflow.models.reward import Reward


# Names of the independently persisted records
STATE_KEYS = ("tasks", "planning", "logs", "rewards", "spent_xp")


class AppState(BaseModel):
    """Everything the session persists.

    Treated as an immutable snapshot: every transition builds a new AppState.
    """

    tasks: List[Task] = Field(default_factory=list, description="Ordered daily task blocks")
    planning: List[PlanningTask] = Field(default_factory=list, description="Ordered planning goals")
    logs: List[TimeLog] = Field(default_factory=list, description="Focus sessions, newest first")
    rewards: List[Reward] = Field(default_factory=list, description="Redeemable rewards")
    spent_xp: int = Field(0, ge=0, description="Cumulative XP spent on rewards")
