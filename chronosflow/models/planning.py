"""PlanningTask data model for ChronosFlow."""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field

from chronosflow.models.task import SubTask


class PlanningCategory(str, Enum):
    """Planning horizon enumeration."""
    MONTHLY = "monthly"
    WEEKLY = "weekly"


class PlanningTask(BaseModel):
    """Longer-horizon goal that daily tasks can be mounted to."""

    id: str = Field(..., description="Unique goal identifier")
    title: str = Field(..., description="Goal title")
    category: PlanningCategory = Field(PlanningCategory.WEEKLY, description="Planning horizon")
    completed: bool = Field(False, description="Set once a linked task reaches done")
    sub_tasks: List[SubTask] = Field(default_factory=list, description="Sub-task template copied onto linked tasks")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
