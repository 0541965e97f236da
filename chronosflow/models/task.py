"""Task data model for ChronosFlow."""

from datetime import datetime
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Task priority enumeration."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "todo"
    PARTIAL = "partial"
    DONE = "done"


class ScoringProfile(str, Enum):
    """Selects the sub-task rate, completion bonus and idle penalty of a task."""
    STANDARD = "standard"
    NIGHT_ROUTINE = "night_routine"
    LINEAR = "linear"  # Per-sub-task XP only, no bonus or penalty


class TimeBlock(BaseModel):
    """Fixed daily schedule slot of a task."""

    start_hour: int = Field(..., ge=0, le=23, description="Start hour (0-23)")
    start_minute: int = Field(..., ge=0, le=59, description="Start minute (0-59)")
    duration_hours: float = Field(..., gt=0, description="Block length in hours, may be fractional")


class SubTask(BaseModel):
    """Checklist item owned by a task."""

    id: str = Field(..., description="Identifier, unique within the owning task")
    title: str = Field(..., description="Sub-task title")
    completed: bool = Field(False, description="Whether the sub-task is checked off")
    xp_value: int = Field(10, ge=0, description="XP shown for this checklist item")


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: str = Field("", description="Free-form task description")
    priority: Priority = Field(Priority.MEDIUM, description="Task priority")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    created_at: datetime = Field(..., description="Task creation timestamp")
    scheduled_block: Optional[TimeBlock] = Field(None, description="Fixed daily schedule block")
    sub_tasks: Optional[List[SubTask]] = Field(None, description="Ordered sub-task checklist")
    linked_planning_task_id: Optional[str] = Field(None, description="Planning goal this task is mounted to")
    xp_stakes: Optional[int] = Field(None, ge=0, description="XP won on completion, lost when untouched")
    scoring_profile: ScoringProfile = Field(ScoringProfile.STANDARD, description="Sub-task scoring profile")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @property
    def has_stakes(self) -> bool:
        return bool(self.xp_stakes)

    @property
    def has_sub_tasks(self) -> bool:
        # An empty checklist behaves like a plain task.
        return bool(self.sub_tasks)
