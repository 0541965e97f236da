"""TimeLog data model for ChronosFlow."""

from datetime import datetime
from pydantic import BaseModel, Field


class TimeLog(BaseModel):
    """A completed focus session.

    The task title is a snapshot taken when the session stopped, so renaming
    the task later does not rewrite history.
    """

    id: str = Field(..., description="Unique log identifier")
    task_id: str = Field(..., description="Task the session was logged against")
    task_title: str = Field(..., description="Task title at the time the session stopped")
    start_time: datetime = Field(..., description="Session start timestamp")
    end_time: datetime = Field(..., description="Session stop timestamp")
    duration: int = Field(..., ge=0, description="Counted focus time in whole seconds")
