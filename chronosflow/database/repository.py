"""Repository layer for the persisted application state."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from chronosflow.models.task import Task, TaskStatus
from chronosflow.models.planning import PlanningTask
from chronosflow.models.time_log import TimeLog
from chronosflow.models.reward import Reward
from chronosflow.models.state import AppState, STATE_KEYS
from chronosflow.models.task_factory import default_tasks, default_planning
from chronosflow.engine.status import derive_status
from chronosflow.database.models import StateRecordDB

logger = logging.getLogger(__name__)


# Record name -> (validator, default factory)
_RECORDS: Dict[str, tuple] = {
    "tasks": (TypeAdapter(List[Task]), default_tasks),
    "planning": (TypeAdapter(List[PlanningTask]), default_planning),
    "logs": (TypeAdapter(List[TimeLog]), list),
    "rewards": (TypeAdapter(List[Reward]), list),
    "spent_xp": (TypeAdapter(int), int),
}


def _with_derived_status(task: Task) -> Task:
    """Re-derive a sub-tasked task's stored status from its checklist."""
    if not task.has_sub_tasks:
        return task
    status = derive_status(task.sub_tasks)
    if TaskStatus(task.status) != status:
        logger.warning(f"Task {task.id} stored status {task.status} does not match its sub-tasks, using {status.value}")
        return task.model_copy(update={"status": status})
    return task


class StateRepository:
    """Key/value store of the five state records, backed by SQLAlchemy.

    Implements the StateStore capability used by the session controller.
    """

    def __init__(self, db: Session):
        self.db = db

    def _load_record(self, key: str) -> Any:
        """Read one record, falling back to its default if absent or malformed."""
        validator, default_factory = _RECORDS[key]
        record = self.db.query(StateRecordDB).filter(StateRecordDB.key == key).first()
        if record is None:
            logger.debug(f"State record '{key}' not found, using default")
            return default_factory()

        try:
            value = validator.validate_python(json.loads(record.value))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"State record '{key}' is malformed ({type(e).__name__}), using default")
            return default_factory()

        if key == "spent_xp" and value < 0:
            logger.warning(f"State record 'spent_xp' is negative ({value}), using default")
            return default_factory()
        return value

    def load(self) -> AppState:
        """Load the full application state."""
        records = {key: self._load_record(key) for key in STATE_KEYS}
        records["tasks"] = [_with_derived_status(task) for task in records["tasks"]]
        return AppState(**records)

    def _dump_record(self, state: AppState, key: str) -> str:
        value = getattr(state, key)
        if isinstance(value, list):
            value = [item.model_dump(mode="json") for item in value]
        return json.dumps(value)

    def save(self, state: AppState) -> None:
        """Rewrite every record in one transaction."""
        now = datetime.utcnow()
        try:
            for key in STATE_KEYS:
                record = self.db.query(StateRecordDB).filter(StateRecordDB.key == key).first()
                value = self._dump_record(state, key)
                if record is None:
                    self.db.add(StateRecordDB(key=key, value=value, updated_at=now))
                else:
                    record.value = value
                    record.updated_at = now
            self.db.commit()
            logger.debug(f"Saved state: {len(state.tasks)} tasks, {len(state.logs)} logs, {state.spent_xp} XP spent")
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save state: {type(e).__name__}: {str(e)}")
            raise

