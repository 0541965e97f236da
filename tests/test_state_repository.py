"""Tests for StateRepository (SQLAlchemy-backed state records)."""

import json
from datetime import datetime

from chronosflow.database.models import StateRecordDB
from chronosflow.models.reward import Reward
from chronosflow.models.task import TaskStatus
from chronosflow.models.state import AppState, STATE_KEYS


def _write_raw(db_session, key: str, value: str):
    db_session.add(StateRecordDB(key=key, value=value, updated_at=datetime(2024, 1, 1)))
    db_session.commit()


class TestLoadDefaults:
    """Missing records fall back to the starter data."""

    def test_empty_database_gives_starter_state(self, state_repository):
        state = state_repository.load()

        assert [task.id for task in state.tasks] == ["t1", "t2", "t3", "t4", "t5", "t6", "t7", "t8"]
        assert [goal.id for goal in state.planning] == ["p1", "p2"]
        assert state.logs == []
        assert state.rewards == []
        assert state.spent_xp == 0

    def test_starter_tasks_are_untouched(self, state_repository):
        state = state_repository.load()
        assert all(task.status == TaskStatus.TODO for task in state.tasks)


class TestSaveAndLoad:
    """Saved snapshots load back unchanged."""

    def test_save_then_load(self, state_repository, default_app_state):
        state = default_app_state.model_copy(update={
            "rewards": [Reward(id="r1", title="Coffee", cost=50, redemption_count=2)],
            "spent_xp": 100,
        })

        state_repository.save(state)
        loaded = state_repository.load()

        assert loaded.model_dump() == state.model_dump()

    def test_save_writes_every_record(self, state_repository, db_session, empty_state):
        state_repository.save(empty_state)
        keys = {record.key for record in db_session.query(StateRecordDB).all()}
        assert keys == set(STATE_KEYS)

    def test_save_overwrites(self, state_repository, db_session, empty_state):
        state_repository.save(empty_state)
        state_repository.save(empty_state.model_copy(update={"spent_xp": 7}))

        assert db_session.query(StateRecordDB).count() == len(STATE_KEYS)
        assert state_repository.load().spent_xp == 7

    def test_empty_lists_survive(self, state_repository, empty_state):
        """An explicitly saved empty task list is not replaced by starter data."""
        state_repository.save(empty_state)
        assert state_repository.load().model_dump() == AppState().model_dump()


class TestMalformedRecords:
    """A malformed record falls back to its own default only."""

    def test_invalid_json(self, state_repository, db_session):
        _write_raw(db_session, "tasks", "{not json")
        _write_raw(db_session, "spent_xp", "40")

        state = state_repository.load()
        assert len(state.tasks) == 8
        assert state.spent_xp == 40

    def test_wrong_shape(self, state_repository, db_session):
        _write_raw(db_session, "rewards", json.dumps([{"title": "no id or cost"}]))
        assert state_repository.load().rewards == []

    def test_non_list_planning(self, state_repository, db_session):
        _write_raw(db_session, "planning", json.dumps({"p1": "oops"}))
        assert [goal.id for goal in state_repository.load().planning] == ["p1", "p2"]

    def test_negative_spent_xp(self, state_repository, db_session):
        _write_raw(db_session, "spent_xp", "-5")
        assert state_repository.load().spent_xp == 0

    def test_non_integer_spent_xp(self, state_repository, db_session):
        _write_raw(db_session, "spent_xp", json.dumps("lots"))
        assert state_repository.load().spent_xp == 0


class TestDerivedStatus:
    """Sub-tasked tasks get their status from the checklist on load."""

    def _task(self, status: str, completed: list) -> dict:
        return {
            "id": "routine",
            "title": "Routine",
            "status": status,
            "created_at": "2024-01-01T08:00:00",
            "sub_tasks": [
                {"id": f"s{i}", "title": f"Step {i}", "completed": done}
                for i, done in enumerate(completed, start=1)
            ],
        }

    def test_stale_status_is_re_derived(self, state_repository, db_session):
        _write_raw(db_session, "tasks", json.dumps([self._task("todo", [True, True])]))
        assert state_repository.load().tasks[0].status == TaskStatus.DONE

    def test_partial_checklist(self, state_repository, db_session):
        _write_raw(db_session, "tasks", json.dumps([self._task("done", [True, False])]))
        assert state_repository.load().tasks[0].status == TaskStatus.PARTIAL

    def test_plain_task_keeps_stored_status(self, state_repository, db_session):
        task = self._task("partial", [])
        _write_raw(db_session, "tasks", json.dumps([task]))
        assert state_repository.load().tasks[0].status == TaskStatus.PARTIAL
