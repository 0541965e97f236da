"""Tests for status cycling, sub-task toggling and goal auto-completion."""

import pytest

from factories import make_sub_tasks

from chronosflow.engine.status import (
    next_status,
    derive_status,
    cycle_task,
    toggle_sub_task,
    complete_linked_goal,
)
from chronosflow.models.task import Task, TaskStatus
from chronosflow.models.planning import PlanningTask, PlanningCategory


class TestNextStatus:
    """Manual cycle todo -> partial -> done -> todo."""

    @pytest.mark.parametrize("current, expected", [
        (TaskStatus.TODO, TaskStatus.PARTIAL),
        (TaskStatus.PARTIAL, TaskStatus.DONE),
        (TaskStatus.DONE, TaskStatus.TODO),
    ])
    def test_cycle(self, current, expected):
        assert next_status(current) == expected

    def test_accepts_plain_strings(self):
        """Stored statuses are plain strings after validation."""
        assert next_status("partial") == TaskStatus.DONE


class TestDeriveStatus:
    """Status of a sub-tasked task is the projection of its checklist."""

    def test_all_checked(self):
        assert derive_status(make_sub_tasks(3, completed=3)) == TaskStatus.DONE

    def test_some_checked(self):
        assert derive_status(make_sub_tasks(3, completed=1)) == TaskStatus.PARTIAL

    def test_none_checked(self):
        assert derive_status(make_sub_tasks(3)) == TaskStatus.TODO

    def test_empty_list(self):
        assert derive_status([]) == TaskStatus.TODO


class TestCycleTask:
    """Tests for cycle_task()."""

    def test_plain_task_cycles(self, sample_task):
        task = cycle_task(sample_task)
        assert task.status == TaskStatus.PARTIAL
        task = cycle_task(task)
        assert task.status == TaskStatus.DONE
        task = cycle_task(task)
        assert task.status == TaskStatus.TODO

    def test_does_not_mutate_input(self, sample_task):
        cycle_task(sample_task)
        assert sample_task.status == TaskStatus.TODO

    def test_sub_tasked_task_completes_everything(self, routine_task):
        task = cycle_task(routine_task)
        assert task.status == TaskStatus.DONE
        assert all(sub.completed for sub in task.sub_tasks)

    def test_partial_sub_tasked_task_completes_everything(self, sample_task_base):
        task = Task(**{**sample_task_base, "sub_tasks": make_sub_tasks(5, completed=2), "status": TaskStatus.PARTIAL})
        task = cycle_task(task)
        assert task.status == TaskStatus.DONE
        assert all(sub.completed for sub in task.sub_tasks)

    def test_done_sub_tasked_task_clears_everything(self, sample_task_base):
        task = Task(**{**sample_task_base, "sub_tasks": make_sub_tasks(5, completed=5), "status": TaskStatus.DONE})
        task = cycle_task(task)
        assert task.status == TaskStatus.TODO
        assert not any(sub.completed for sub in task.sub_tasks)

    def test_status_always_matches_checklist(self, routine_task):
        task = routine_task
        for _ in range(4):
            task = cycle_task(task)
            assert task.status == derive_status(task.sub_tasks)


class TestToggleSubTask:
    """Tests for toggle_sub_task()."""

    def test_first_check_moves_to_partial(self, routine_task):
        task = toggle_sub_task(routine_task, "s1")
        assert task.sub_tasks[0].completed is True
        assert task.status == TaskStatus.PARTIAL

    def test_last_check_moves_to_done(self, sample_task_base):
        task = Task(**{**sample_task_base, "sub_tasks": make_sub_tasks(3, completed=2), "status": TaskStatus.PARTIAL})
        task = toggle_sub_task(task, "s3")
        assert task.status == TaskStatus.DONE

    def test_uncheck_last_moves_back_to_todo(self, sample_task_base):
        task = Task(**{**sample_task_base, "sub_tasks": make_sub_tasks(3, completed=1), "status": TaskStatus.PARTIAL})
        task = toggle_sub_task(task, "s1")
        assert task.status == TaskStatus.TODO

    def test_unknown_sub_task(self, routine_task):
        assert toggle_sub_task(routine_task, "missing") is None

    def test_plain_task_has_nothing_to_toggle(self, sample_task):
        assert toggle_sub_task(sample_task, "s1") is None

    def test_other_sub_tasks_unchanged(self, routine_task):
        task = toggle_sub_task(routine_task, "s2")
        assert [sub.completed for sub in task.sub_tasks] == [False, True, False, False, False]


class TestCompleteLinkedGoal:
    """A done task completes the goal it is mounted on."""

    @pytest.fixture
    def planning(self):
        return [
            PlanningTask(id="g1", title="Ship it", category=PlanningCategory.MONTHLY),
            PlanningTask(id="g2", title="Other", category=PlanningCategory.WEEKLY),
        ]

    def test_done_task_completes_goal(self, sample_task_base, planning):
        task = Task(**{**sample_task_base, "linked_planning_task_id": "g1", "status": TaskStatus.DONE})
        updated, changed = complete_linked_goal(task, planning)
        assert changed is True
        assert updated[0].completed is True
        assert updated[1].completed is False
        assert planning[0].completed is False

    def test_partial_task_leaves_goal_open(self, sample_task_base, planning):
        task = Task(**{**sample_task_base, "linked_planning_task_id": "g1", "status": TaskStatus.PARTIAL})
        updated, changed = complete_linked_goal(task, planning)
        assert changed is False
        assert updated[0].completed is False

    def test_unlinked_task(self, sample_task_base, planning):
        task = Task(**{**sample_task_base, "status": TaskStatus.DONE})
        _, changed = complete_linked_goal(task, planning)
        assert changed is False

    def test_dangling_link_is_ignored(self, sample_task_base, planning):
        task = Task(**{**sample_task_base, "linked_planning_task_id": "deleted", "status": TaskStatus.DONE})
        updated, changed = complete_linked_goal(task, planning)
        assert changed is False
        assert updated == planning

    def test_already_completed_goal(self, sample_task_base, planning):
        planning[0] = planning[0].model_copy(update={"completed": True})
        task = Task(**{**sample_task_base, "linked_planning_task_id": "g1", "status": TaskStatus.DONE})
        _, changed = complete_linked_goal(task, planning)
        assert changed is False
