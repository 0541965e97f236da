"""Goal linking ("mounting") for ChronosFlow."""

from typing import List, Optional

from chronosflow.models.task import Task
from chronosflow.models.planning import PlanningTask
from chronosflow.engine.status import derive_status


def find_goal(planning: List[PlanningTask], goal_id: str) -> Optional[PlanningTask]:
    """Find a planning goal by id."""
    return next((goal for goal in planning if goal.id == goal_id), None)


def link_task_to_goal(task: Task, goal: PlanningTask) -> Task:
    """Mount a task onto a planning goal.

    The task takes the goal's title. When the goal has a sub-task template, the
    task's checklist is replaced by a fresh copy of it and the status is
    re-derived from that checklist.
    """
    update = {"title": goal.title, "linked_planning_task_id": goal.id}
    if goal.sub_tasks:
        sub_tasks = [sub.model_copy() for sub in goal.sub_tasks]
        update["sub_tasks"] = sub_tasks
        update["status"] = derive_status(sub_tasks)
    return task.model_copy(update=update)


def selectable_goals(planning: List[PlanningTask]) -> List[PlanningTask]:
    """Goals a task can still be mounted to (not yet completed)."""
    return [goal for goal in planning if not goal.completed]
