"""Status cycling and derivation for ChronosFlow tasks.

Tasks without sub-tasks carry a stored status that the user cycles
todo -> partial -> done -> todo. Tasks with sub-tasks never store an
independent status: it is always the projection of their checklist.
"""

from typing import List, Optional, Tuple

from chronosflow.models.task import Task, TaskStatus, SubTask
from chronosflow.models.planning import PlanningTask


_NEXT_STATUS = {
    TaskStatus.TODO: TaskStatus.PARTIAL,
    TaskStatus.PARTIAL: TaskStatus.DONE,
    TaskStatus.DONE: TaskStatus.TODO,
}


def next_status(status: TaskStatus) -> TaskStatus:
    """Get the next status in the manual cycle."""
    return _NEXT_STATUS[TaskStatus(status)]


def derive_status(sub_tasks: List[SubTask]) -> TaskStatus:
    """Derive a task status from its sub-task checklist.

    done iff all completed, partial iff some, todo iff none.
    """
    completed = sum(1 for sub in sub_tasks if sub.completed)
    if sub_tasks and completed == len(sub_tasks):
        return TaskStatus.DONE
    if completed > 0:
        return TaskStatus.PARTIAL
    return TaskStatus.TODO


def _set_all_sub_tasks(sub_tasks: List[SubTask], completed: bool) -> List[SubTask]:
    return [sub.model_copy(update={"completed": completed}) for sub in sub_tasks]


def cycle_task(task: Task) -> Task:
    """Return the task after one manual status cycle.

    For a sub-tasked task the cycle goes from done to todo (every sub-task
    unchecked) and from anything else to done (every sub-task checked), so the
    stored status always matches the checklist.
    """
    if task.has_sub_tasks:
        complete = TaskStatus(task.status) != TaskStatus.DONE
        sub_tasks = _set_all_sub_tasks(task.sub_tasks, complete)
        return task.model_copy(update={"sub_tasks": sub_tasks, "status": derive_status(sub_tasks)})

    return task.model_copy(update={"status": next_status(task.status)})


def toggle_sub_task(task: Task, sub_task_id: str) -> Optional[Task]:
    """Return the task with one sub-task flipped and its status re-derived.

    Returns:
        Updated task, or None if the task has no sub-task with that id
    """
    if not task.sub_tasks or not any(sub.id == sub_task_id for sub in task.sub_tasks):
        return None

    sub_tasks = [
        sub.model_copy(update={"completed": not sub.completed}) if sub.id == sub_task_id else sub
        for sub in task.sub_tasks
    ]
    return task.model_copy(update={"sub_tasks": sub_tasks, "status": derive_status(sub_tasks)})


def complete_linked_goal(task: Task, planning: List[PlanningTask]) -> Tuple[List[PlanningTask], bool]:
    """Mark the goal a done task is linked to as completed.

    One-directional: un-completing the task later leaves the goal completed.

    Returns:
        Tuple of (planning list, whether a goal changed)
    """
    if not task.linked_planning_task_id or TaskStatus(task.status) != TaskStatus.DONE:
        return planning, False

    changed = False
    updated = []
    for goal in planning:
        if goal.id == task.linked_planning_task_id and not goal.completed:
            goal = goal.model_copy(update={"completed": True})
            changed = True
        updated.append(goal)
    return updated, changed
