"""XP scoring and economy engine for ChronosFlow."""

from chronosflow.engine.scoring import compute_xp, task_base_xp, focus_bonus, adherence_rate, adherence_multiplier, XPBreakdown
from chronosflow.engine.status import next_status, derive_status, cycle_task, toggle_sub_task, complete_linked_goal
from chronosflow.engine.economy import balance, can_redeem, redeem_reward
from chronosflow.engine.timer import FocusTimer

__all__ = [
    "compute_xp",
    "task_base_xp",
    "focus_bonus",
    "adherence_rate",
    "adherence_multiplier",
    "XPBreakdown",
    "next_status",
    "derive_status",
    "cycle_task",
    "toggle_sub_task",
    "complete_linked_goal",
    "balance",
    "can_redeem",
    "redeem_reward",
    "FocusTimer",
]
