"""Session controller for ChronosFlow.

The controller is the single owner of the application state. Every user
action is one synchronous transition: it builds a new AppState snapshot,
persists it through the injected StateStore and only then replaces the
current snapshot. Derived values (XP, balance, stats) are recomputed from
the current snapshot on every read.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, List, Optional

from chronosflow.models.task import Task, Priority, TaskStatus, TimeBlock, ScoringProfile
from chronosflow.models.planning import PlanningTask, PlanningCategory
from chronosflow.models.reward import Reward
from chronosflow.models.time_log import TimeLog
from chronosflow.models.insight import InsightSlot
from chronosflow.models.state import AppState
from chronosflow.models.task_factory import create_task_base, create_planning_task, create_reward
from chronosflow.engine.scoring import compute_xp, XPBreakdown
from chronosflow.engine.status import cycle_task, toggle_sub_task, complete_linked_goal
from chronosflow.engine.planning import find_goal, link_task_to_goal
from chronosflow.engine.economy import balance, redeem_reward
from chronosflow.engine.timer import FocusTimer
from chronosflow.engine.stats import dashboard_stats, DashboardStats
from chronosflow.engine.insights import build_insight_payload
from chronosflow.session.ports import StateStore
from chronosflow.session.ticker import FocusTicker

logger = logging.getLogger(__name__)


class SessionController:
    """Owns the stores, the timer and the insight slot of one local session."""

    def __init__(
        self,
        store: StateStore,
        timer: Optional[FocusTimer] = None,
        ticker: Optional[FocusTicker] = None,
        insight_client: Any = None,
    ):
        """Initialize the session from persisted state.

        Args:
            store: Persistence capability (load/save)
            timer: Focus timer (a new one if None)
            ticker: Periodic tick driver; None means ticks are delivered by
                calling tick_timer() directly
            insight_client: Object with generate_insights(payload) -> InsightResult
        """
        self._store = store
        self.state: AppState = store.load()
        self.timer = timer or FocusTimer()
        self.ticker = ticker
        self.insight_client = insight_client
        self.insights = InsightSlot()
        logger.info(
            f"Session loaded: {len(self.state.tasks)} tasks, {len(self.state.planning)} goals, "
            f"{len(self.state.logs)} logs, {len(self.state.rewards)} rewards"
        )

    def _commit(self, state: AppState) -> AppState:
        """Persist a new snapshot, then make it current."""
        self._store.save(state)
        self.state = state
        return state

    # --- Derived values ---

    def xp(self) -> XPBreakdown:
        return compute_xp(self.state.tasks, self.state.logs)

    def balance(self) -> int:
        return balance(self.xp().total_xp, self.state.spent_xp)

    def dashboard(self, today: Optional[date] = None) -> DashboardStats:
        return dashboard_stats(self.state.tasks, self.state.logs, self.xp().total_xp, today)

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((task for task in self.state.tasks if task.id == task_id), None)

    def timer_tasks(self) -> List[Task]:
        """Tasks the focus timer can be started for (everything not done)."""
        return [task for task in self.state.tasks if task.status != TaskStatus.DONE]

    # --- Tasks ---

    def create_task(
        self,
        title: str,
        priority: Priority = Priority.MEDIUM,
        description: str = "",
        scheduled_block: Optional[TimeBlock] = None,
        sub_task_titles: Optional[List[str]] = None,
        xp_stakes: Optional[int] = None,
        scoring_profile: Optional[ScoringProfile] = None,
    ) -> Task:
        """Append a new task block."""
        task = create_task_base(
            title=title,
            priority=priority,
            description=description,
            scheduled_block=scheduled_block,
            sub_task_titles=sub_task_titles,
            xp_stakes=xp_stakes,
            scoring_profile=scoring_profile,
        )
        self._commit(self.state.model_copy(update={"tasks": [*self.state.tasks, task]}))
        logger.debug(f"Created task {task.id}: {task.title[:50]}")
        return task

    def _replace_task(self, updated: Task, complete_goal: bool = True) -> Task:
        """Swap in an updated task.

        The linked goal is completed only when the task moves into done here.
        """
        previous = self.get_task(updated.id)
        tasks = [updated if task.id == updated.id else task for task in self.state.tasks]
        planning = self.state.planning
        if complete_goal and TaskStatus(previous.status) != TaskStatus.DONE:
            planning, goal_changed = complete_linked_goal(updated, planning)
            if goal_changed:
                logger.info(f"Goal {updated.linked_planning_task_id} completed by task {updated.id}")
        self._commit(self.state.model_copy(update={"tasks": tasks, "planning": planning}))
        return updated

    def cycle_status(self, task_id: str) -> Optional[Task]:
        """Cycle a task's status; None if the task does not exist."""
        task = self.get_task(task_id)
        if task is None:
            return None
        return self._replace_task(cycle_task(task))

    def toggle_sub_task(self, task_id: str, sub_task_id: str) -> Optional[Task]:
        """Flip one sub-task; None if the task or sub-task does not exist."""
        task = self.get_task(task_id)
        if task is None:
            return None
        updated = toggle_sub_task(task, sub_task_id)
        if updated is None:
            return None
        return self._replace_task(updated)

    def link_goal(self, task_id: str, goal_id: str) -> Optional[Task]:
        """Mount a task onto a goal; no-op (None) if either does not exist."""
        task = self.get_task(task_id)
        goal = find_goal(self.state.planning, goal_id)
        if task is None or goal is None:
            return None
        return self._replace_task(link_task_to_goal(task, goal), complete_goal=False)

    # --- Planning ---

    def create_goal(
        self,
        title: str,
        category: PlanningCategory = PlanningCategory.WEEKLY,
        sub_task_titles: Optional[List[str]] = None,
    ) -> PlanningTask:
        """Prepend a new planning goal."""
        goal = create_planning_task(title, category, sub_task_titles)
        self._commit(self.state.model_copy(update={"planning": [goal, *self.state.planning]}))
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal; linked tasks keep their (now dangling) link."""
        if find_goal(self.state.planning, goal_id) is None:
            return False
        planning = [goal for goal in self.state.planning if goal.id != goal_id]
        self._commit(self.state.model_copy(update={"planning": planning}))
        return True

    # --- Rewards ---

    def create_reward(self, title: str, cost: int, icon: Optional[str] = None) -> Reward:
        reward = create_reward(title, cost, icon)
        self._commit(self.state.model_copy(update={"rewards": [*self.state.rewards, reward]}))
        return reward

    def get_reward(self, reward_id: str) -> Optional[Reward]:
        return next((reward for reward in self.state.rewards if reward.id == reward_id), None)

    def buy_reward(self, reward_id: str) -> bool:
        """Redeem a reward if the balance covers it.

        Returns:
            True if the reward was bought; False leaves the state untouched
        """
        updated = redeem_reward(self.state, reward_id, self.xp().total_xp)
        if updated is None:
            return False
        self._commit(updated)
        logger.info(f"Reward {reward_id} redeemed, {updated.spent_xp} XP spent in total")
        return True

    # --- Timer ---

    def start_timer(self, task_id: Optional[str] = None) -> bool:
        if task_id is not None and self.get_task(task_id) is None:
            return False
        if not self.timer.start(task_id):
            return False
        if self.ticker is not None:
            self.ticker.start(self.tick_timer)
        return True

    def tick_timer(self) -> None:
        self.timer.tick()

    def stop_timer(self) -> Optional[TimeLog]:
        """Stop the running session and append its log (if any).

        Returns:
            The new TimeLog, or None if nothing was logged
        """
        if self.ticker is not None:
            self.ticker.stop()
        log = self.timer.stop(self.state.tasks)
        if log is None:
            return None
        self._commit(self.state.model_copy(update={"logs": [log, *self.state.logs]}))
        logger.info(f"Logged {log.duration}s of focus on task {log.task_id}")
        return log

    # --- Insights ---

    async def refresh_insights(self) -> InsightSlot:
        """Request a new analysis and store it in the insight slot.

        Failures keep the previous result and record the error; they never
        touch the persisted state.
        """
        if self.insight_client is None:
            self.insights = self.insights.model_copy(update={"error": "AI insights are not configured"})
            return self.insights
        if self.insights.pending:
            return self.insights

        payload = build_insight_payload(self.state.tasks, self.state.logs)
        self.insights = self.insights.model_copy(update={"pending": True, "error": None})
        try:
            result = await asyncio.to_thread(self.insight_client.generate_insights, payload)
        except Exception as e:
            logger.warning(f"Insight request failed: {e}")
            self.insights = self.insights.model_copy(update={"error": str(e)})
        else:
            self.insights = InsightSlot(pending=True, result=result, error=None, updated_at=datetime.utcnow())
        finally:
            # Runs on cancellation too.
            self.insights = self.insights.model_copy(update={"pending": False})
        return self.insights
