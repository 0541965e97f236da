"""FastAPI web application for ChronosFlow."""

import logging
from datetime import datetime
from typing import List, Optional
from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from chronosflow.models.task import Task, Priority, TimeBlock, ScoringProfile
from chronosflow.models.planning import PlanningTask, PlanningCategory
from chronosflow.models.time_log import TimeLog
from chronosflow.models.reward import Reward
from chronosflow.models.insight import InsightSlot
from chronosflow.engine.scoring import XPBreakdown, task_base_xp
from chronosflow.engine.stats import DashboardStats, format_block_start, format_duration
from chronosflow.engine.planning import selectable_goals
from chronosflow.engine.economy import balance
from chronosflow.session.controller import SessionController

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="ChronosFlow API",
    description="Daily protocol blocks, XP economy and focus tracking",
    version="0.1.0"
)

# Single local session (single user, single process)
_session: Optional[SessionController] = None


def get_session() -> SessionController:
    """Get the process-wide session controller (dependency for FastAPI)."""
    global _session
    if _session is None:
        from chronosflow.database.database import get_db, init_db
        from chronosflow.database.repository import StateRepository
        from chronosflow.integrations.openai_client import OpenAIClient
        from chronosflow.session.ticker import FocusTicker

        init_db()
        _session = SessionController(
            store=StateRepository(get_db()),
            ticker=FocusTicker(),
            insight_client=OpenAIClient(),
        )
        logger.info("Session controller initialized")
    return _session


# Request models
class TaskCreateRequest(BaseModel):
    """Request to create a task block."""
    title: str = Field(..., min_length=1)
    description: str = ""
    priority: Priority = Priority.MEDIUM
    scheduled_block: Optional[TimeBlock] = None
    sub_tasks: Optional[List[str]] = Field(None, description="Sub-task titles")
    xp_stakes: Optional[int] = Field(None, ge=0)
    scoring_profile: Optional[ScoringProfile] = Field(None, description="Sub-task scoring profile (derived from the title if omitted)")


class LinkGoalRequest(BaseModel):
    """Request to mount a task onto a planning goal."""
    goal_id: str


class GoalCreateRequest(BaseModel):
    """Request to create a planning goal."""
    title: str = Field(..., min_length=1)
    category: PlanningCategory = PlanningCategory.WEEKLY
    sub_tasks: Optional[List[str]] = Field(None, description="Sub-task template titles")


class RewardCreateRequest(BaseModel):
    """Request to create a reward."""
    title: str = Field(..., min_length=1)
    cost: int = Field(..., ge=0)
    icon: Optional[str] = None


class TimerStartRequest(BaseModel):
    """Request to start the focus timer."""
    task_id: str = Field(..., min_length=1)


# Response models
class TaskView(Task):
    """Task plus the values the schedule view shows next to it."""
    xp: float = Field(..., description="Current contribution of this task to raw XP")
    block_label: Optional[str] = Field(None, description="Block start as 12-hour clock time")


class XPResponse(BaseModel):
    """Response for the XP header."""
    xp: XPBreakdown
    spent_xp: int
    balance: int


class StateResponse(BaseModel):
    """Response for the full state."""
    tasks: List[TaskView]
    planning: List[PlanningTask]
    logs: List[TimeLog]
    rewards: List[Reward]
    xp: XPResponse


class TaskResponse(BaseModel):
    """Response for a single-task action."""
    task: TaskView
    xp: XPResponse


class TimerResponse(BaseModel):
    """Response for the focus tracker."""
    running: bool
    task_id: str
    elapsed_seconds: int
    display: str
    started_at: Optional[datetime]
    selectable_tasks: List[TaskView]
    log: Optional[TimeLog] = None


class RedeemResponse(BaseModel):
    """Response for a redemption attempt."""
    redeemed: bool
    reward: Reward
    xp: XPResponse


class DashboardResponse(BaseModel):
    """Response for the dashboard."""
    stats: DashboardStats
    xp: XPResponse


def _task_view(task: Task) -> TaskView:
    block = task.scheduled_block
    return TaskView(
        **task.model_dump(),
        xp=float(task_base_xp(task)),
        block_label=format_block_start(block.start_hour, block.start_minute) if block else None,
    )


def _xp_response(session: SessionController) -> XPResponse:
    xp = session.xp()
    spent_xp = session.state.spent_xp
    return XPResponse(xp=xp, spent_xp=spent_xp, balance=balance(xp.total_xp, spent_xp))


def _timer_response(session: SessionController, log: Optional[TimeLog] = None) -> TimerResponse:
    timer = session.timer
    return TimerResponse(
        running=timer.running,
        task_id=timer.task_id,
        elapsed_seconds=timer.elapsed_seconds,
        display=format_duration(timer.elapsed_seconds),
        started_at=timer.started_at,
        selectable_tasks=[_task_view(task) for task in session.timer_tasks()],
        log=log,
    )


def _task_or_404(task: Optional[Task], task_id: str) -> Task:
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/state", response_model=StateResponse)
async def get_state(session: SessionController = Depends(get_session)):
    """Full application state with derived XP."""
    state = session.state
    return StateResponse(
        tasks=[_task_view(task) for task in state.tasks],
        planning=state.planning,
        logs=state.logs,
        rewards=state.rewards,
        xp=_xp_response(session),
    )


@app.get("/xp", response_model=XPResponse)
async def get_xp(session: SessionController = Depends(get_session)):
    """XP total, multiplier breakdown and balance."""
    return _xp_response(session)


@app.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(request: TaskCreateRequest, session: SessionController = Depends(get_session)):
    """Create a task block."""
    try:
        task = session.create_task(
            title=request.title,
            priority=request.priority,
            description=request.description,
            scheduled_block=request.scheduled_block,
            sub_task_titles=request.sub_tasks,
            xp_stakes=request.xp_stakes,
            scoring_profile=request.scoring_profile,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TaskResponse(task=_task_view(task), xp=_xp_response(session))


@app.post("/tasks/{task_id}/cycle", response_model=TaskResponse)
async def cycle_status(task_id: str, session: SessionController = Depends(get_session)):
    """Cycle a task's status."""
    task = _task_or_404(session.cycle_status(task_id), task_id)
    return TaskResponse(task=_task_view(task), xp=_xp_response(session))


@app.post("/tasks/{task_id}/subtasks/{sub_task_id}/toggle", response_model=TaskResponse)
async def toggle_sub_task(task_id: str, sub_task_id: str, session: SessionController = Depends(get_session)):
    """Check or uncheck one sub-task."""
    if session.get_task(task_id) is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    task = session.toggle_sub_task(task_id, sub_task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Sub-task {sub_task_id} not found")
    return TaskResponse(task=_task_view(task), xp=_xp_response(session))


@app.post("/tasks/{task_id}/link", response_model=TaskResponse)
async def link_goal(task_id: str, request: LinkGoalRequest, session: SessionController = Depends(get_session)):
    """Mount a task onto a planning goal (unknown goal leaves the task unchanged)."""
    task = _task_or_404(session.get_task(task_id), task_id)
    task = session.link_goal(task_id, request.goal_id) or task
    return TaskResponse(task=_task_view(task), xp=_xp_response(session))


@app.get("/planning", response_model=List[PlanningTask])
async def list_goals(open_only: bool = False, session: SessionController = Depends(get_session)):
    """List planning goals (open_only=true lists the ones a task can still be mounted to)."""
    if open_only:
        return selectable_goals(session.state.planning)
    return session.state.planning


@app.post("/planning", response_model=PlanningTask, status_code=201)
async def create_goal(request: GoalCreateRequest, session: SessionController = Depends(get_session)):
    """Create a planning goal."""
    try:
        return session.create_goal(request.title, request.category, request.sub_tasks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.delete("/planning/{goal_id}", status_code=204)
async def delete_goal(goal_id: str, session: SessionController = Depends(get_session)):
    """Delete a planning goal."""
    if not session.delete_goal(goal_id):
        raise HTTPException(status_code=404, detail=f"Goal {goal_id} not found")


@app.get("/timer", response_model=TimerResponse)
async def get_timer(session: SessionController = Depends(get_session)):
    """Focus timer state."""
    return _timer_response(session)


@app.post("/timer/start", response_model=TimerResponse)
async def start_timer(request: TimerStartRequest, session: SessionController = Depends(get_session)):
    """Start a focus session."""
    _task_or_404(session.get_task(request.task_id), request.task_id)
    if not session.start_timer(request.task_id):
        raise HTTPException(status_code=409, detail="Timer is already running")
    return _timer_response(session)


@app.post("/timer/stop", response_model=TimerResponse)
async def stop_timer(session: SessionController = Depends(get_session)):
    """Stop the focus session (no-op when idle)."""
    log = session.stop_timer()
    return _timer_response(session, log)


@app.get("/rewards", response_model=List[Reward])
async def list_rewards(session: SessionController = Depends(get_session)):
    """List rewards."""
    return session.state.rewards


@app.post("/rewards", response_model=Reward, status_code=201)
async def create_reward(request: RewardCreateRequest, session: SessionController = Depends(get_session)):
    """Create a reward."""
    try:
        return session.create_reward(request.title, request.cost, request.icon)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/rewards/{reward_id}/redeem", response_model=RedeemResponse)
async def redeem_reward(reward_id: str, session: SessionController = Depends(get_session)):
    """Buy a reward; insufficient balance is reported as redeemed=false."""
    if session.get_reward(reward_id) is None:
        raise HTTPException(status_code=404, detail=f"Reward {reward_id} not found")
    redeemed = session.buy_reward(reward_id)
    return RedeemResponse(redeemed=redeemed, reward=session.get_reward(reward_id), xp=_xp_response(session))


@app.get("/dashboard", response_model=DashboardResponse)
async def dashboard(session: SessionController = Depends(get_session)):
    """Aggregate statistics and the 7-day focus chart."""
    return DashboardResponse(stats=session.dashboard(), xp=_xp_response(session))


@app.get("/insights", response_model=InsightSlot)
async def get_insights(session: SessionController = Depends(get_session)):
    """Last insight result (or error)."""
    return session.insights


@app.post("/insights", response_model=InsightSlot)
async def refresh_insights(session: SessionController = Depends(get_session)):
    """Request a new AI analysis of the current tasks and logs."""
    return await session.refresh_insights()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
