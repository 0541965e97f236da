"""Insight payload extraction and response parsing for ChronosFlow.

The LLM only ever sees a compact summary: task titles, statuses and
priorities, plus the most recent focus sessions.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from pydantic import ValidationError

from chronosflow.models.task import Task, TaskStatus, Priority
from chronosflow.models.time_log import TimeLog
from chronosflow.models.insight import InsightResult
from chronosflow.models.constants import INSIGHT_LOG_LIMIT

logger = logging.getLogger(__name__)


def build_insight_payload(tasks: List[Task], logs: List[TimeLog], log_limit: int = INSIGHT_LOG_LIMIT) -> Dict[str, Any]:
    """Build the summary sent to the LLM.

    Args:
        tasks: Current task list
        logs: Focus sessions, newest first
        log_limit: Maximum number of sessions to include

    Returns:
        JSON-serializable dict with "tasks" and "logs"
    """
    return {
        "tasks": [
            {"t": task.title, "s": TaskStatus(task.status).value, "p": Priority(task.priority).value}
            for task in tasks
        ],
        "logs": [
            {
                "task": log.task_title,
                "start": log.start_time.isoformat(),
                "end": log.end_time.isoformat(),
                "seconds": log.duration,
            }
            for log in logs[:log_limit]
        ],
    }


def _strip_code_fence(content: str) -> str:
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def parse_insight_response(content: Optional[str]) -> Optional[InsightResult]:
    """Parse the LLM's JSON answer into an InsightResult.

    Only the shape is checked (score number, summary string, recommendations
    list of strings).

    Returns:
        InsightResult, or None if the content is empty, not JSON or the wrong shape
    """
    if not content or not content.strip():
        return None
    try:
        data = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse insight JSON: {e}. Response: {content[:100]}")
        return None
    try:
        return InsightResult.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Insight response has the wrong shape: {e.error_count()} error(s)")
        return None
