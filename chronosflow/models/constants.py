"""Constants for ChronosFlow.

This module centralizes all magic numbers and default values used throughout the application.
"""

from decimal import Decimal

from chronosflow.models.task import Priority, ScoringProfile


# Plain task XP (no stakes, no sub-tasks)
PLAIN_DONE_XP = 50
PLAIN_PARTIAL_XP = 20

# Sub-task scoring: profile -> (XP per completed sub-task, completion bonus, idle penalty)
SCORING_PROFILES = {
    ScoringProfile.STANDARD: (10, 25, 25),
    ScoringProfile.NIGHT_ROUTINE: (20, 40, 50),
    ScoringProfile.LINEAR: (10, 0, 0),
}

# Priority multipliers, applied to positive done contributions only
PRIORITY_MULTIPLIERS = {
    Priority.HIGH: Decimal("1.2"),
    Priority.MEDIUM: Decimal("1.0"),
    Priority.LOW: Decimal("0.8"),
}

# Focus bonus
FOCUS_BONUS_INTERVAL_SECONDS = 1800  # Every 30 cumulative minutes
FOCUS_BONUS_XP = 5

# Adherence
ADHERENCE_THRESHOLD = Decimal("0.8")
ADHERENCE_MULTIPLIER = Decimal("1.1")

# Rank levels
XP_PER_LEVEL = 500

# Insights
INSIGHT_LOG_LIMIT = 15  # Most recent logs sent to the LLM

# Dashboard
CHART_DAYS = 7

# Task defaults
DEFAULT_SUB_TASK_XP = 10
DEFAULT_REWARD_ICON = "fa-gift"
