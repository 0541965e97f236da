"""Insight data models for ChronosFlow."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class InsightResult(BaseModel):
    """Parsed productivity analysis returned by the LLM."""

    score: float = Field(..., description="Productivity score (0-100)")
    summary: str = Field(..., description="Short textual analysis")
    recommendations: List[str] = Field(default_factory=list, description="Actionable suggestions")


class InsightSlot(BaseModel):
    """Independent result slot for the insights request.

    Read-only for the presentation layer; the scoring engine never looks at it.
    """

    pending: bool = Field(False, description="Whether a request is in flight")
    result: Optional[InsightResult] = Field(None, description="Last successful analysis")
    error: Optional[str] = Field(None, description="Error message of the last failed request")
    updated_at: Optional[datetime] = Field(None, description="When the last successful analysis arrived")
