"""OpenAI API integration for ChronosFlow.

This module provides OpenAI API integration for the AI insights view: it sends
the compact task/log summary and asks for a structured productivity analysis.
"""

import os
import json
import logging
from typing import Any, Dict, Optional
from openai import OpenAI, APIError
from dotenv import load_dotenv

from chronosflow.models.insight import InsightResult
from chronosflow.engine.insights import parse_insight_response

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# OpenAI model to use for insights
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Insight prompt template
INSIGHT_PROMPT_TEMPLATE = """You are a productivity coach. Given a person's daily task blocks and recent focus sessions, analyse their day.

Tasks (t = title, s = status todo/partial/done, p = priority): {tasks}
Recent focus sessions: {logs}

Respond with a JSON object containing:
- "score": A number between 0 and 100 rating today's productivity
- "summary": A short professional analysis (2-3 sentences)
- "recommendations": A list of short, actionable recommendations

Example response:
{{"score": 72, "summary": "Solid morning, weak afternoon.", "recommendations": ["Protect the deep work block"]}}

Respond only with the JSON object, no other text."""


class InsightError(Exception):
    """Raised when an insight request fails; the message is safe to show."""


class OpenAIClient:
    """Client for OpenAI API integration."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY environment variable.
            model: Model name. If None, uses OPENAI_MODEL.

        Note:
            If API key is not provided and not found in environment, the client will still
            initialize but every request fails with InsightError. This allows graceful degradation.
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model or OPENAI_MODEL
        self.client = None

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key)
        else:
            logger.warning("OPENAI_API_KEY not found in environment. AI insights will not be available.")

    def generate_insights(self, payload: Dict[str, Any]) -> InsightResult:
        """Request a productivity analysis for a task/log summary.

        Args:
            payload: Summary built by build_insight_payload()

        Returns:
            Parsed InsightResult

        Raises:
            InsightError: If the client is not configured, the API call fails
                or the response cannot be parsed
        """
        if not self.client:
            raise InsightError("OpenAI API key is not configured")

        try:
            prompt = INSIGHT_PROMPT_TEMPLATE.format(
                tasks=json.dumps(payload.get("tasks", [])),
                logs=json.dumps(payload.get("logs", [])),
            )

            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a productivity coach. Respond only with valid JSON."},
                    {"role": "user", "content": prompt}
                ],
                response_format={"type": "json_object"},
                temperature=0.4,
                max_tokens=600,
            )
            content = response.choices[0].message.content

        except APIError as e:
            # Handle OpenAI API errors (rate limits, quota issues, invalid key, etc.)
            error_code = getattr(e, 'code', None)
            status_code = getattr(e, 'status_code', None)

            if error_code == 'insufficient_quota':
                logger.warning("OpenAI API quota insufficient. Please check billing/payment method in OpenAI dashboard.")
                raise InsightError("OpenAI quota exhausted") from e
            if status_code == 429:
                logger.warning("OpenAI API rate limit exceeded. Please wait before retrying.")
                raise InsightError("OpenAI rate limit exceeded") from e

            # Don't log full error message as it might contain sensitive info
            logger.error(f"OpenAI API error: {status_code or 'unknown'} ({error_code or 'unknown'})")
            raise InsightError("OpenAI API error") from e
        except Exception as e:
            # Network errors and unexpected response objects
            logger.error(f"Error calling OpenAI API: {type(e).__name__}")
            raise InsightError(f"Insight request failed: {type(e).__name__}") from e

        result = parse_insight_response(content)
        if result is None:
            raise InsightError("Insight response could not be parsed")

        logger.debug(f"OpenAI insight score: {result.score}")
        return result
