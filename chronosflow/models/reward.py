"""Reward data model for ChronosFlow."""

from pydantic import BaseModel, Field


class Reward(BaseModel):
    """User-defined item that can be bought with XP."""

    id: str = Field(..., description="Unique reward identifier")
    title: str = Field(..., description="Reward title")
    cost: int = Field(..., ge=0, description="XP price of one redemption")
    icon: str = Field("fa-gift", description="Icon identifier used by the front-end")
    redemption_count: int = Field(0, ge=0, description="How many times the reward was bought")
