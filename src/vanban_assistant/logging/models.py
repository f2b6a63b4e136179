"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """One AI action charged against (or run outside of) a user's quota."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: int | None = None  # None for demo sessions
    timestamp: datetime = Field(default_factory=datetime.now)
    action: str  # "review" | "security_check" | "refine" | "summarize" | ...
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None
