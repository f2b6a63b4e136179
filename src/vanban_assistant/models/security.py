"""Pydantic models for the sensitive-information scan."""

from __future__ import annotations

from pydantic import BaseModel


class SecurityWarning(BaseModel):
    id: int
    text: str    # Passage that may be sensitive
    reason: str  # e.g. personal name, rank, unit designation, classified figure
