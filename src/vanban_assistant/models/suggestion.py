"""Pydantic models for review suggestions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SuggestionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class RawSuggestion(BaseModel):
    """One candidate edit as returned by the AI reviewer.

    The wire format names the replacement field ``suggestion``; both names
    are accepted.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False)

    original: str = Field(min_length=1)
    replacement: str = Field(alias="suggestion")
    reason: str = ""


class Suggestion(BaseModel):
    """A suggestion inside a review session, with its lifecycle status."""

    id: int
    original: str
    replacement: str
    reason: str = ""
    status: SuggestionStatus = SuggestionStatus.PENDING
    applied: bool | None = None  # None until accepted; False = target text was gone

    @property
    def is_pending(self) -> bool:
        return self.status is SuggestionStatus.PENDING
