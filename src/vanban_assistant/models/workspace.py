"""Abbreviation dictionaries and saved workspace projects."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Dictionary(BaseModel):
    id: str
    name: str
    content: str  # One "- ABBR: expansion" entry per line


class ProjectResultType(str, Enum):
    ANALYSIS = "analysis"
    DRAFTING = "drafting"
    REVIEW = "review"


class Project(BaseModel):
    id: str
    name: str
    created_at: datetime
    last_modified: datetime
    analysis_result: str | None = None
    draft_result: str | None = None
    review_result: str | None = None

    def result_for(self, result_type: ProjectResultType) -> str | None:
        return {
            ProjectResultType.ANALYSIS: self.analysis_result,
            ProjectResultType.DRAFTING: self.draft_result,
            ProjectResultType.REVIEW: self.review_result,
        }[result_type]
