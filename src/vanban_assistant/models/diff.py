"""Line diff records."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiffType(str, Enum):
    COMMON = "common"
    DELETED = "deleted"
    ADDED = "added"


class DiffRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: DiffType
    line: str
