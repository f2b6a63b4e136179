"""Account and quota models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    SUPERADMIN = "superadmin"


class Quota(BaseModel):
    total: int = Field(ge=0)
    used: int = Field(default=0, ge=0)

    @property
    def remaining(self) -> int:
        return max(self.total - self.used, 0)

    @property
    def exhausted(self) -> bool:
        return self.used >= self.total


class User(BaseModel):
    """A user account. The password hash never leaves the store."""

    id: int
    username: str
    role: Role = Role.USER
    quota: Quota

    @property
    def is_admin(self) -> bool:
        return self.role is Role.SUPERADMIN
