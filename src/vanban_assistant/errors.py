"""Exceptions raised by the assistant's collaborators (AI, stores, parsers)."""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for errors surfaced to the user."""


class MalformedResponseError(AssistantError):
    """The AI service returned output that does not match the expected shape."""


class QuotaExceededError(AssistantError):
    def __init__(self, username: str, used: int, total: int):
        self.username = username
        self.used = used
        self.total = total
        super().__init__(
            f"Hạn mức đã hết ({used}/{total}) cho tài khoản '{username}'. "
            "Vui lòng liên hệ quản trị viên."
        )


class AuthenticationError(AssistantError):
    """Wrong credentials or unknown account."""


class RecordNotFoundError(AssistantError):
    """A user or project id does not exist in the store."""


class UnsupportedFileError(AssistantError):
    """No text extraction route exists for this file type."""
