"""Data models for the document assistant."""

from vanban_assistant.models.diff import DiffRecord, DiffType
from vanban_assistant.models.security import SecurityWarning
from vanban_assistant.models.suggestion import RawSuggestion, Suggestion, SuggestionStatus
from vanban_assistant.models.tasks import (
    DOCUMENT_TYPES,
    DetailLevel,
    DraftTask,
    ReviewTask,
    SourceDocument,
    SummarizeTask,
    ToneStyle,
)
from vanban_assistant.models.user import Quota, Role, User
from vanban_assistant.models.workspace import Dictionary, Project, ProjectResultType

__all__ = [
    "DOCUMENT_TYPES",
    "DetailLevel",
    "Dictionary",
    "DiffRecord",
    "DiffType",
    "DraftTask",
    "Project",
    "ProjectResultType",
    "Quota",
    "RawSuggestion",
    "ReviewTask",
    "Role",
    "SecurityWarning",
    "SourceDocument",
    "Suggestion",
    "SuggestionStatus",
    "SummarizeTask",
    "ToneStyle",
    "User",
]
