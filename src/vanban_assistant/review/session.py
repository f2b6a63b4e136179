"""Review session: suggestion lifecycle and the working text they edit."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from vanban_assistant.models.diff import DiffRecord
from vanban_assistant.models.suggestion import RawSuggestion, Suggestion, SuggestionStatus
from vanban_assistant.review.differ import diff_texts

logger = logging.getLogger(__name__)


def _apply(text: str, suggestion: Suggestion) -> tuple[str, bool]:
    """Replace the first literal occurrence of ``suggestion.original``."""
    if suggestion.original not in text:
        return text, False
    return text.replace(suggestion.original, suggestion.replacement, 1), True


class ReviewSession:
    """Suggestions for one review pass plus the working text they edit.

    Not thread-safe: each interactive session owns its own instance.
    Accepting a suggestion whose ``original`` is no longer present in the
    working text still marks it accepted; ``Suggestion.applied`` is False
    in that case.
    """

    def __init__(self) -> None:
        self._original = ""
        self._working = ""
        self._suggestions: list[Suggestion] = []

    @property
    def original_text(self) -> str:
        return self._original

    @property
    def working_text(self) -> str:
        return self._working

    @property
    def suggestions(self) -> list[Suggestion]:
        return [s.model_copy() for s in self._suggestions]

    @property
    def pending_count(self) -> int:
        return sum(1 for s in self._suggestions if s.is_pending)

    @property
    def is_complete(self) -> bool:
        return self.pending_count == 0

    def initialize(
        self,
        text: str,
        raw_suggestions: Iterable[RawSuggestion | dict],
    ) -> list[Suggestion]:
        """Start a new review pass, discarding any previous one."""
        items: list[Suggestion] = []
        for idx, raw in enumerate(raw_suggestions):
            if isinstance(raw, dict):
                raw = RawSuggestion.model_validate(raw)
            items.append(
                Suggestion(
                    id=idx,
                    original=raw.original,
                    replacement=raw.replacement,
                    reason=raw.reason,
                )
            )
        self._original = text
        self._working = text
        self._suggestions = items
        logger.debug("Review session initialized with %d suggestions", len(items))
        return self.suggestions

    def get(self, suggestion_id: int) -> Suggestion | None:
        for s in self._suggestions:
            if s.id == suggestion_id:
                return s.model_copy()
        return None

    def _find_pending(self, suggestion_id: int) -> Suggestion | None:
        for s in self._suggestions:
            if s.id == suggestion_id:
                return s if s.is_pending else None
        return None

    def accept(self, suggestion_id: int) -> bool:
        """Accept one pending suggestion. Returns True if the text changed."""
        s = self._find_pending(suggestion_id)
        if s is None:
            return False
        self._working, applied = _apply(self._working, s)
        s.status = SuggestionStatus.ACCEPTED
        s.applied = applied
        if not applied:
            logger.info("Suggestion %d accepted but its text is no longer present", s.id)
        return applied

    def reject(self, suggestion_id: int) -> None:
        s = self._find_pending(suggestion_id)
        if s is not None:
            s.status = SuggestionStatus.REJECTED

    def accept_all(self) -> list[Suggestion]:
        """Accept every pending suggestion in ascending id order.

        Each replacement runs against the text left by the previous one.
        Results are staged locally and committed in a single step.
        """
        pending = sorted((s for s in self._suggestions if s.is_pending), key=lambda s: s.id)
        if not pending:
            return []

        text = self._working
        outcomes: list[bool] = []
        for s in pending:
            text, applied = _apply(text, s)
            outcomes.append(applied)

        self._working = text
        for s, applied in zip(pending, outcomes):
            s.status = SuggestionStatus.ACCEPTED
            s.applied = applied
        logger.debug(
            "Accepted %d suggestions (%d applied)", len(pending), sum(outcomes)
        )
        return [s.model_copy() for s in pending]

    def replace_working_text(self, text: str) -> None:
        """Swap in a whole new working text, e.g. after an AI refine pass."""
        self._working = text

    def reset(self) -> None:
        self._original = ""
        self._working = ""
        self._suggestions = []

    def diff(self) -> list[DiffRecord]:
        return diff_texts(self._original, self._working)
