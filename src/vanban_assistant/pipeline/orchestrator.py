"""Coordinates AI agents with quota checks and usage accounting."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import TypeVar

from vanban_assistant.clients.llm_client import DEFAULT_MODEL, FAST_MODEL, LLMClient
from vanban_assistant.logging.cost_calculator import calculate_cost
from vanban_assistant.logging.models import UsageLog
from vanban_assistant.logging.usage_store import UsageStore
from vanban_assistant.models.security import SecurityWarning
from vanban_assistant.models.tasks import (
    DetailLevel,
    DraftTask,
    SourceDocument,
    SummarizeTask,
    ToneStyle,
)
from vanban_assistant.models.user import User
from vanban_assistant.models.workspace import Dictionary
from vanban_assistant.parsers.document_parser import extract_text, needs_ai_extraction
from vanban_assistant.pipeline.drafter import Drafter
from vanban_assistant.pipeline.refiner import TextRefiner
from vanban_assistant.pipeline.reviewer import DocumentReviewer
from vanban_assistant.pipeline.summarizer import Summarizer
from vanban_assistant.review.session import ReviewSession
from vanban_assistant.store.user_store import UserStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AssistantOrchestrator:
    """Runs AI actions for a user, charging one quota unit per successful call.

    ``user=None`` is a demo session: no quota reservation,
    though the call is still written to the usage log.
    """

    def __init__(
        self,
        llm: LLMClient,
        users: UserStore,
        *,
        usage: UsageStore | None = None,
        model: str = DEFAULT_MODEL,
        fast_model: str = FAST_MODEL,
        refine_temperature: float = 0.4,
        draft_temperature: float = 0.3,
    ):
        self.llm = llm
        self.users = users
        self.usage = usage
        self.reviewer = DocumentReviewer(llm, model=model, fast_model=fast_model)
        self.refiner = TextRefiner(llm, model=model, temperature=refine_temperature)
        self.summarizer = Summarizer(llm, model=model)
        self.drafter = Drafter(llm, model=model, temperature=draft_temperature)

    async def run_action(
        self,
        user: User | None,
        action: str,
        call: Callable[[], Awaitable[T]],
    ) -> T:
        """Reserve one quota unit, run ``call``, then record usage.

        The unit is handed back if the call does not return, including on
        cancellation or interrupt.
        """
        if user is not None:
            self.users.reserve_quota(user.id)

        self.llm.get_token_summary()  # drop tokens from earlier, unaccounted calls
        start = time.monotonic()
        error: str | None = None
        try:
            return await call()
        except BaseException as e:
            error = str(e) or type(e).__name__
            raise
        finally:
            elapsed = time.monotonic() - start
            tokens = self.llm.get_token_summary()
            if error is not None and user is not None:
                self.users.release_quota(user.id)
            self._log_usage(user, action, elapsed, tokens, error)

    def _log_usage(
        self,
        user: User | None,
        action: str,
        elapsed: float,
        tokens: dict,
        error: str | None,
    ) -> None:
        if self.usage is None:
            return
        try:
            log = UsageLog(
                user_id=user.id if user else None,
                action=action,
                elapsed_seconds=elapsed,
                total_input_tokens=tokens["input"],
                total_output_tokens=tokens["output"],
                estimated_cost_usd=calculate_cost(tokens["calls"]),
                success=error is None,
                error_message=error,
            )
            self.usage.save_log(log)
        except Exception:
            logger.warning("Failed to save usage log", exc_info=True)

    # -- review ----------------------------------------------------------------

    async def start_review(
        self,
        user: User | None,
        text: str,
        *,
        dictionary: Dictionary | None = None,
        tone: ToneStyle | None = None,
        session: ReviewSession | None = None,
    ) -> ReviewSession:
        """Run a full review and return a session initialized with its suggestions."""
        suggestions = await self.run_action(
            user, "review", lambda: self.reviewer.review(text, dictionary=dictionary, tone=tone)
        )
        session = session or ReviewSession()
        session.initialize(text, suggestions)
        return session

    async def security_check(self, user: User | None, text: str) -> list[SecurityWarning]:
        return await self.run_action(
            user, "security_check", lambda: self.reviewer.security_check(text)
        )

    async def evaluate_effectiveness(self, user: User | None, text: str) -> str:
        return await self.run_action(
            user, "evaluate_effectiveness", lambda: self.reviewer.evaluate_effectiveness(text)
        )

    async def check_consistency(self, user: User | None, text: str, source_text: str) -> str:
        return await self.run_action(
            user, "consistency_check", lambda: self.reviewer.check_consistency(text, source_text)
        )

    async def refine_session(
        self,
        user: User | None,
        session: ReviewSession,
        tone: ToneStyle,
        detail_level: DetailLevel,
    ) -> str:
        """Rewrite the session's working text in place and return it."""
        refined = await self.run_action(
            user,
            "refine",
            lambda: self.refiner.refine(session.working_text, tone, detail_level),
        )
        session.replace_working_text(refined)
        return refined

    # -- analysis / drafting ---------------------------------------------------

    async def summarize(
        self,
        user: User | None,
        task: SummarizeTask,
        data: str | list[SourceDocument],
        custom_request: str | None = None,
    ) -> str:
        return await self.run_action(
            user, "summarize", lambda: self.summarizer.summarize(task, data, custom_request)
        )

    async def draft(
        self,
        user: User | None,
        task: DraftTask,
        ideas: str | Mapping[str, str],
        doc_type: str,
        **kwargs,
    ) -> str:
        return await self.run_action(
            user, "draft", lambda: self.drafter.draft(task, ideas, doc_type, **kwargs)
        )

    async def extract_text(self, user: User | None, path: str | Path) -> str:
        """Extract file text; only AI-backed extraction is charged to the quota."""
        if not needs_ai_extraction(path):
            return await extract_text(path)
        return await self.run_action(user, "extract_text", lambda: extract_text(path, self.llm))
