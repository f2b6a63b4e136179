"""Tests for AssistantOrchestrator quota gating and usage accounting."""

from __future__ import annotations

import asyncio

import pytest

from vanban_assistant.clients.llm_client import LLMResponse
from vanban_assistant.errors import MalformedResponseError, QuotaExceededError
from vanban_assistant.models.suggestion import SuggestionStatus
from vanban_assistant.models.tasks import DetailLevel, DraftTask, SummarizeTask, ToneStyle
from vanban_assistant.pipeline.orchestrator import AssistantOrchestrator
from vanban_assistant.review.session import ReviewSession


@pytest.fixture
def orchestrator(mock_llm_client, user_store, usage_store):
    return AssistantOrchestrator(mock_llm_client, user_store, usage=usage_store)


@pytest.fixture
def member(user_store):
    return user_store.register("trolyA", "matkhau")


class TestRunAction:
    async def test_success_increments_usage_and_logs(self, orchestrator, member, user_store, usage_store):
        async def call():
            return "ok"

        result = await orchestrator.run_action(member, "summarize", call)

        assert result == "ok"
        assert user_store.find_by_id(member.id).quota.used == 1
        logs = usage_store.get_logs(user_id=member.id)
        assert len(logs) == 1
        assert logs[0].action == "summarize"
        assert logs[0].success is True
        assert logs[0].total_input_tokens == 100
        assert logs[0].estimated_cost_usd > 0

    async def test_failure_is_logged_but_not_charged(self, orchestrator, member, user_store, usage_store):
        async def call():
            raise RuntimeError("API down")

        with pytest.raises(RuntimeError):
            await orchestrator.run_action(member, "draft", call)

        assert user_store.find_by_id(member.id).quota.used == 0
        log = usage_store.get_logs(user_id=member.id)[0]
        assert log.success is False
        assert log.error_message == "API down"

    async def test_cancelled_call_is_not_charged(self, orchestrator, member, user_store, usage_store):
        async def call():
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await orchestrator.run_action(member, "review", call)

        assert user_store.find_by_id(member.id).quota.used == 0
        log = usage_store.get_logs(user_id=member.id)[0]
        assert log.success is False
        assert log.error_message == "CancelledError"

    async def test_interrupted_call_is_not_charged(self, orchestrator, member, user_store, usage_store):
        async def call():
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            await orchestrator.run_action(member, "review", call)

        assert user_store.find_by_id(member.id).quota.used == 0
        assert usage_store.get_logs(user_id=member.id)[0].success is False

    async def test_unit_is_reserved_while_call_runs(self, orchestrator, member, user_store):
        seen = []

        async def call():
            seen.append(user_store.find_by_id(member.id).quota.used)
            return "ok"

        await orchestrator.run_action(member, "review", call)

        assert seen == [1]
        assert user_store.find_by_id(member.id).quota.used == 1

    async def test_exhausted_quota_blocks_call(self, orchestrator, member, user_store, mock_llm_client):
        user_store.set_quota(member.id, total=2, used=2)
        called = False

        async def call():
            nonlocal called
            called = True

        with pytest.raises(QuotaExceededError) as exc_info:
            await orchestrator.run_action(member, "review", call)

        assert called is False
        assert exc_info.value.used == 2
        assert exc_info.value.total == 2

    async def test_stale_user_object_cannot_bypass_quota(self, orchestrator, member, user_store):
        user_store.set_quota(member.id, total=1, used=1)

        async def call():
            return "ok"

        # ``member`` still carries the old 0/10 quota
        with pytest.raises(QuotaExceededError):
            await orchestrator.run_action(member, "review", call)

    async def test_last_unit_can_be_spent(self, orchestrator, member, user_store):
        user_store.set_quota(member.id, total=1, used=0)

        async def call():
            return "ok"

        await orchestrator.run_action(member, "review", call)
        with pytest.raises(QuotaExceededError):
            await orchestrator.run_action(member, "review", call)
        assert user_store.find_by_id(member.id).quota.used == 1

    async def test_demo_session_skips_quota(self, orchestrator, usage_store):
        async def call():
            return "ok"

        assert await orchestrator.run_action(None, "summarize", call) == "ok"
        logs = usage_store.get_logs()
        assert logs[0].user_id is None

    async def test_works_without_usage_store(self, mock_llm_client, user_store, member):
        orch = AssistantOrchestrator(mock_llm_client, user_store)

        async def call():
            return 1

        assert await orch.run_action(member, "summarize", call) == 1


class TestReviewActions:
    async def test_start_review_initializes_session(
        self, orchestrator, member, mock_llm_client, sample_document
    ):
        mock_llm_client.generate_json.return_value = [
            {"original": "350 đồng chí", "suggestion": "350 cán bộ", "reason": ""}
        ]

        session = await orchestrator.start_review(member, sample_document)

        assert isinstance(session, ReviewSession)
        assert session.original_text == sample_document
        assert session.working_text == sample_document
        assert [s.status for s in session.suggestions] == [SuggestionStatus.PENDING]

    async def test_malformed_review_leaves_session_untouched(
        self, orchestrator, member, mock_llm_client, user_store
    ):
        session = ReviewSession()
        session.initialize("A", [])
        mock_llm_client.generate_json.return_value = {"unexpected": True}

        with pytest.raises(MalformedResponseError):
            await orchestrator.start_review(member, "B", session=session)

        assert session.original_text == "A"
        assert user_store.find_by_id(member.id).quota.used == 0

    async def test_refine_session_replaces_working_text(
        self, orchestrator, member, mock_llm_client, sample_document
    ):
        session = ReviewSession()
        session.initialize(sample_document, [])
        mock_llm_client.generate.return_value = LLMResponse("Bản viết lại", 10, 5)

        refined = await orchestrator.refine_session(
            member, session, ToneStyle.FLEXIBLE, DetailLevel.CONCISE
        )

        assert refined == "Bản viết lại"
        assert session.working_text == "Bản viết lại"
        assert session.original_text == sample_document

    async def test_security_check_charges_quota(self, orchestrator, member, user_store, sample_document):
        await orchestrator.security_check(member, sample_document)
        assert user_store.find_by_id(member.id).quota.used == 1


class TestAnalysisActions:
    async def test_summarize_and_draft(self, orchestrator, member, mock_llm_client, usage_store):
        mock_llm_client.generate.return_value = LLMResponse("kết quả", 10, 5)

        assert await orchestrator.summarize(member, SummarizeTask.SUMMARY, "văn bản") == "kết quả"
        assert await orchestrator.draft(
            member, DraftTask.SUGGEST_TITLES, "ý chính", "Công văn", tone=ToneStyle.ASSERTIVE
        ) == "kết quả"

        actions = {log.action for log in usage_store.get_logs(user_id=member.id)}
        assert actions == {"summarize", "draft"}

    async def test_local_extraction_is_free(self, orchestrator, member, user_store, tmp_path):
        path = tmp_path / "note.txt"
        path.write_text("Nội dung", encoding="utf-8")

        assert await orchestrator.extract_text(member, path) == "Nội dung"
        assert user_store.find_by_id(member.id).quota.used == 0

    async def test_ai_extraction_is_charged(
        self, orchestrator, member, user_store, mock_llm_client, tmp_path
    ):
        path = tmp_path / "scan.png"
        path.write_bytes(b"\x89PNG")
        mock_llm_client.extract_text_from_file.return_value = "Chữ trong ảnh"

        assert await orchestrator.extract_text(member, path) == "Chữ trong ảnh"
        assert user_store.find_by_id(member.id).quota.used == 1
        mock_llm_client.extract_text_from_file.assert_awaited_once_with(b"\x89PNG", "image/png")
