"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from vanban_assistant.clients.llm_client import LLMClient, LLMResponse
from vanban_assistant.logging.usage_store import UsageStore
from vanban_assistant.models.suggestion import RawSuggestion
from vanban_assistant.models.workspace import Dictionary
from vanban_assistant.store.user_store import UserStore
from vanban_assistant.store.workspace_store import WorkspaceStore


@pytest.fixture
def sample_document() -> str:
    return """BỘ CHỈ HUY QUÂN SỰ TỈNH
Số: 125/BC-BCH

BÁO CÁO
Kết quả công tác huấn luyện quý III năm 2024

Trong quý III, đơn vị đã tổ chức huấn luyện cho 350 đồng chí.
Tỷ lệ đạt yêu cầu là 98%, trong đó khá giỏi đạt 72%.
Công tác CTĐ, CTCT được duy trì nền nếp.
Tuy nhiên, vẫn còn một số hạn chế về cơ sở vật chất."""


@pytest.fixture
def sample_raw_suggestions() -> list[RawSuggestion]:
    return [
        RawSuggestion(
            original="350 đồng chí",
            suggestion="350 đồng chí cán bộ, chiến sĩ",
            reason="Làm rõ đối tượng huấn luyện",
        ),
        RawSuggestion(
            original="được duy trì nền nếp",
            suggestion="được duy trì nền nếp, chặt chẽ",
            reason="Bổ sung mức độ",
        ),
    ]


@pytest.fixture
def sample_dictionary() -> Dictionary:
    return Dictionary(id="llvt", name="Lực lượng Vũ trang", content="- CTĐ: Công tác đảng")


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value=[])
    client.extract_text_from_file = AsyncMock(return_value="")
    client.get_token_summary = MagicMock(
        return_value={"input": 100, "output": 50, "calls": [("claude-sonnet-4-5-20250929", 100, 50)]}
    )
    return client


@pytest.fixture
def user_store(tmp_path) -> UserStore:
    store = UserStore(db_path=tmp_path / "store.db", default_quota=10)
    store.seed_defaults()
    return store


@pytest.fixture
def workspace_store(tmp_path) -> WorkspaceStore:
    store = WorkspaceStore(db_path=tmp_path / "store.db")
    store.seed_defaults()
    return store


@pytest.fixture
def usage_store(tmp_path) -> UsageStore:
    return UsageStore(db_path=tmp_path / "usage.db")
