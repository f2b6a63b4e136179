"""Drafting agent: full administrative documents and title proposals."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from vanban_assistant.clients.llm_client import DEFAULT_MODEL, LLMClient
from vanban_assistant.models.tasks import DetailLevel, DraftTask, ToneStyle

logger = logging.getLogger(__name__)


def format_ideas(ideas: str | Mapping[str, str]) -> str:
    """Render free-text ideas or a {field label: value} form as prompt content."""
    if isinstance(ideas, str):
        return f"Các ý chính:\n{ideas}"
    blocks = [f"--- {label} ---\n{value}" for label, value in ideas.items() if value]
    return "Nội dung chi tiết:\n\n" + "\n\n".join(blocks)


class Drafter:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL, temperature: float = 0.3):
        self.llm = llm
        self.model = model
        self.temperature = temperature

    async def draft(
        self,
        task: DraftTask,
        ideas: str | Mapping[str, str],
        doc_type: str,
        tone: ToneStyle = ToneStyle.NEUTRAL,
        detail_level: DetailLevel = DetailLevel.DETAILED,
        reference_text: str | None = None,
        custom_request: str | None = None,
    ) -> str:
        if task is DraftTask.DRAFT_DOCUMENT:
            head = f'Soạn thảo một văn bản hoàn chỉnh loại "{doc_type}".'
        else:
            head = f'Đề xuất 3-5 tiêu đề cho văn bản loại "{doc_type}".'

        parts = [head]
        if custom_request:
            parts.append(f'Chỉ thị: "{custom_request}"')
        parts.append(
            f"Yêu cầu:\n- Giọng điệu: {tone.value}\n- Mức độ chi tiết: {detail_level.value}"
        )
        if reference_text:
            parts.append(f"Tham chiếu văn bản sau:\n{reference_text}")
        parts.append(format_ideas(ideas))

        logger.info("Drafting %s (%s)", doc_type, task.name)
        response = await self.llm.generate(
            prompt="\n\n".join(parts),
            model=self.model,
            temperature=self.temperature,
        )
        return response.text
