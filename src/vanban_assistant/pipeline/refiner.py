"""Text refiner: rewrites a finished document in a requested tone and detail level."""

from __future__ import annotations

import logging

from vanban_assistant.clients.llm_client import DEFAULT_MODEL, LLMClient
from vanban_assistant.models.tasks import DetailLevel, ToneStyle

logger = logging.getLogger(__name__)


class TextRefiner:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL, temperature: float = 0.4):
        self.llm = llm
        self.model = model
        self.temperature = temperature

    async def refine(self, text: str, tone: ToneStyle, detail_level: DetailLevel) -> str:
        """Rewrite ``text``. Empty input is returned unchanged without an AI call."""
        if not text.strip():
            return text

        logger.info("Refining text: tone=%s, detail=%s", tone.value, detail_level.value)
        prompt = f"""Viết lại văn bản sau theo giọng điệu "{tone.value}" \
và mức độ chi tiết "{detail_level.value}". Giữ lại ý chính, số liệu và thể thức.
Chỉ trả về văn bản đã viết lại, không kèm giải thích.

VĂN BẢN:
{text}"""
        response = await self.llm.generate(
            prompt=prompt,
            model=self.model,
            temperature=self.temperature,
        )
        return response.text.strip()
