"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

import anthropic
from tenacity import retry, stop_after_attempt, wait_exponential

from vanban_assistant.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
FAST_MODEL = "claude-haiku-4-5-20251001"

SYSTEM_INSTRUCTION = """\
Bạn là một trợ lý AI chuyên nghiệp, được đào tạo để hỗ trợ cán bộ, trợ lý trong các đơn vị \
hành chính và lực lượng vũ trang (LLVT), Công an Nhân dân (CAND) Việt Nam.
- Luôn sử dụng văn phong hành chính trang trọng, chính xác, khách quan.
- Sử dụng chính xác thuật ngữ, từ viết tắt chuyên ngành của LLVT và CAND.
- Mọi văn bản tạo ra phải tuân thủ chặt chẽ thể thức và kỹ thuật trình bày theo \
Nghị định 30/2020/NĐ-CP của Chính phủ.
- Câu trả lời phải luôn là tiếng Việt."""

EXTRACT_PROMPT = (
    "Trích xuất toàn bộ văn bản từ tệp này. Chỉ trả về nội dung văn bản, "
    "không thêm bất kỳ lời giải thích hay định dạng nào."
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client with exponential-backoff retries."""

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        reraise=True,
    )
    async def _call_api(
        self,
        content: str | list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": content}],
        }
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    async def generate(
        self,
        prompt: str | list[dict],
        system: str = SYSTEM_INSTRUCTION,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> LLMResponse:
        """Send a prompt (plain text or content blocks) and return the text with usage."""
        logger.debug("LLM call: model=%s", model)
        try:
            message = await self._call_api(
                content=prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        return LLMResponse(
            text=message.content[0].text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def generate_json(
        self,
        prompt: str,
        system: str = SYSTEM_INSTRUCTION,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> dict | list:
        """Send a prompt and parse JSON from the response.

        Raises ValueError when no JSON can be recovered from the reply.
        """
        response = await self.generate(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return extract_json(response.text)

    async def extract_text_from_file(
        self,
        data: bytes,
        media_type: str,
        model: str = FAST_MODEL,
    ) -> str:
        """Extract the plain text of a PDF or image file.

        Args:
            data: Raw file bytes.
            media_type: MIME type, "application/pdf" or an "image/*" type.
            model: Claude model to use (Haiku for cost efficiency).
        """
        b64_data = base64.b64encode(data).decode("utf-8")
        block_type = "document" if media_type == "application/pdf" else "image"
        content = [
            {
                "type": block_type,
                "source": {"type": "base64", "media_type": media_type, "data": b64_data},
            },
            {"type": "text", "text": EXTRACT_PROMPT},
        ]
        response = await self.generate(prompt=content, model=model, max_tokens=8192)
        return response.text.strip()

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
