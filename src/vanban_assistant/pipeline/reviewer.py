"""Document reviewer: proposes edits, scans for sensitive data, evaluates and cross-checks."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from vanban_assistant.clients.llm_client import DEFAULT_MODEL, FAST_MODEL, LLMClient
from vanban_assistant.errors import MalformedResponseError
from vanban_assistant.models.security import SecurityWarning
from vanban_assistant.models.suggestion import RawSuggestion
from vanban_assistant.models.tasks import ToneStyle
from vanban_assistant.models.workspace import Dictionary

logger = logging.getLogger(__name__)

_LIST_KEYS = ("suggestions", "items", "results", "warnings")

REVIEW_FORMAT = """\
Trả về DUY NHẤT một mảng JSON, mỗi phần tử có dạng:
[{"original": "đoạn văn bản gốc có lỗi, trích nguyên văn", \
"suggestion": "đoạn văn bản đã sửa", "reason": "lý do ngắn gọn"}]
Trường "original" phải trùng khớp chính xác từng ký tự với văn bản gốc.
Nếu văn bản không có lỗi, trả về []."""

SECURITY_FORMAT = """\
Trả về DUY NHẤT một mảng JSON:
[{"text": "đoạn văn bản nhạy cảm", "reason": "lý do (tên riêng, cấp bậc, đơn vị, số liệu mật...)"}]
Nếu không phát hiện, trả về []."""


def _unwrap_list(data, what: str) -> list:
    if isinstance(data, dict):
        for key in _LIST_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
        raise MalformedResponseError(f"AI trả về đối tượng không chứa danh sách {what}")
    if not isinstance(data, list):
        raise MalformedResponseError(f"AI trả về dữ liệu {what} không hợp lệ")
    return data


class DocumentReviewer:
    """AI review tasks over a single document."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        fast_model: str = FAST_MODEL,
    ):
        self.llm = llm
        self.model = model
        self.fast_model = fast_model

    async def review(
        self,
        text: str,
        dictionary: Dictionary | None = None,
        tone: ToneStyle | None = None,
    ) -> list[RawSuggestion]:
        """Ask for a comprehensive review and return validated candidate edits.

        Raises MalformedResponseError if the reply is not a list of
        {original, suggestion, reason} objects.
        """
        if not text.strip():
            return []

        logger.info("Reviewing document (%d chars)...", len(text))
        extra = ""
        if dictionary is not None:
            extra += (
                f"\n\nÁp dụng từ điển viết tắt \"{dictionary.name}\" sau đây; "
                f"chuẩn hóa các từ viết tắt theo đúng từ điển:\n{dictionary.content}"
            )
        if tone is not None:
            extra += f"\n\nĐề xuất điều chỉnh câu chữ để văn bản có giọng điệu \"{tone.value}\"."

        prompt = f"""Rà soát toàn diện văn bản sau: chính tả, ngữ pháp, dùng từ, \
thể thức theo Nghị định 30/2020/NĐ-CP, tính nhất quán của thuật ngữ.{extra}

{REVIEW_FORMAT}

VĂN BẢN:
{text}"""

        try:
            data = await self.llm.generate_json(prompt=prompt, model=self.model)
        except ValueError as e:
            raise MalformedResponseError(f"AI không trả về JSON hợp lệ: {e}") from e

        items = _unwrap_list(data, "đề xuất")
        result: list[RawSuggestion] = []
        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                raise MalformedResponseError(f"Đề xuất #{idx} không phải đối tượng JSON")
            try:
                result.append(RawSuggestion.model_validate(item))
            except ValidationError as e:
                raise MalformedResponseError(f"Đề xuất #{idx} thiếu trường bắt buộc: {e}") from e
        logger.info("Reviewer produced %d suggestions", len(result))
        return result

    async def security_check(self, text: str) -> list[SecurityWarning]:
        """Flag potentially sensitive passages. Returns [] if the scan fails."""
        if not text.strip():
            return []

        prompt = f"""Quét văn bản sau để phát hiện thông tin nhạy cảm \
(họ tên, cấp bậc, chức vụ, phiên hiệu đơn vị, số liệu mật, địa điểm).

{SECURITY_FORMAT}

VĂN BẢN:
{text}"""

        try:
            data = await self.llm.generate_json(prompt=prompt, model=self.fast_model)
            items = _unwrap_list(data, "cảnh báo")
        except Exception:
            logger.exception("Security scan failed")
            return []

        warnings = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                fields = {k: v for k, v in item.items() if k != "id"}
                warnings.append(SecurityWarning(id=len(warnings), **fields))
            except (ValidationError, TypeError):
                logger.warning("Dropping malformed security warning: %r", item)
        return warnings

    async def evaluate_effectiveness(self, text: str) -> str:
        prompt = f"""Đánh giá hiệu quả của văn bản sau theo các tiêu chí: \
Luận điểm, Tính thuyết phục, Sự rõ ràng. Với mỗi tiêu chí, cho điểm trên thang 10 \
và nêu đề xuất cải thiện cụ thể.

VĂN BẢN:
{text}"""
        response = await self.llm.generate(prompt=prompt, model=self.model)
        return response.text

    async def check_consistency(self, text: str, source_text: str) -> str:
        """Compare a document against its source and report deviations or omissions."""
        prompt = f"""Đối chiếu "Văn bản cần kiểm tra" với "Văn bản gốc", \
chỉ ra điểm sai lệch về số liệu, sự kiện, mốc thời gian hoặc thiếu sót.

VĂN BẢN GỐC:
{source_text}

VĂN BẢN CẦN KIỂM TRA:
{text}"""
        response = await self.llm.generate(prompt=prompt, model=self.model)
        return response.text
