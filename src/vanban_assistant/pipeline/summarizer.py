"""Analysis agent: summaries, data extraction, multi-document synthesis."""

from __future__ import annotations

import logging

from vanban_assistant.clients.llm_client import DEFAULT_MODEL, LLMClient
from vanban_assistant.models.tasks import SourceDocument, SummarizeTask

logger = logging.getLogger(__name__)

TASK_PROMPTS: dict[SummarizeTask, str] = {
    SummarizeTask.SUMMARY: (
        "Tóm tắt văn bản sau đây thành 5-10 gạch đầu dòng quan trọng nhất."
    ),
    SummarizeTask.EXTRACT_DATA: (
        "Trích xuất tất cả các số liệu, thời gian và địa điểm trong văn bản sau, "
        "trình bày dưới dạng bảng."
    ),
    SummarizeTask.DETECT_ISSUES: (
        "Phát hiện các vấn đề tồn tại, hạn chế, rủi ro được nêu hoặc ngụ ý trong văn bản sau."
    ),
    SummarizeTask.ANALYZE_DATA: (
        "Phân tích các số liệu trong văn bản sau: xu hướng, so sánh, điểm bất thường."
    ),
    SummarizeTask.ANALYZE_AND_SUGGEST: (
        "Phân tích sâu (các) văn bản và trả về kết quả 2 phần:\n\n"
        "**Phần 1: Các Chủ đề/Vấn đề chính**\n\n"
        "**Phần 2: Kiến nghị/Đề xuất hành động**"
    ),
    SummarizeTask.MULTI_DOC_SUMMARY: (
        "Tạo một báo cáo tổng hợp duy nhất có cấu trúc 3 phần: Tóm tắt chung, "
        "Thông tin bổ sung, và Điểm mâu thuẫn từ các văn bản sau."
    ),
}


def format_sources(data: str | list[SourceDocument]) -> str:
    if isinstance(data, str):
        return data
    return "\n\n".join(doc.as_prompt_block() for doc in data)


class Summarizer:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    async def summarize(
        self,
        task: SummarizeTask,
        data: str | list[SourceDocument],
        custom_request: str | None = None,
    ) -> str:
        """Run one analysis task over a text or a list of source documents.

        Raises ValueError for a multi-document task given a single text, or a
        custom request task with an empty request.
        """
        if task is SummarizeTask.MULTI_DOC_SUMMARY and not isinstance(data, list):
            raise ValueError("Tổng hợp liên văn bản cần danh sách nhiều văn bản nguồn")

        if task is SummarizeTask.CUSTOM_REQUEST:
            if not custom_request or not custom_request.strip():
                raise ValueError("Yêu cầu tùy chỉnh đang để trống")
            instruction = f'Thực hiện yêu cầu sau: "{custom_request.strip()}"'
        else:
            instruction = TASK_PROMPTS[task]

        content = format_sources(data)
        logger.info("Summarize task=%s (%d chars)", task.name, len(content))
        prompt = f"{instruction}\n\n(Các) văn bản:\n\n{content}"
        response = await self.llm.generate(prompt=prompt, model=self.model)
        return response.text
