"""Task, tone and document-type vocabularies used by the AI agents."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SummarizeTask(str, Enum):
    SUMMARY = "Tóm tắt Báo cáo"
    EXTRACT_DATA = "Trích xuất Số liệu"
    DETECT_ISSUES = "Phát hiện Vấn đề"
    ANALYZE_DATA = "Phân tích Dữ liệu"
    ANALYZE_AND_SUGGEST = "Phân tích và Đề xuất"
    MULTI_DOC_SUMMARY = "Tổng hợp Liên văn bản"
    CUSTOM_REQUEST = "Yêu cầu Tùy chỉnh"


class DraftTask(str, Enum):
    DRAFT_DOCUMENT = "Soạn thảo Toàn văn"
    SUGGEST_TITLES = "Đề xuất Tiêu đề"


class ReviewTask(str, Enum):
    CHECK_ALL = "Rà soát Toàn diện"
    SENSITIVITY_CHECK = "Rà soát Bảo mật"
    EVALUATE_EFFECTIVENESS = "Đánh giá Hiệu quả"
    SOURCE_CONSISTENCY_CHECK = "Đối chiếu Nguồn"


class ToneStyle(str, Enum):
    NEUTRAL = "Trung lập"
    PERSUASIVE = "Thuyết phục"
    ASSERTIVE = "Quyết đoán"
    FLEXIBLE = "Mềm mỏng"
    ENCOURAGING = "Khích lệ - Động viên"


class DetailLevel(str, Enum):
    CONCISE = "Ngắn gọn - Súc tích"
    DETAILED = "Chi tiết - Diễn giải"


DOCUMENT_TYPES = [
    "Báo cáo đề xuất",
    "Kế hoạch triển khai",
    "Công văn",
    "Tờ trình",
    "Báo cáo tổng hợp",
    "Nghị quyết",
    "Mệnh lệnh",
    "Văn bản góp ý",
    "Yêu cầu soạn thảo khác...",
]


class SourceDocument(BaseModel):
    """One input document for multi-document analysis."""

    id: int
    source: str = ""
    content: str
    file_name: str | None = None

    def as_prompt_block(self) -> str:
        name = self.source.strip() or "Không có tên"
        return f"--- NGUỒN: {name} ---\n{self.content}\n--- HẾT NGUỒN ---"
