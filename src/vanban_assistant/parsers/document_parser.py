"""Turn uploaded files into plain text for review and analysis."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from vanban_assistant.clients.llm_client import LLMClient
from vanban_assistant.errors import UnsupportedFileError

logger = logging.getLogger(__name__)

# Files whose text is read by the AI service
AI_MEDIA_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

TEXT_SUFFIXES = (".txt", ".md")


def clean_text(text: str) -> str:
    """Normalize pasted or exported text without changing its line structure.

    Strips BOM and zero-width characters, trailing whitespace on each line,
    and collapses runs of 3+ blank lines to one blank line.
    """
    text = text.lstrip("\ufeff")
    text = re.sub(r"[\u200b\u200c\u200d\u2060\ufeff]", "", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def read_text_file(path: str | Path) -> str:
    """Read a UTF-8 text file as-is. Undecodable bytes raise UnsupportedFileError."""
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise UnsupportedFileError(
            f"Tệp {path.name} không phải văn bản UTF-8. Hãy lưu lại với mã hóa UTF-8."
        ) from e


def read_docx(path: str | Path) -> str:
    try:
        doc = Document(str(path))
    except (PackageNotFoundError, BadZipFile, KeyError) as e:
        raise UnsupportedFileError(f"Tệp {Path(path).name} không phải tệp DOCX hợp lệ.") from e
    return "\n".join(p.text for p in doc.paragraphs)


def needs_ai_extraction(path: str | Path) -> bool:
    return Path(path).suffix.lower() in AI_MEDIA_TYPES


def load_local_text(path: str | Path) -> str:
    """Read .txt/.md/.docx files without calling the AI service."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return clean_text(read_text_file(path))
    if suffix == ".docx":
        return clean_text(read_docx(path))
    raise UnsupportedFileError(
        f"Định dạng {suffix or '(không rõ)'} chưa hỗ trợ trích xuất tự động "
        "(hỗ trợ TXT, MD, DOCX, PDF và hình ảnh)."
    )


async def extract_text(path: str | Path, llm: LLMClient | None = None) -> str:
    """Return the text of ``path``, using the AI service for PDFs and images."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in AI_MEDIA_TYPES:
        return load_local_text(path)
    if llm is None:
        raise UnsupportedFileError(f"Cần dịch vụ AI để trích xuất văn bản từ tệp {path.name}")

    logger.info("Extracting text from %s via AI", path.name)
    text = await llm.extract_text_from_file(path.read_bytes(), AI_MEDIA_TYPES[suffix])
    return clean_text(text)
