"""DOCX export of a finished document."""

from __future__ import annotations

import logging
from pathlib import Path

from docx import Document
from docx.oxml.ns import qn
from docx.shared import Pt

logger = logging.getLogger(__name__)

# Decree 30/2020/NĐ-CP body text: Times New Roman, 13-14pt
BODY_FONT = "Times New Roman"
BODY_SIZE = Pt(14)


def _docx_path(output_path: str | Path) -> Path:
    path = Path(output_path)
    if path.suffix.lower() != ".docx":
        path = path.with_name(path.name + ".docx")
    return path


def build_document(content: str) -> Document:
    """Build a document with one paragraph per line of ``content``."""
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = BODY_FONT
    style.font.size = BODY_SIZE
    # East-Asian font slot so Vietnamese diacritics render in the same face
    style.element.rPr.rFonts.set(qn("w:eastAsia"), BODY_FONT)

    for line in content.split("\n"):
        doc.add_paragraph().add_run(line)
    return doc


def export_to_docx(content: str, output_path: str | Path) -> Path | None:
    """Write ``content`` to a .docx file. Returns None when there is nothing to export."""
    if not content:
        return None
    path = _docx_path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    build_document(content).save(str(path))
    logger.info("Exported DOCX: %s", path)
    return path
