"""DOCX export for finished documents."""
from vanban_assistant.export.docx_exporter import build_document, export_to_docx

__all__ = ["build_document", "export_to_docx"]
