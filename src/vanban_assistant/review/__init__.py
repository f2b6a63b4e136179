"""Suggestion reconciliation: line diff and review sessions."""

from vanban_assistant.review.differ import diff, diff_texts, lcs_length, render_unified
from vanban_assistant.review.session import ReviewSession

__all__ = ["ReviewSession", "diff", "diff_texts", "lcs_length", "render_unified"]
