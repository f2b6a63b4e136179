"""Line-granular LCS diff used for the before/after comparison view."""

from __future__ import annotations

from collections.abc import Sequence

from vanban_assistant.models.diff import DiffRecord, DiffType

_PREFIX = {
    DiffType.COMMON: "  ",
    DiffType.DELETED: "- ",
    DiffType.ADDED: "+ ",
}


def split_lines(text: str) -> list[str]:
    """Split on '\\n' only. A trailing newline yields a trailing empty line."""
    return text.split("\n")


def _lcs_table(original: Sequence[str], modified: Sequence[str]) -> list[list[int]]:
    n, m = len(original), len(modified)
    dp = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        row, prev = dp[i], dp[i - 1]
        a = original[i - 1]
        for j in range(1, m + 1):
            if a == modified[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])
    return dp


def lcs_length(original: Sequence[str], modified: Sequence[str]) -> int:
    return _lcs_table(original, modified)[len(original)][len(modified)]


def diff(original: Sequence[str], modified: Sequence[str]) -> list[DiffRecord]:
    """Compute a minimal line edit script between two line sequences.

    Backtracks the LCS table from the bottom-right corner. When both moves
    keep the same LCS score, ``added`` is emitted before ``deleted`` (walking
    backward), which puts deletions ahead of additions in the final output.
    """
    dp = _lcs_table(original, modified)
    i, j = len(original), len(modified)
    out: list[DiffRecord] = []

    while i > 0 or j > 0:
        if i > 0 and j > 0 and original[i - 1] == modified[j - 1]:
            out.append(DiffRecord(type=DiffType.COMMON, line=original[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            out.append(DiffRecord(type=DiffType.ADDED, line=modified[j - 1]))
            j -= 1
        else:
            out.append(DiffRecord(type=DiffType.DELETED, line=original[i - 1]))
            i -= 1

    out.reverse()
    return out


def diff_texts(original_text: str, modified_text: str) -> list[DiffRecord]:
    return diff(split_lines(original_text), split_lines(modified_text))


def render_unified(records: Sequence[DiffRecord]) -> str:
    """Render records as '  ', '- ', '+ ' prefixed lines."""
    return "\n".join(f"{_PREFIX[r.type]}{r.line}" for r in records)


def side_by_side(records: Sequence[DiffRecord]) -> list[tuple[str | None, str | None]]:
    """Pair records into (left, right) rows for a two-column view.

    Deleted lines only fill the left column and added lines only the right,
    the other side being ``None`` as a placeholder row.
    """
    rows: list[tuple[str | None, str | None]] = []
    for r in records:
        if r.type is DiffType.COMMON:
            rows.append((r.line, r.line))
        elif r.type is DiffType.DELETED:
            rows.append((r.line, None))
        else:
            rows.append((None, r.line))
    return rows
