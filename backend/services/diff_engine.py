"""
Diff Engine - Line-level change detection against a baseline snapshot
"""

from __future__ import annotations

from models.diff import ChangeKind, DiffResult, LineChange

from .logging_config import get_logger

logger = get_logger("diff_engine")

# Alignment table size above which a warning is logged (5000 x 5000 lines)
DEFAULT_WARN_TABLE_CELLS = 25_000_000


def split_lines(text: str) -> list[str]:
    """Split text on newlines. The empty string has no lines at all."""
    if text == "":
        return []
    return text.split("\n")


def align_lines(
    baseline: list[str],
    current: list[str],
    warn_table_cells: int = DEFAULT_WARN_TABLE_CELLS,
) -> list[tuple[int, int]]:
    """
    Longest common subsequence of two line lists, as (baseline, current) index pairs.

    The suffix-LCS table is walked forward from the top: equal lines are
    matched as soon as they meet, and on a mismatch a baseline line is
    skipped before a current line whenever both keep the LCS length.
    """
    prefix = 0
    limit = min(len(baseline), len(current))
    while prefix < limit and baseline[prefix] == current[prefix]:
        prefix += 1

    pairs = [(i, i) for i in range(prefix)]
    old = baseline[prefix:]
    new = current[prefix:]
    rows, cols = len(old), len(new)
    if not rows or not cols:
        return pairs

    cells = (rows + 1) * (cols + 1)
    if cells > warn_table_cells:
        logger.warning(
            f"Aligning {rows} x {cols} lines ({cells} table cells); diff will be slow"
        )

    # table[i][j] = LCS length of old[i:] and new[j:]
    table = [[0] * (cols + 1) for _ in range(rows + 1)]
    for i in range(rows - 1, -1, -1):
        row = table[i]
        below = table[i + 1]
        line = old[i]
        for j in range(cols - 1, -1, -1):
            if line == new[j]:
                row[j] = below[j + 1] + 1
            elif below[j] >= row[j + 1]:
                row[j] = below[j]
            else:
                row[j] = row[j + 1]

    i = j = 0
    while i < rows and j < cols:
        if old[i] == new[j]:
            pairs.append((prefix + i, prefix + j))
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            i += 1
        else:
            j += 1

    return pairs


def classify_gaps(
    pairs: list[tuple[int, int]],
    baseline_count: int,
    current_count: int,
) -> list[LineChange]:
    """Turn the unmatched runs between aligned lines into change hunks"""
    changes: list[LineChange] = []
    prev_old = prev_new = 0

    for old_index, new_index in [*pairs, (baseline_count, current_count)]:
        removed = old_index - prev_old
        inserted = new_index - prev_new
        position = prev_new

        if removed and inserted:
            changes.append(
                LineChange(
                    type=ChangeKind.MODIFIED,
                    startLine=position,
                    endLine=position + inserted,
                )
            )
        elif removed:
            changes.append(
                LineChange(type=ChangeKind.DELETED, startLine=position, endLine=position)
            )
        elif inserted:
            changes.append(
                LineChange(
                    type=ChangeKind.ADDED,
                    startLine=position,
                    endLine=position + inserted,
                )
            )

        prev_old = old_index + 1
        prev_new = new_index + 1

    return changes


class DiffEngine:
    """Compare current content against a single stored baseline.

    One instance belongs to one editing session; it is not safe to share
    between threads without external locking.
    """

    def __init__(self, warn_table_cells: int = DEFAULT_WARN_TABLE_CELLS):
        self._baseline: list[str] | None = None
        self._warn_table_cells = warn_table_cells

    def set_baseline(self, text: str) -> None:
        """Replace the baseline with a snapshot of text"""
        self._baseline = split_lines(text)

    def clear_baseline(self) -> None:
        self._baseline = None

    def has_baseline(self) -> bool:
        return self._baseline is not None

    def compute_diff(self, current_text: str) -> DiffResult:
        """Diff current_text against the baseline; no baseline means no changes"""
        if self._baseline is None:
            return DiffResult.empty()

        current = split_lines(current_text)
        pairs = align_lines(self._baseline, current, self._warn_table_cells)
        changes = classify_gaps(pairs, len(self._baseline), len(current))

        logger.debug(
            f"Diffed {len(self._baseline)} baseline lines against {len(current)} "
            f"current lines: {len(changes)} hunks"
        )
        return DiffResult(hasChanges=bool(changes), changes=changes)
