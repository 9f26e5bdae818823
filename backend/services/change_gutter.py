"""
Change Gutter Service - Map diff hunks onto rendered markdown blocks
"""

from __future__ import annotations

from models.diff import ChangeKind, DiffResult, LineChange
from models.gutter import BlockDecoration, DeletionMarker, GutterDecorations, SourceBlock


def parse_source_lines(value: str) -> SourceBlock | None:
    """Parse a data-source-lines attribute such as "3-7". Returns None if malformed."""
    start_str, sep, end_str = value.partition("-")
    if not sep:
        return None
    try:
        return SourceBlock(start=int(start_str), end=int(end_str))
    except ValueError:
        return None


def parse_source_start(value: str) -> int | None:
    """First line of a data-source-lines attribute; the end part is not needed"""
    try:
        return int(value.split("-")[0])
    except ValueError:
        return None


def ranges_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and b_start < a_end


class ChangeGutter:
    """Compute gutter decorations for a diff result"""

    def apply_changes(
        self,
        diff_result: DiffResult,
        blocks: list[SourceBlock],
    ) -> GutterDecorations:
        """Classify blocks touched by added/modified hunks and place deletion markers"""
        return self._decorate(
            diff_result,
            ranges=list(enumerate(blocks)),
            starts=[(index, block.start) for index, block in enumerate(blocks)],
        )

    def apply_source_lines(
        self,
        diff_result: DiffResult,
        source_lines: list[str],
    ) -> GutterDecorations:
        """Same as apply_changes, for raw attribute values.

        Blocks with a malformed range are never classed, but a block whose
        start still parses can anchor a deletion marker.
        """
        ranges = []
        starts = []
        for index, value in enumerate(source_lines):
            block = parse_source_lines(value)
            if block is not None:
                ranges.append((index, block))
            start = parse_source_start(value)
            if start is not None:
                starts.append((index, start))

        return self._decorate(diff_result, ranges=ranges, starts=starts)

    def _decorate(
        self,
        diff_result: DiffResult,
        ranges: list[tuple[int, SourceBlock]],
        starts: list[tuple[int, int]],
    ) -> GutterDecorations:
        if not diff_result.hasChanges:
            return GutterDecorations()

        visible = [c for c in diff_result.changes if c.type != ChangeKind.DELETED]
        decorations = []
        for index, block in ranges:
            for change in visible:
                if ranges_overlap(block.start, block.end, change.startLine, change.endLine):
                    decorations.append(BlockDecoration(blockIndex=index, type=change.type))
                    break

        deletions = [
            self._deletion_marker(change, starts)
            for change in diff_result.changes
            if change.type == ChangeKind.DELETED
        ]

        return GutterDecorations(blocks=decorations, deletions=deletions, showReset=True)

    def _deletion_marker(self, change: LineChange, starts: list[tuple[int, int]]) -> DeletionMarker:
        for index, start in starts:
            if start >= change.startLine:
                return DeletionMarker(line=change.startLine, beforeBlock=index)
        return DeletionMarker(line=change.startLine, beforeBlock=None)
