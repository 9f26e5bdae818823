"""Change gutter data models"""

from __future__ import annotations

from pydantic import BaseModel

from .diff import ChangeKind


class SourceBlock(BaseModel):
    """A rendered block and the source lines it was produced from"""

    start: int
    end: int  # exclusive


class BlockDecoration(BaseModel):
    """Gutter class applied to one rendered block"""

    blockIndex: int
    type: ChangeKind  # added or modified


class DeletionMarker(BaseModel):
    """Zero-height marker inserted where baseline lines were removed"""

    line: int
    beforeBlock: int | None = None  # None: append after the last block


class GutterDecorations(BaseModel):
    """Everything the viewer needs to paint the change gutter"""

    blocks: list[BlockDecoration] = []
    deletions: list[DeletionMarker] = []
    showReset: bool = False


class GutterRequest(BaseModel):
    """Rendered block ranges, either parsed or as raw data-source-lines values"""

    blocks: list[SourceBlock] = []
    sourceLines: list[str] = []
