"""Models module - Pydantic data models"""

from .diff import (
    ChangeKind,
    ComputeDiffRequest,
    ContentRequest,
    CreateSessionRequest,
    DiffResult,
    LineChange,
    SessionResponse,
)
from .gutter import (
    BlockDecoration,
    DeletionMarker,
    GutterDecorations,
    GutterRequest,
    SourceBlock,
)

__all__ = [
    # Diff models
    "ChangeKind",
    "ComputeDiffRequest",
    "ContentRequest",
    "CreateSessionRequest",
    "DiffResult",
    "LineChange",
    "SessionResponse",
    # Gutter models
    "BlockDecoration",
    "DeletionMarker",
    "GutterDecorations",
    "GutterRequest",
    "SourceBlock",
]
