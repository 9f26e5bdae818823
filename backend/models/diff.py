"""Diff-related data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ChangeKind(str, Enum):
    """Classification of a changed line range"""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"


class LineChange(BaseModel):
    """A single change hunk, as a half-open range of current-content lines"""

    type: ChangeKind
    startLine: int  # 0-indexed, inclusive
    endLine: int  # exclusive; equals startLine for deletions


class DiffResult(BaseModel):
    """Complete diff of current content against the baseline"""

    hasChanges: bool = False
    changes: list[LineChange] = []

    @classmethod
    def empty(cls) -> "DiffResult":
        return cls(hasChanges=False, changes=[])


class ComputeDiffRequest(BaseModel):
    """Stateless diff request"""

    baseline: str | None = None
    content: str


class ContentRequest(BaseModel):
    """Document content pushed by the viewer"""

    content: str


class CreateSessionRequest(BaseModel):
    """Request to open an editing session"""

    content: str | None = None  # Initial baseline, if the file is already loaded


class SessionResponse(BaseModel):
    """Session state summary"""

    sessionId: str
    hasBaseline: bool
