"""Semantic diff engine - symbol-level diffs and patch segmentation."""

from .models import Symbol, SemanticChange, Hunk, PatchDocument, SemanticDiffResponse, SplitPatchResponse
from .errors import SemanticDiffError, SourceParseError
from .engine import SemanticDiffEngine

__all__ = [
    "Symbol",
    "SemanticChange",
    "Hunk",
    "PatchDocument",
    "SemanticDiffResponse",
    "SplitPatchResponse",
    "SemanticDiffError",
    "SourceParseError",
    "SemanticDiffEngine",
]
