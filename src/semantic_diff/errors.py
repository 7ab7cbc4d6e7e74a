"""Exceptions raised by the semantic diff engine."""

from typing import Optional


class SemanticDiffError(Exception):
    """Base class for engine errors."""


class SourceParseError(SemanticDiffError, ValueError):
    """A source file in a parser-backed language could not be parsed."""

    def __init__(
        self,
        language: str,
        line: int,
        column: int,
        file_path: Optional[str] = None,
        reason: str = "syntax error",
    ):
        self.language = language
        self.line = line
        self.column = column
        self.file_path = file_path
        self.reason = reason

        where = f" in {file_path}" if file_path else ""
        super().__init__(
            f"Failed to parse {language} source{where}: {reason} at line {line}, column {column}"
        )


class PatchFormatError(SemanticDiffError, ValueError):
    """Unified diff text is malformed."""
