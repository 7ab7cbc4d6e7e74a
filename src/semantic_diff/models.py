"""Core data models for the semantic diff engine."""

from dataclasses import dataclass, field
from typing import Dict, Literal, List, Optional
from dataclasses_json import dataclass_json, LetterCase


@dataclass_json
@dataclass(frozen=True)
class Symbol:
    """A named top-level declaration extracted from one version of a file.

    Several symbols may share the same ``source_text`` when a single
    variable statement declares more than one binding.
    """

    key: str  # "<kind>:<name>", unique within one symbol table
    name: str
    kind: str  # function, class, interface, type, const, let, var
    source_text: str  # Exact slice of the backing statement
    line: int  # 1-based
    column: int  # 0-based, in characters
    end_line: int  # 1-based last line of the backing statement

    def encloses(self, lines: List[int]) -> bool:
        """Check whether every given line falls inside this symbol's span."""
        return bool(lines) and all(self.line <= n <= self.end_line for n in lines)

    @property
    def span_size(self) -> int:
        return self.end_line - self.line + 1


# Ordered mapping from Symbol.key to Symbol for one source version.
SymbolTable = Dict[str, Symbol]


@dataclass_json
@dataclass
class Location:
    """Position of a change (1-based line, 0-based column)."""

    line: int
    column: int = 0


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class SemanticChange:
    """A single symbol-level (or line-run) change record."""

    type: Literal["insert", "update", "delete"]
    symbol_name: str
    detail: str
    location: Optional[Location] = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Hunk:
    """One contiguous block of a unified diff."""

    old_start: Optional[int]
    old_lines: Optional[int]
    new_start: Optional[int]
    new_lines: Optional[int]
    body_lines: List[str] = field(default_factory=list)  # Verbatim, without newlines
    section_header: str = ""

    def render_header(self) -> str:
        """Render the ``@@`` header; missing numeric fields become 0."""
        return "@@ -{},{} +{},{} @@".format(
            self.old_start or 0,
            self.old_lines or 0,
            self.new_start or 0,
            self.new_lines or 0,
        )

    def render(self) -> List[str]:
        return [self.render_header()] + list(self.body_lines)

    def _walk_changed_lines(self):
        old_no = self.old_start or 0
        new_no = self.new_start or 0
        for line in self.body_lines:
            marker = line[:1]
            if marker == '+':
                yield '+', new_no
                new_no += 1
            elif marker == '-':
                yield '-', old_no
                old_no += 1
            elif marker == '\\':
                continue
            else:
                old_no += 1
                new_no += 1

    def added_line_numbers(self) -> List[int]:
        """New-side line numbers of the added lines in this hunk."""
        return [n for marker, n in self._walk_changed_lines() if marker == '+']

    def removed_line_numbers(self) -> List[int]:
        """Old-side line numbers of the removed lines in this hunk."""
        return [n for marker, n in self._walk_changed_lines() if marker == '-']


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class FilePatch:
    """All hunks of one file in a unified diff."""

    source_file: str
    target_file: str
    hunks: List[Hunk] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class PatchDocument:
    """A parsed unified diff: ordered per-file entries."""

    files: List[FilePatch] = field(default_factory=list)

    @property
    def hunks(self) -> List[Hunk]:
        return [hunk for file_patch in self.files for hunk in file_patch.hunks]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class SemanticDiffResponse:
    """Result of a semantic diff between two versions of a file."""

    language: str
    changes: List[SemanticChange] = field(default_factory=list)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class SplitPatchResponse:
    """Result of splitting a patch into independently appliable fragments."""

    chunks: List[str] = field(default_factory=list)
