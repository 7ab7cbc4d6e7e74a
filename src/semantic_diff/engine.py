"""Semantic diff facade: the single dispatch point of the engine."""

import logging
import os
from typing import Dict, Optional
from .language_support import GRAMMAR_BY_LANGUAGE, SourceParser
from .models import SemanticDiffResponse, SplitPatchResponse
from .patch_splitting import PatchSegmenter
from .symbol_diff import diff_symbols
from .text_diff import diff_text
from .config import EngineConfig, STRATEGIES

logger = logging.getLogger(__name__)


EXTENSION_LANGUAGES = {
    '.ts': 'ts',
    '.mts': 'mts',
    '.cts': 'cts',
    '.tsx': 'tsx',
    '.js': 'js',
    '.mjs': 'mjs',
    '.cjs': 'cjs',
    '.jsx': 'jsx',
    '.py': 'py',
    '.java': 'java',
    '.go': 'go',
    '.rs': 'rs',
    '.c': 'c',
    '.h': 'c',
    '.cpp': 'cpp',
    '.cc': 'cpp',
    '.hpp': 'cpp',
}


def detect_language(file_path: str) -> str:
    """Detect a language tag from a file extension ('unknown' if unrecognized)."""
    _, ext = os.path.splitext(file_path)
    return EXTENSION_LANGUAGES.get(ext.lower(), 'unknown')


class SemanticDiffEngine:
    """Decides what changed between two file versions and splits patches.

    The engine holds no per-call state; construct one and share it freely.
    Parser-backed languages (ECMAScript/TypeScript family) are diffed at
    top-level symbol granularity, every other language falls back to a
    line-based diff.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.source_parser = SourceParser()
        self.segmenter = PatchSegmenter()
        self._aliases: Dict[str, str] = dict(self.config.extra_language_aliases)

    def parser_language(self, language: str) -> Optional[str]:
        """Map a language tag to its parser-backed tag, or None for the textual fallback."""
        normalized = language.lower()
        normalized = self._aliases.get(normalized, normalized)
        return normalized if normalized in GRAMMAR_BY_LANGUAGE else None

    def is_parser_supported(self, language: str) -> bool:
        return self.parser_language(language) is not None

    def semantic_diff(
        self,
        before: str,
        after: str,
        language: str,
        file_path: Optional[str] = None
    ) -> SemanticDiffResponse:
        """Compute symbol-level changes between two versions of a file.

        Args:
            before: Old file contents
            after: New file contents
            language: Free-form language tag; unknown tags use the line diff
            file_path: Optional path reported in parse errors

        Returns:
            SemanticDiffResponse echoing the caller's language tag

        Raises:
            SourceParseError: If either version of a parser-backed file fails to parse
        """
        parser_language = self.parser_language(language)
        if parser_language is None:
            logger.debug(f"No parser for language {language!r}, using line diff")
            changes = diff_text(before, after)
        else:
            before_symbols = self.source_parser.extract_symbols(before, parser_language, file_path)
            after_symbols = self.source_parser.extract_symbols(after, parser_language, file_path)
            changes = diff_symbols(before_symbols, after_symbols)

        return SemanticDiffResponse(language=language, changes=changes)

    def split_patch(
        self,
        patch: str,
        language: str,
        strategy: Optional[str] = None
    ) -> SplitPatchResponse:
        """Split a unified diff into independently appliable fragments.

        Hunk mode is always used: the request carries no file versions to
        align hunks against. Use split_patch_by_symbol for symbol alignment.

        Args:
            patch: Unified diff text
            language: Language tag of the patched file
            strategy: 'hunk' or 'symbol' (defaults to the configured strategy)

        Returns:
            SplitPatchResponse with at least one chunk
        """
        strategy = (strategy or self.config.default_strategy).lower()
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown split strategy {strategy!r}, expected one of {STRATEGIES}")
        if strategy != 'hunk':
            logger.debug(f"Strategy {strategy!r} requested for {language!r} patch, splitting by hunk")

        return SplitPatchResponse(chunks=self.segmenter.split_by_hunk(patch))

    def split_patch_by_symbol(
        self,
        patch: str,
        before: str,
        after: str,
        language: str,
        file_path: Optional[str] = None
    ) -> SplitPatchResponse:
        """Split a single-file patch so that hunks in the same symbol share a fragment.

        Languages without parser support are split by hunk.

        Raises:
            SourceParseError: If either version of a parser-backed file fails to parse
        """
        parser_language = self.parser_language(language)
        if parser_language is None:
            logger.debug(f"No parser for language {language!r}, splitting by hunk")
            return SplitPatchResponse(chunks=self.segmenter.split_by_hunk(patch))

        before_symbols = self.source_parser.extract_symbols(before, parser_language, file_path)
        after_symbols = self.source_parser.extract_symbols(after, parser_language, file_path)
        return SplitPatchResponse(
            chunks=self.segmenter.split_by_symbol(patch, before_symbols, after_symbols)
        )
