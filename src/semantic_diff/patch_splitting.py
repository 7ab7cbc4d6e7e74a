"""Patch segmentation: regroup hunks into independently appliable fragments."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple
from .errors import PatchFormatError
from .models import Hunk, PatchDocument, Symbol, SymbolTable
from .patch_parser import PatchParser

logger = logging.getLogger(__name__)


# Placeholder file headers; patch tools take the target from the invocation.
FRAGMENT_HEADER = ['---', '+++']


class PatchSegmenter:
    """Splits a unified diff into minimal, self-contained fragments.

    Two strategies are available:

    * hunk: one fragment per hunk
    * symbol: hunks touching the same top-level symbol share a fragment,
      everything else falls back to one fragment per hunk

    Whenever the input cannot be segmented (malformed syntax or no hunks at
    all) the whole input is returned as the only fragment, so callers never
    receive an empty list.
    """

    def __init__(self, patch_parser: Optional[PatchParser] = None):
        self.patch_parser = patch_parser or PatchParser()

    def split_by_hunk(self, patch: str) -> List[str]:
        """Emit one fragment per hunk.

        Args:
            patch: Unified diff text

        Returns:
            List of fragment strings, never empty
        """
        document = self._parse_or_none(patch)
        if document is None or not document.hunks:
            return [patch]

        return [render_fragment([hunk]) for hunk in document.hunks]

    def split_by_symbol(
        self,
        patch: str,
        before_symbols: SymbolTable,
        after_symbols: SymbolTable
    ) -> List[str]:
        """Emit one fragment per touched symbol, plus one per unaligned hunk.

        The symbol tables must come from the before/after versions of the
        single file the patch describes.

        Args:
            patch: Unified diff text for one file
            before_symbols: Symbol table of the old version
            after_symbols: Symbol table of the new version

        Returns:
            List of fragment strings ordered by their first hunk, never empty
        """
        document = self._parse_or_none(patch)
        if document is None or not document.hunks:
            return [patch]

        if len(document.files) > 1:
            logger.debug(f"Patch spans {len(document.files)} files, symbol alignment needs one; using hunk mode")
            return [render_fragment([hunk]) for hunk in document.hunks]

        groups: Dict[Tuple[str, object], List[Hunk]] = {}
        for index, hunk in enumerate(document.hunks):
            key = align_hunk(hunk, before_symbols, after_symbols)
            if key is None:
                group_key = ('hunk', index)
            else:
                group_key = ('symbol', key)
            groups.setdefault(group_key, []).append(hunk)

        logger.debug(f"Aligned {len(document.hunks)} hunk(s) into {len(groups)} fragment(s)")
        return [render_fragment(hunks) for hunks in groups.values()]

    def _parse_or_none(self, patch: str) -> Optional[PatchDocument]:
        try:
            return self.patch_parser.parse(patch)
        except PatchFormatError as e:
            logger.debug(f"Falling back to a single fragment: {e}")
            return None


def render_fragment(hunks: List[Hunk]) -> str:
    """Render hunks of one file as a standalone patch document."""
    lines = list(FRAGMENT_HEADER)
    for hunk in hunks:
        lines.extend(hunk.render())
    return '\n'.join(lines) + '\n'


def align_hunk(hunk: Hunk, before_symbols: SymbolTable, after_symbols: SymbolTable) -> Optional[str]:
    """Find the key of the smallest symbol enclosing every changed line of a hunk.

    Added lines are matched against the new version. If the hunk also removes
    lines, those must sit inside the old version of the same symbol. Pure
    deletions are matched against the old version only.

    Returns:
        The symbol key, or None if the hunk is outside every known symbol
    """
    added = hunk.added_line_numbers()
    removed = hunk.removed_line_numbers()

    if added:
        symbol = _smallest_enclosing(after_symbols.values(), added)
        if symbol is None:
            return None
        if removed:
            before_symbol = before_symbols.get(symbol.key)
            if before_symbol is None or not before_symbol.encloses(removed):
                return None
        return symbol.key

    if removed:
        symbol = _smallest_enclosing(before_symbols.values(), removed)
        return symbol.key if symbol else None

    return None


def _smallest_enclosing(symbols: Iterable[Symbol], lines: List[int]) -> Optional[Symbol]:
    candidates = [symbol for symbol in symbols if symbol.encloses(lines)]
    if not candidates:
        return None
    # min() keeps the first of equally sized spans, i.e. source order
    return min(candidates, key=lambda symbol: symbol.span_size)
