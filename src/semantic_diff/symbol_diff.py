"""Symbol-level comparison of two symbol tables."""

from typing import List
from .models import Location, SemanticChange, Symbol, SymbolTable


def diff_symbols(before: SymbolTable, after: SymbolTable) -> List[SemanticChange]:
    """Compare two symbol tables and emit symbol-level change records.

    The result lists inserts and updates in ``after`` order first, then
    deletes in ``before`` order. Consumers render this list as-is, so the
    ordering is part of the contract.

    Equality is exact source text: a reformatted but otherwise identical
    declaration is still reported as an update.

    Args:
        before: Symbol table of the old version
        after: Symbol table of the new version

    Returns:
        Ordered list of SemanticChange objects
    """
    changes = []

    for key, after_symbol in after.items():
        before_symbol = before.get(key)
        if before_symbol is None:
            changes.append(_change('insert', after_symbol, 'added'))
        elif before_symbol.source_text != after_symbol.source_text:
            changes.append(_change('update', after_symbol, 'modified'))

    for key, before_symbol in before.items():
        if key not in after:
            changes.append(_change('delete', before_symbol, 'removed'))

    return changes


def _change(change_type: str, symbol: Symbol, verb: str) -> SemanticChange:
    return SemanticChange(
        type=change_type,
        symbol_name=symbol.name,
        detail=f"{symbol.kind} {verb}",
        location=Location(line=symbol.line, column=symbol.column),
    )
