"""Line-based fallback diff for languages without parser support."""

import difflib
from typing import List
from .models import Location, SemanticChange


def diff_text(before: str, after: str) -> List[SemanticChange]:
    """Report every contiguous run of added or removed lines as one change.

    Context runs are skipped and do not consume a chunk number. A replaced
    block yields its removed run followed by its added run; the two are
    never merged into an update.

    Args:
        before: Old file contents
        after: New file contents

    Returns:
        List of SemanticChange objects named chunk_0, chunk_1, ...
    """
    before_lines = _split_lines(before)
    after_lines = _split_lines(after)
    matcher = difflib.SequenceMatcher(None, before_lines, after_lines, autojunk=False)

    changes = []

    def emit(change_type: str, count: int, line: int):
        action = 'added' if change_type == 'insert' else 'removed'
        changes.append(SemanticChange(
            type=change_type,
            symbol_name=f"chunk_{len(changes)}",
            detail=f"{count} line(s) {action}",
            location=Location(line=line),
        ))

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == 'equal':
            continue
        if tag in ('delete', 'replace'):
            emit('delete', i2 - i1, i1 + 1)
        if tag in ('insert', 'replace'):
            emit('insert', j2 - j1, j1 + 1)

    return changes


def _split_lines(text: str) -> List[str]:
    """Split on '\\n' only, keeping terminators; form feeds and other separators stay inside lines."""
    lines = [line + '\n' for line in text.split('\n')]
    # The piece after the last '\n' carries no terminator
    last = lines.pop()[:-1]
    if last:
        lines.append(last)
    return lines
