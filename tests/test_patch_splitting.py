"""Tests for patch parsing and segmentation."""

import pytest
from semantic_diff.errors import PatchFormatError
from semantic_diff.language_support import SourceParser
from semantic_diff.models import Hunk, Symbol
from semantic_diff.patch_parser import PatchParser
from semantic_diff.patch_splitting import PatchSegmenter, align_hunk, render_fragment


MULTI_FILE_DIFF = """diff --git a/a.ts b/a.ts
index 111..222 100644
--- a/a.ts
+++ b/a.ts
@@ -1,3 +1,3 @@
 line1
-line2
+line2b
 line3
@@ -10,2 +10,3 @@ function later() {
 line10
+line10b
 line11
diff --git a/b.py b/b.py
index 333..444 100644
--- a/b.py
+++ b/b.py
@@ -1,1 +1,1 @@
-x = 1
+x = 2
"""

SAMPLE_PY_DIFF = """diff --git a/sample.py b/sample.py
index 111..222 100644
--- a/sample.py
+++ b/sample.py
@@ -1,2 +1,2 @@
-line_one
-line_two
+line_one
+line_three
"""

HEADERLESS_HUNK = """@@ -1,1 +1,1 @@
-a
+b
"""

BEFORE_TS = """function alpha() {
  return 1;
}

function beta() {
  const x = 1;
  return x;
}
"""

AFTER_TS = """function alpha() {
  return 2;
}

function beta() {
  const x = 2;
  return x + 1;
}
console.log(alpha());
"""

SYMBOL_DIFF = """--- a/sample.ts
+++ b/sample.ts
@@ -2,1 +2,1 @@
-  return 1;
+  return 2;
@@ -6,1 +6,1 @@
-  const x = 1;
+  const x = 2;
@@ -7,1 +7,1 @@
-  return x;
+  return x + 1;
@@ -8,0 +9,1 @@
+console.log(alpha());
"""


@pytest.fixture
def segmenter():
    return PatchSegmenter()


def test_parse_multiple_files_and_hunks():
    """Every file and every hunk is kept in order with verbatim bodies."""
    document = PatchParser().parse(MULTI_FILE_DIFF)

    assert [f.target_file for f in document.files] == ['b/a.ts', 'b/b.py']
    assert [len(f.hunks) for f in document.files] == [2, 1]

    first = document.files[0].hunks[0]
    assert (first.old_start, first.old_lines, first.new_start, first.new_lines) == (1, 3, 1, 3)
    assert first.body_lines == [' line1', '-line2', '+line2b', ' line3']

    second = document.files[0].hunks[1]
    assert second.section_header == 'function later() {'
    assert len(document.hunks) == 3


def test_parse_non_diff_text_yields_empty_document():
    document = PatchParser().parse("just some text\nnothing to see\n")

    assert document.files == []
    assert document.hunks == []


def test_parse_hunk_without_file_header_is_malformed():
    with pytest.raises(PatchFormatError):
        PatchParser().parse(HEADERLESS_HUNK)


def test_hunk_header_defaults_missing_fields_to_zero():
    hunk = Hunk(old_start=None, old_lines=None, new_start=1, new_lines=2, body_lines=['+a', '+b'])

    assert hunk.render_header() == '@@ -0,0 +1,2 @@'


def test_hunk_changed_line_numbers():
    hunk = Hunk(
        old_start=10, old_lines=3, new_start=12, new_lines=3,
        body_lines=[' ctx', '-gone', '+new', '\\ No newline at end of file', ' tail'],
    )

    assert hunk.removed_line_numbers() == [11]
    assert hunk.added_line_numbers() == [13]


def test_split_by_hunk_one_fragment_per_hunk(segmenter):
    """An N-hunk patch yields exactly N standalone fragments."""
    chunks = segmenter.split_by_hunk(MULTI_FILE_DIFF)

    assert len(chunks) == 3
    assert chunks[0] == "---\n+++\n@@ -1,3 +1,3 @@\n line1\n-line2\n+line2b\n line3\n"
    assert chunks[1].startswith("---\n+++\n@@ -10,2 +10,3 @@\n")
    assert chunks[2] == "---\n+++\n@@ -1,1 +1,1 @@\n-x = 1\n+x = 2\n"


def test_split_by_hunk_single_hunk(segmenter):
    chunks = segmenter.split_by_hunk(SAMPLE_PY_DIFF)

    assert len(chunks) == 1
    assert '+line_three' in chunks[0]


def test_split_non_diff_returns_input(segmenter):
    """Text without hunks comes back as the only fragment."""
    text = "this is not a diff"

    assert segmenter.split_by_hunk(text) == [text]


def test_split_malformed_patch_returns_input(segmenter):
    assert segmenter.split_by_hunk(HEADERLESS_HUNK) == [HEADERLESS_HUNK]


def test_split_by_symbol_merges_hunks_in_same_symbol(segmenter):
    """Hunks inside the same function share a fragment; stray hunks stand alone."""
    source_parser = SourceParser()
    before_symbols = source_parser.extract_symbols(BEFORE_TS, 'ts')
    after_symbols = source_parser.extract_symbols(AFTER_TS, 'ts')

    chunks = segmenter.split_by_symbol(SYMBOL_DIFF, before_symbols, after_symbols)

    assert len(chunks) == 3
    assert '+  return 2;' in chunks[0]
    assert '@@ -6,1 +6,1 @@' in chunks[1]
    assert '@@ -7,1 +7,1 @@' in chunks[1]
    assert chunks[1].count('---') == 1
    assert chunks[2] == "---\n+++\n@@ -8,0 +9,1 @@\n+console.log(alpha());\n"


def test_split_by_symbol_without_hunks_returns_input(segmenter):
    assert segmenter.split_by_symbol("not a diff", {}, {}) == ["not a diff"]


def test_split_by_symbol_multi_file_uses_hunk_mode(segmenter):
    assert len(segmenter.split_by_symbol(MULTI_FILE_DIFF, {}, {})) == 3


def _symbol(name, line, end_line, kind='function'):
    return Symbol(
        key=f"{kind}:{name}", name=name, kind=kind,
        source_text=name, line=line, column=0, end_line=end_line,
    )


def test_align_hunk_prefers_smallest_enclosing_symbol():
    outer = _symbol('outer', 1, 20)
    inner = _symbol('inner', 5, 8, kind='const')
    table = {outer.key: outer, inner.key: inner}
    hunk = Hunk(old_start=6, old_lines=1, new_start=6, new_lines=1, body_lines=['-a', '+b'])

    assert align_hunk(hunk, table, table) == 'const:inner'


def test_align_pure_deletion_uses_before_symbols():
    removed = _symbol('gone', 3, 6)
    hunk = Hunk(old_start=3, old_lines=4, new_start=2, new_lines=0,
                body_lines=['-a', '-b', '-c', '-d'])

    assert align_hunk(hunk, {removed.key: removed}, {}) == 'function:gone'


def test_align_hunk_spilling_outside_symbol_is_unaligned():
    symbol = _symbol('f', 1, 3)
    hunk = Hunk(old_start=3, old_lines=0, new_start=3, new_lines=2, body_lines=['+a', '+b'])

    assert align_hunk(hunk, {}, {symbol.key: symbol}) is None


def test_render_fragment_with_several_hunks():
    first = Hunk(old_start=1, old_lines=1, new_start=1, new_lines=1, body_lines=['-a', '+b'])
    second = Hunk(old_start=5, old_lines=1, new_start=5, new_lines=1, body_lines=['-c', '+d'])

    assert render_fragment([first, second]) == (
        "---\n+++\n@@ -1,1 +1,1 @@\n-a\n+b\n@@ -5,1 +5,1 @@\n-c\n+d\n"
    )


NO_NEWLINE_DIFF = """--- a/notes.txt
+++ b/notes.txt
@@ -1,2 +1,2 @@
 keep
-old
\\ No newline at end of file
+new
\\ No newline at end of file
"""


def test_no_newline_marker_survives_splitting(segmenter):
    """The end-of-file marker is kept verbatim and does not shift line numbers."""
    hunk = PatchParser().parse(NO_NEWLINE_DIFF).hunks[0]
    chunks = segmenter.split_by_hunk(NO_NEWLINE_DIFF)

    assert hunk.removed_line_numbers() == [2]
    assert hunk.added_line_numbers() == [2]
    assert len(chunks) == 1
    assert chunks[0].splitlines().count('\\ No newline at end of file') == 2
    assert chunks[0].endswith("+new\n\\ No newline at end of file\n")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
