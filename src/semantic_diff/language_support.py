"""Top-level declaration extraction for ECMAScript/TypeScript using tree-sitter."""

import logging
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Tuple

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from .errors import SourceParseError
from .models import Symbol, SymbolTable

logger = logging.getLogger(__name__)


# Language tag -> tree-sitter grammar. The JavaScript grammar covers JSX.
GRAMMAR_BY_LANGUAGE = {
    'ts': 'typescript',
    'mts': 'typescript',
    'cts': 'typescript',
    'typescript': 'typescript',
    'tsx': 'tsx',
    'js': 'javascript',
    'jsx': 'javascript',
    'mjs': 'javascript',
    'cjs': 'javascript',
    'javascript': 'javascript',
}


class DeclarationShape(Enum):
    """Closed set of top-level statement shapes that can yield symbols."""

    FUNCTION = 'function'
    CLASS = 'class'
    INTERFACE = 'interface'
    TYPE_ALIAS = 'type'
    VARIABLE = 'variable'
    EXPORT = 'export'


# tree-sitter node type -> declaration shape. Anything else is ignored.
NODE_SHAPES = {
    'function_declaration': DeclarationShape.FUNCTION,
    'generator_function_declaration': DeclarationShape.FUNCTION,
    'class_declaration': DeclarationShape.CLASS,
    'abstract_class_declaration': DeclarationShape.CLASS,
    'interface_declaration': DeclarationShape.INTERFACE,
    'type_alias_declaration': DeclarationShape.TYPE_ALIAS,
    'lexical_declaration': DeclarationShape.VARIABLE,
    'variable_declaration': DeclarationShape.VARIABLE,
    'export_statement': DeclarationShape.EXPORT,
}

NAMED_SHAPES = (
    DeclarationShape.FUNCTION,
    DeclarationShape.CLASS,
    DeclarationShape.INTERFACE,
    DeclarationShape.TYPE_ALIAS,
)

# `using` / `await using` resource bindings are not reported
VARIABLE_KINDS = ('const', 'let', 'var')


@lru_cache(maxsize=None)
def _load_language(grammar: str) -> Language:
    """Load a tree-sitter grammar. Language objects are immutable and shareable."""
    if grammar == 'typescript':
        return Language(tstypescript.language_typescript())
    if grammar == 'tsx':
        return Language(tstypescript.language_tsx())
    if grammar == 'javascript':
        return Language(tsjavascript.language())
    raise ValueError(f"No tree-sitter grammar named {grammar!r}")


class SourceParser:
    """Turns one version of a source file into a table of top-level symbols.

    A fresh tree-sitter ``Parser`` is built for every call and the parse tree
    is dropped on return, so one instance can be shared across threads.
    """

    def supports(self, language: str) -> bool:
        return language.lower() in GRAMMAR_BY_LANGUAGE

    def parse_declarations(
        self,
        source: str,
        language: str,
        file_path: Optional[str] = None
    ) -> List[Symbol]:
        """Extract every recognized top-level declaration in source order.

        Args:
            source: Full text of one version of the file
            language: Language tag (ts, tsx, js, jsx, ...)
            file_path: Optional path, only used in error reports

        Returns:
            List of Symbol objects, colliding keys included

        Raises:
            SourceParseError: If the source contains a syntax error
        """
        grammar = GRAMMAR_BY_LANGUAGE.get(language.lower())
        if grammar is None:
            raise ValueError(f"Language {language!r} has no parser support")

        try:
            source_bytes = source.encode('utf8')
        except UnicodeEncodeError as e:
            line = source.count('\n', 0, e.start) + 1
            column = e.start - (source.rfind('\n', 0, e.start) + 1)
            raise SourceParseError(
                language, line, column, file_path=file_path, reason="text is not valid Unicode"
            ) from e
        parser = Parser(_load_language(grammar))
        tree = parser.parse(source_bytes)
        root_node = tree.root_node

        if root_node.has_error:
            line, column, reason = self._locate_error(root_node, source_bytes)
            raise SourceParseError(language, line, column, file_path=file_path, reason=reason)

        symbols = []
        for statement in root_node.named_children:
            self._collect_symbols(statement, source_bytes, symbols)
        return symbols

    def extract_symbols(
        self,
        source: str,
        language: str,
        file_path: Optional[str] = None
    ) -> SymbolTable:
        """Build the symbol table for one source version.

        Declarations sharing a key overwrite earlier ones (last write wins).
        """
        table: SymbolTable = {}
        for symbol in self.parse_declarations(source, language, file_path):
            if symbol.key in table:
                logger.debug(f"Symbol {symbol.key} redeclared at line {symbol.line}, keeping the later one")
            table[symbol.key] = symbol
        return table

    def _collect_symbols(self, node, source_bytes: bytes, symbols: List[Symbol]):
        shape = NODE_SHAPES.get(node.type)
        if shape is None:
            return

        if shape in NAMED_SHAPES:
            name_node = node.child_by_field_name('name')
            if name_node is not None:
                symbols.append(self._make_symbol(node, name_node, shape.value, source_bytes))
        elif shape is DeclarationShape.VARIABLE:
            # The first token is the mutability qualifier: const, let or var
            kind = _node_text(node.children[0], source_bytes)
            if kind not in VARIABLE_KINDS:
                return
            for declarator in node.named_children:
                if declarator.type != 'variable_declarator':
                    continue
                name_node = declarator.child_by_field_name('name')
                # Destructuring patterns are not expanded into symbols
                if name_node is not None and name_node.type == 'identifier':
                    symbols.append(self._make_symbol(node, name_node, kind, source_bytes))
        elif shape is DeclarationShape.EXPORT:
            declaration = node.child_by_field_name('declaration')
            if declaration is not None:
                self._collect_symbols(declaration, source_bytes, symbols)
        else:
            raise NotImplementedError(f"Unhandled declaration shape {shape} for node {node.type}")

    def _make_symbol(self, node, name_node, kind: str, source_bytes: bytes) -> Symbol:
        name = _node_text(name_node, source_bytes)
        line, column = _char_position(node, source_bytes)
        return Symbol(
            key=f"{kind}:{name}",
            name=name,
            kind=kind,
            source_text=_node_text(node, source_bytes),
            line=line,
            column=column,
            end_line=node.end_point[0] + 1,
        )

    def _locate_error(self, root_node, source_bytes: bytes) -> Tuple[int, int, str]:
        """Find the first ERROR or MISSING node in document order."""
        stack = [root_node]
        while stack:
            node = stack.pop()
            if node.is_missing:
                line, column = _char_position(node, source_bytes)
                return line, column, f"missing {node.type!r}"
            if node.type == 'ERROR':
                line, column = _char_position(node, source_bytes)
                return line, column, "unexpected syntax"
            if node.has_error:
                stack.extend(reversed(node.children))

        line, column = _char_position(root_node, source_bytes)
        return line, column, "syntax error"


def _node_text(node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode('utf8')


def _char_position(node, source_bytes: bytes) -> Tuple[int, int]:
    """Convert a node's byte-based start point to (1-based line, 0-based char column)."""
    row, byte_column = node.start_point[0], node.start_point[1]
    line_start = node.start_byte - byte_column
    column = len(source_bytes[line_start:node.start_byte].decode('utf8'))
    return row + 1, column
