"""Tree-sitter based JavaScript parser for chunk transformation."""

import importlib
import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Optional

from tree_sitter import Language, Parser

from .base import (
    BaseParser, SyntaxTree, ImportDeclaration, ImportSpecifier, 
    ExportDeclaration, ExportSpecifier, SpecifierKind
)
from ..exceptions import ParsingError


logger = logging.getLogger(__name__)


class _OffsetTranslator:
    """Translates tree-sitter UTF-8 byte offsets into str offsets."""
    
    def __init__(self, source_code: str, source_bytes: bytes):
        self._table: Optional[List[int]] = None
        if len(source_bytes) != len(source_code):
            table = []
            for index, char in enumerate(source_code):
                table.extend([index] * len(char.encode("utf-8")))
            table.append(len(source_code))
            self._table = table
    
    def __call__(self, byte_offset: int) -> int:
        if self._table is None:
            return byte_offset
        return self._table[byte_offset]


def _text(node: Any) -> str:
    return node.text.decode("utf-8")


def _string_value(node: Any) -> str:
    """Return the contents of a string literal node without its quotes."""
    return _text(node)[1:-1]


class JavaScriptParser(BaseParser):
    """Parses bundled ES module chunks with tree-sitter."""
    
    LANGUAGE_BINDING = "tree_sitter_javascript"
    
    def __init__(self):
        super().__init__("javascript")
        self._initialize_parser()
    
    def _initialize_parser(self) -> None:
        """Initialize tree-sitter parser for JavaScript."""
        try:
            binding_module = importlib.import_module(self.LANGUAGE_BINDING)
            
            if hasattr(binding_module, 'language'):
                ts_language = binding_module.language
                if callable(ts_language):
                    ts_language = ts_language()
            elif hasattr(binding_module, 'LANGUAGE'):
                ts_language = binding_module.LANGUAGE
            else:
                raise ImportError(f"Cannot find language in {self.LANGUAGE_BINDING}")
            
            if not isinstance(ts_language, Language):
                ts_language = Language(ts_language)
            
            self._parser_instance = Parser()
            self._parser_instance.language = ts_language
            
            logger.debug(f"Tree-sitter parser initialized for {self.language}")
        
        except ImportError as e:
            raise ParsingError(
                f"JavaScript grammar unavailable: {e}",
                required_binding=self.LANGUAGE_BINDING
            )
    
    def parse(self, source_code: str, file_path: Optional[Path] = None) -> SyntaxTree:
        """Parse chunk code; any syntax error is fatal for the chunk."""
        start_time = time.time()
        
        source_bytes = source_code.encode('utf-8')
        root = self._parser_instance.parse(source_bytes).root_node
        
        if root.has_error:
            line_number = self._first_error_line(root)
            raise ParsingError(
                f"Syntax error in chunk at line {line_number}",
                file_path=str(file_path) if file_path else None,
                line_number=line_number
            )
        
        to_offset = _OffsetTranslator(source_code, source_bytes)
        imports: List[ImportDeclaration] = []
        exports: List[ExportDeclaration] = []
        
        # Module declarations are only legal at the top level of a program.
        for node in root.named_children:
            if node.type == 'import_statement':
                imports.append(self._extract_import(node, to_offset, file_path))
            elif node.type == 'export_statement':
                exports.append(self._extract_export(node, to_offset))
        
        syntax_tree = SyntaxTree(
            source_code=source_code,
            root=root,
            file_path=file_path,
            imports=tuple(imports),
            exports=tuple(exports)
        )
        
        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"Parsed {file_path or '<chunk>'} in {elapsed_ms:.1f}ms: "
            f"{len(imports)} imports, {len(exports)} exports"
        )
        return syntax_tree
    
    def _first_error_line(self, node: Any) -> int:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == 'ERROR' or current.is_missing:
                return current.start_point[0] + 1
            stack.extend(reversed(current.children))
        return node.start_point[0] + 1
    
    def _extract_import(self, node: Any, to_offset: Any,
                        file_path: Optional[Path]) -> ImportDeclaration:
        """Extract source and specifiers of an import statement."""
        source_node = node.child_by_field_name('source')
        if source_node is None:
            raise ParsingError(
                "Import statement without a module source",
                file_path=str(file_path) if file_path else None,
                line_number=node.start_point[0] + 1
            )
        
        specifiers: List[ImportSpecifier] = []
        for clause in node.named_children:
            if clause.type != 'import_clause':
                continue
            for child in clause.named_children:
                if child.type == 'identifier':
                    specifiers.append(ImportSpecifier(SpecifierKind.DEFAULT, _text(child)))
                elif child.type == 'namespace_import':
                    local = next(c for c in child.named_children if c.type == 'identifier')
                    specifiers.append(ImportSpecifier(SpecifierKind.NAMESPACE, _text(local)))
                elif child.type == 'named_imports':
                    specifiers.extend(self._named_imports(child))
        
        return ImportDeclaration(
            source=_string_value(source_node),
            start=to_offset(node.start_byte),
            end=to_offset(node.end_byte),
            specifiers=tuple(specifiers),
            line=node.start_point[0] + 1
        )
    
    def _named_imports(self, node: Any) -> List[ImportSpecifier]:
        specifiers = []
        for specifier in node.named_children:
            if specifier.type != 'import_specifier':
                continue
            name = _text(specifier.child_by_field_name('name'))
            alias_node = specifier.child_by_field_name('alias')
            local = _text(alias_node) if alias_node is not None else name
            specifiers.append(ImportSpecifier(SpecifierKind.NAMED, local, imported=name))
        return specifiers
    
    def _extract_export(self, node: Any, to_offset: Any) -> ExportDeclaration:
        """Extract specifiers of an export statement and classify its shape."""
        start = to_offset(node.start_byte)
        end = to_offset(node.end_byte)
        line = node.start_point[0] + 1
        source_node = node.child_by_field_name('source')
        source = _string_value(source_node) if source_node is not None else None
        
        clause = next((c for c in node.named_children if c.type == 'export_clause'), None)
        if clause is None:
            if node.child_by_field_name('declaration') is not None:
                shape = 'declaration'
            elif any(c.type == 'default' for c in node.children):
                shape = 'default'
            else:
                shape = 'star'
            return ExportDeclaration(start, end, source=source, shape=shape, line=line)
        
        specifiers: List[ExportSpecifier] = []
        for specifier in clause.named_children:
            if specifier.type != 'export_specifier':
                continue
            local = _text(specifier.child_by_field_name('name'))
            alias_node = specifier.child_by_field_name('alias')
            exported = _text(alias_node) if alias_node is not None else local
            specifiers.append(ExportSpecifier(local, exported))
        
        return ExportDeclaration(start, end, tuple(specifiers), source=source, line=line)
    
    def parse_raw(self, source_code: str) -> Any:
        """Return the bare tree-sitter tree, errors included."""
        return self._parser_instance.parse(source_code.encode('utf-8'))

    def is_valid_syntax(self, source_code: str) -> bool:
        """Check if source code has valid syntax."""
        return not self.parse_raw(source_code).root_node.has_error


@lru_cache(maxsize=1)
def get_javascript_parser() -> JavaScriptParser:
    """Return a shared parser; tree-sitter parsers hold no per-parse state."""
    return JavaScriptParser()
