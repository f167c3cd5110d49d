"""Parser modules for chunk transformation."""

from .base import (
    BaseParser, SyntaxTree, ImportDeclaration, ImportSpecifier,
    ExportDeclaration, ExportSpecifier, SpecifierKind
)
from .tree_sitter_parser import JavaScriptParser, get_javascript_parser

__all__ = [
    "BaseParser",
    "SyntaxTree",
    "ImportDeclaration",
    "ImportSpecifier",
    "ExportDeclaration",
    "ExportSpecifier",
    "SpecifierKind",
    "JavaScriptParser",
    "get_javascript_parser"
]
