"""Base parser interface and syntax tree model for chunk transformation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple


class SpecifierKind(str, Enum):
    """Shapes an import specifier can take."""
    
    NAMED = "named"
    DEFAULT = "default"
    NAMESPACE = "namespace"


@dataclass(frozen=True)
class ImportSpecifier:
    """One binding introduced by an import declaration.
    
    ``imported`` is the exported name as written in the source (an identifier
    or a quoted string) and is ``None`` for default and namespace imports.
    """
    
    kind: SpecifierKind
    local: str
    imported: Optional[str] = None


@dataclass(frozen=True)
class ExportSpecifier:
    """One ``local as exported`` pair of an export clause."""
    
    local: str
    exported: str


@dataclass(frozen=True)
class ImportDeclaration:
    """A located ``import`` statement."""
    
    source: str
    start: int
    end: int
    specifiers: Tuple[ImportSpecifier, ...] = ()
    line: int = 1


@dataclass(frozen=True)
class ExportDeclaration:
    """A located ``export`` statement.
    
    ``shape`` is ``clause`` for ``export { ... }`` and names the unsupported
    form otherwise (``declaration``, ``default`` or ``star``).
    """
    
    start: int
    end: int
    specifiers: Tuple[ExportSpecifier, ...] = ()
    source: Optional[str] = None
    shape: str = "clause"
    line: int = 1


@dataclass(frozen=True)
class SyntaxTree:
    """Immutable parse of one chunk, exposing its module declarations."""
    
    source_code: str
    root: Any
    file_path: Optional[Path] = None
    imports: Tuple[ImportDeclaration, ...] = field(default_factory=tuple)
    exports: Tuple[ExportDeclaration, ...] = field(default_factory=tuple)
    
    def walk(self) -> Iterator[Any]:
        """Yield every node of the tree depth-first, in source order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class BaseParser(ABC):
    """Abstract base class for chunk parsers."""
    
    def __init__(self, language: str):
        self.language = language
        self._parser_instance: Optional[Any] = None
    
    @abstractmethod
    def parse(self, source_code: str, file_path: Optional[Path] = None) -> SyntaxTree:
        """Parse source code and return its syntax tree."""
        pass
    
    @abstractmethod
    def is_valid_syntax(self, source_code: str) -> bool:
        """Check if source code has valid syntax."""
        pass
