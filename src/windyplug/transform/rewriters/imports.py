"""Rewriting of virtual-namespace imports into runtime registry lookups."""

import logging
from typing import List, Optional

from .base import Rewriter
from ..buffer import Edit
from ..exceptions import ParsingError
from ..parsers import ImportDeclaration, SpecifierKind, SyntaxTree
from ..registry import CapabilityRegistry


logger = logging.getLogger(__name__)


def _comment_out(label: str, original: str) -> str:
    """Turn every line of ``original`` into a line comment, the first one labelled."""
    lines = original.splitlines() or [""]
    commented = [f"// {label}: {lines[0]}"]
    commented.extend(f"// {line}" for line in lines[1:])
    return "\n".join(commented)


class VirtualImportRewriter(Rewriter):
    """Replaces ``import ... from '<prefix><id>'`` with registry bindings.
    
    For ``import { a, b as c } from '@windy/mod'`` the declaration becomes::
    
        // transformCode: import { a, b as c } from '@windy/mod';
        const { a, b: c } = W.mod;
    
    Default and namespace specifiers become standalone ``const`` bindings
    emitted before the destructuring statement. Imports without specifiers
    are commented out and bind nothing.
    """
    
    name = "virtual-imports"
    
    def __init__(self, prefix: str = "@windy/", 
                 registry: Optional[CapabilityRegistry] = None):
        if not prefix:
            raise ValueError("Virtual import prefix must not be empty")
        self.prefix = prefix
        self.registry = registry or CapabilityRegistry()
    
    def rewrite(self, tree: SyntaxTree) -> List[Edit]:
        edits = []
        for declaration in tree.imports:
            if not declaration.source.startswith(self.prefix):
                continue
            original = tree.source_code[declaration.start:declaration.end]
            replacement = self._replacement(declaration, original, tree)
            edits.append(Edit.overwrite(declaration.start, declaration.end, replacement))
            logger.debug(f"Rewrote virtual import {declaration.source!r} at line {declaration.line}")
        return edits
    
    def _replacement(self, declaration: ImportDeclaration, original: str,
                     tree: SyntaxTree) -> str:
        if not declaration.specifiers:
            # Empty useless import line like: import '@windy/whatever';
            return _comment_out("transformCode (empty import)", original)
        
        module_id = declaration.source[len(self.prefix):]
        if not module_id:
            raise ParsingError(
                f"Virtual import {declaration.source!r} does not name a module",
                file_path=str(tree.file_path) if tree.file_path else None,
                line_number=declaration.line
            )
        access = self.registry.access(module_id)
        
        bindings = []
        destructured = []
        for specifier in declaration.specifiers:
            if specifier.kind == SpecifierKind.NAMED:
                if specifier.imported == specifier.local:
                    destructured.append(specifier.local)
                else:
                    destructured.append(f"{specifier.imported}: {specifier.local}")
            else:
                bindings.append(f"const {specifier.local} = {access};\n")
        
        if destructured:
            bindings.append(f"const {{ {', '.join(destructured)} }} = {access};\n")
        
        return _comment_out("transformCode", original) + "\n" + "".join(bindings)
