"""Rewriting of the chunk's export statement."""

import logging
from typing import List, Optional, Sequence

from .base import Rewriter
from ..buffer import Edit
from ..exceptions import ParsingError
from ..parsers import ExportDeclaration, SyntaxTree


logger = logging.getLogger(__name__)


class ExportRewriter(Rewriter):
    """Ensures the chunk ends with one export clause including injected names."""
    
    name = "exports"
    
    MODIFIED_COMMENT = "// transformCode: Export statement was modified"
    ADDED_COMMENT = "// transformCode: Export statement was added"
    
    def __init__(self, injected: Sequence[str]):
        self.injected = list(injected)
    
    def rewrite(self, tree: SyntaxTree) -> List[Edit]:
        declaration = self._single_export(tree)
        
        if declaration is None:
            logger.debug("No export statement found, adding one")
            return [Edit.append(self._statement(self.ADDED_COMMENT, self.injected))]
        
        literals = [
            s.local if s.local == s.exported else f"{s.local} as {s.exported}"
            for s in declaration.specifiers
        ]
        return [
            Edit.remove(declaration.start, declaration.end),
            Edit.append(self._statement(self.MODIFIED_COMMENT, self.injected + literals)),
        ]
    
    def _single_export(self, tree: SyntaxTree) -> Optional[ExportDeclaration]:
        file_path = str(tree.file_path) if tree.file_path else None
        
        if len(tree.exports) > 1:
            raise ParsingError(
                f"Chunk has {len(tree.exports)} export statements; only one can be merged",
                file_path=file_path,
                line_number=tree.exports[1].line
            )
        if not tree.exports:
            return None
        
        declaration = tree.exports[0]
        if declaration.shape != "clause":
            raise ParsingError(
                f"Unsupported export shape '{declaration.shape}'; expected an export clause",
                file_path=file_path,
                line_number=declaration.line
            )
        if declaration.source is not None:
            raise ParsingError(
                f"Re-export from {declaration.source!r} cannot be merged into the chunk's exports",
                file_path=file_path,
                line_number=declaration.line
            )
        return declaration
    
    @staticmethod
    def _statement(comment: str, names: List[str]) -> str:
        return f"\n{comment}\nexport {{ {', '.join(names)} }};\n"
