"""Base rewriter interface."""

from abc import ABC, abstractmethod
from typing import List

from ..buffer import Edit
from ..parsers import SyntaxTree


class Rewriter(ABC):
    """A pure pass over a syntax tree that produces buffer edits.
    
    Rewriters never touch a buffer themselves; the orchestrator merges the
    edit lists of every pass and applies them in one place.
    """
    
    name: str = "rewriter"
    
    @abstractmethod
    def rewrite(self, tree: SyntaxTree) -> List[Edit]:
        """Return the edits this pass schedules for the tree."""
        pass
