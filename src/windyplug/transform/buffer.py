"""Text edit buffer over an immutable original source string."""

import logging
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .exceptions import EditConflictError, EditRangeError
from .sourcemap import Piece, PositionMap, SourceMap


logger = logging.getLogger(__name__)


class EditKind(str, Enum):
    """Kinds of scheduled edits."""
    
    OVERWRITE = "overwrite"
    REMOVE = "remove"
    PREPEND = "prepend"
    APPEND = "append"


@dataclass(frozen=True)
class Edit:
    """A scheduled modification of the original text."""
    
    kind: EditKind
    text: str = ""
    start: Optional[int] = None
    end: Optional[int] = None
    
    @classmethod
    def overwrite(cls, start: int, end: int, text: str) -> "Edit":
        return cls(EditKind.OVERWRITE, text, start, end)
    
    @classmethod
    def remove(cls, start: int, end: int) -> "Edit":
        return cls(EditKind.REMOVE, "", start, end)
    
    @classmethod
    def prepend(cls, text: str) -> "Edit":
        return cls(EditKind.PREPEND, text)
    
    @classmethod
    def append(cls, text: str) -> "Edit":
        return cls(EditKind.APPEND, text)


class TextEditBuffer:
    """Records edits against an original string and renders them on demand.
    
    Range edits (overwrite/remove) are kept sorted by start offset and must
    never intersect. Prepended and appended text sits outside every range,
    so it never conflicts with range edits.
    """
    
    def __init__(self, original: str):
        self.original = original
        self._ranges: List[Tuple[int, int, str]] = []
        self._intro = ""
        self._outro = ""
    
    def slice(self, start: int, end: int) -> str:
        """Return original text for a range."""
        self._check_range(start, end)
        return self.original[start:end]
    
    def overwrite(self, start: int, end: int, text: str) -> "TextEditBuffer":
        """Replace the half-open range [start, end) with text."""
        self._check_range(start, end)
        
        index = bisect_left(self._ranges, (start, end, text))
        if index > 0:
            previous = self._ranges[index - 1]
            if previous[1] > start:
                raise EditConflictError(previous[:2], (start, end))
        if index < len(self._ranges):
            following = self._ranges[index]
            if following[0] < end:
                raise EditConflictError(following[:2], (start, end))
        
        self._ranges.insert(index, (start, end, text))
        return self
    
    def remove(self, start: int, end: int) -> "TextEditBuffer":
        return self.overwrite(start, end, "")
    
    def prepend(self, text: str) -> "TextEditBuffer":
        self._intro = text + self._intro
        return self
    
    def append(self, text: str) -> "TextEditBuffer":
        self._outro += text
        return self
    
    def apply(self, edits: Iterable[Edit]) -> "TextEditBuffer":
        """Schedule a batch of edits produced by a rewriter pass."""
        for edit in edits:
            if edit.kind == EditKind.PREPEND:
                self.prepend(edit.text)
            elif edit.kind == EditKind.APPEND:
                self.append(edit.text)
            elif edit.kind == EditKind.REMOVE:
                self.remove(edit.start, edit.end)
            else:
                self.overwrite(edit.start, edit.end, edit.text)
        return self
    
    def _check_range(self, start: Optional[int], end: Optional[int]) -> None:
        if start is None or end is None or start < 0 or end > len(self.original) or start >= end:
            raise EditRangeError(start, end, len(self.original))
    
    def _pieces(self) -> List[Piece]:
        pieces: List[Piece] = []
        generated = 0
        
        def emit(text: str, original_start: Optional[int], verbatim: bool) -> None:
            nonlocal generated
            if text:
                pieces.append(Piece(generated, text, original_start, verbatim))
                generated += len(text)
        
        emit(self._intro, None, False)
        position = 0
        for start, end, text in self._ranges:
            emit(self.original[position:start], position, True)
            emit(text, start, False)
            position = end
        emit(self.original[position:], position, True)
        emit(self._outro, None, False)
        return pieces
    
    def render(self) -> str:
        """Return the final text with every scheduled edit applied."""
        return "".join(piece.text for piece in self._pieces())
    
    def render_position_map(self) -> PositionMap:
        """Return a map from rendered offsets back to original offsets."""
        return PositionMap(self.original, self._pieces())
    
    def generate_map(self, source: str, file: Optional[str] = None,
                     include_content: bool = True, hires: bool = True) -> SourceMap:
        """Return a Source Map v3 document for the rendered text."""
        logger.debug(f"Generating source map for {source} ({len(self._ranges)} range edits)")
        return self.render_position_map().to_source_map(
            source, file=file, include_content=include_content, hires=hires
        )
    
    def __str__(self) -> str:
        return self.render()
