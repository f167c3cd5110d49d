"""Position maps and Source Map v3 encoding for rendered chunks."""

import base64
import json
from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


_BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_BASE64_INDEX: Dict[str, int] = {char: index for index, char in enumerate(_BASE64_ALPHABET)}


def encode_vlq(value: int) -> str:
    """Encode one signed integer as a base64 VLQ string."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    encoded = []
    while True:
        digit = vlq & 31
        vlq >>= 5
        if vlq:
            digit |= 32
        encoded.append(_BASE64_ALPHABET[digit])
        if not vlq:
            return "".join(encoded)


def decode_vlq(text: str) -> List[int]:
    """Decode a run of base64 VLQ digits into signed integers."""
    values: List[int] = []
    value = 0
    shift = 0
    for char in text:
        try:
            digit = _BASE64_INDEX[char]
        except KeyError:
            raise ValueError(f"Invalid base64 VLQ character: {char!r}")
        value += (digit & 31) << shift
        if digit & 32:
            shift += 5
            continue
        negative = value & 1
        value >>= 1
        values.append(-value if negative else value)
        value = 0
        shift = 0
    if shift:
        raise ValueError("Truncated base64 VLQ sequence")
    return values


def decode_mappings(mappings: str) -> List[List[Tuple[int, int, int, int]]]:
    """Decode a mappings string into absolute (column, source, line, column) segments per line."""
    decoded: List[List[Tuple[int, int, int, int]]] = []
    source = original_line = original_column = 0
    for line in mappings.split(";"):
        generated_column = 0
        segments = []
        for raw in line.split(","):
            if not raw:
                continue
            fields = decode_vlq(raw)
            generated_column += fields[0]
            if len(fields) >= 4:
                source += fields[1]
                original_line += fields[2]
                original_column += fields[3]
                segments.append((generated_column, source, original_line, original_column))
        decoded.append(segments)
    return decoded


def _utf16_length(text: str) -> int:
    """Length of text in UTF-16 code units, the unit source map columns use."""
    return len(text) + sum(1 for char in text if ord(char) > 0xFFFF)


class SourceMap(BaseModel):
    """Source Map revision 3 document."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    version: int = 3
    file: Optional[str] = None
    sources: List[str] = Field(default_factory=list)
    sources_content: Optional[List[Optional[str]]] = Field(default=None, alias="sourcesContent")
    names: List[str] = Field(default_factory=list)
    mappings: str = ""
    
    def to_dict(self) -> dict:
        """Serialize with the camelCase keys JavaScript tooling expects."""
        return self.model_dump(by_alias=True, exclude_none=True)
    
    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
    
    def to_url(self) -> str:
        """Return the map as a base64 data URI for inline embedding."""
        payload = base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")
        return f"data:application/json;charset=utf-8;base64,{payload}"


@dataclass(frozen=True)
class Piece:
    """A contiguous run of rendered text and where it came from."""
    
    generated_start: int
    text: str
    original_start: Optional[int]
    verbatim: bool
    
    @property
    def generated_end(self) -> int:
        return self.generated_start + len(self.text)


class PositionMap:
    """Maps offsets in rendered text back to offsets in the original text.
    
    Verbatim pieces map character for character. Replacement pieces map
    every offset to the start of the range they replaced. Inserted text
    (prepend/append) has no original position.
    """
    
    def __init__(self, original: str, pieces: List[Piece]):
        self.original = original
        self.pieces = [piece for piece in pieces if piece.text]
        self._starts = [piece.generated_start for piece in self.pieces]
        self._original_line_starts = [0]
        for index, char in enumerate(original):
            if char == "\n":
                self._original_line_starts.append(index + 1)
    
    def original_offset(self, generated_offset: int) -> Optional[int]:
        """Translate a rendered-text offset to an original-text offset."""
        index = bisect_right(self._starts, generated_offset) - 1
        if index < 0:
            return None
        piece = self.pieces[index]
        if generated_offset >= piece.generated_end or piece.original_start is None:
            return None
        if piece.verbatim:
            return piece.original_start + (generated_offset - piece.generated_start)
        return piece.original_start
    
    def _original_location(self, offset: int) -> Tuple[int, int]:
        line = bisect_right(self._original_line_starts, offset) - 1
        line_start = self._original_line_starts[line]
        return line, _utf16_length(self.original[line_start:offset])
    
    def to_source_map(self, source: str, file: Optional[str] = None,
                      include_content: bool = True, hires: bool = True) -> SourceMap:
        """Encode the position map as a Source Map v3 document."""
        lines: List[List[str]] = [[]]
        state = {"generated_column": 0, "line": 0, "column": 0}
        generated_column = 0
        
        def add_segment(original_line: int, original_column: int) -> None:
            lines[-1].append(
                encode_vlq(generated_column - state["generated_column"])
                + encode_vlq(0)
                + encode_vlq(original_line - state["line"])
                + encode_vlq(original_column - state["column"])
            )
            state["generated_column"] = generated_column
            state["line"] = original_line
            state["column"] = original_column
        
        def new_line() -> None:
            lines.append([])
            state["generated_column"] = 0
        
        for piece in self.pieces:
            if piece.original_start is None:
                for char in piece.text:
                    if char == "\n":
                        new_line()
                        generated_column = 0
                    else:
                        generated_column += _utf16_length(char)
                continue
            
            original_line, original_column = self._original_location(piece.original_start)
            at_line_start = True
            for char in piece.text:
                if char == "\n":
                    new_line()
                    generated_column = 0
                    at_line_start = True
                    if piece.verbatim:
                        original_line += 1
                        original_column = 0
                    continue
                if piece.verbatim:
                    if hires or at_line_start:
                        add_segment(original_line, original_column)
                    original_column += _utf16_length(char)
                elif at_line_start:
                    add_segment(original_line, original_column)
                at_line_start = False
                generated_column += _utf16_length(char)
        
        return SourceMap(
            file=file,
            sources=[source],
            sources_content=[self.original] if include_content else None,
            mappings=";".join(",".join(segments) for segments in lines),
        )
