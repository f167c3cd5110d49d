"""Loading of the plugin side config file injected into every chunk."""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..core.config import SideConfigSettings
from ..core.models import PluginManifest
from .exceptions import ConfigError
from .literals import LiteralEvaluationError, LiteralEvaluator


logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Tokens after which a top-level "{" starts an object literal rather than
# an import list, a type body or a block.
LITERAL_CONTEXT = frozenset({"=", "(", "return", "default"})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _skip_string(text: str, index: int) -> int:
    """Return the index just past the string literal starting at ``index``."""
    quote = text[index]
    position = index + 1
    while position < len(text):
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == quote:
            return position + 1
        if char == "\n" and quote != "`":
            break
        position += 1
    raise ValueError(f"Unterminated string literal starting at offset {index}")


def find_object_literals(text: str) -> List[str]:
    """Return every top-level brace group that sits in literal position.

    Braces are balanced by scanning, with comments and string literals
    skipped so their contents never count as delimiters.
    """
    literals = []
    depth = 0
    start = 0
    is_literal = False
    previous = ""
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline < 0 else newline
            continue
        if text.startswith("/*", index):
            close = text.find("*/", index + 2)
            if close < 0:
                raise ValueError(f"Unterminated comment starting at offset {index}")
            index = close + 2
            continue
        if char in "'\"`":
            index = _skip_string(text, index)
            if depth == 0:
                previous = "string"
            continue

        if depth == 0 and (char.isalnum() or char in "_$"):
            end = index
            while end < length and (text[end].isalnum() or text[end] in "_$"):
                end += 1
            previous = text[index:end]
            index = end
            continue

        if char == "{":
            if depth == 0:
                start = index
                is_literal = previous in LITERAL_CONTEXT
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced '}}' at offset {index}")
            if depth == 0:
                if is_literal:
                    literals.append(text[start:index + 1])
                previous = "}"
        elif depth == 0 and not char.isspace():
            previous = char
        index += 1

    if depth:
        raise ValueError("Unbalanced '{' in side config")
    return literals


class SideConfigLoader:
    """Reads, evaluates and stamps the side config next to a chunk's source."""

    def __init__(self, settings: Optional[SideConfigSettings] = None,
                 clock: Optional[Callable[[], datetime]] = None,
                 evaluator: Optional[LiteralEvaluator] = None):
        self.settings = settings or SideConfigSettings()
        self.clock = clock or _utc_now
        self.evaluator = evaluator or LiteralEvaluator()

    def locate(self, directory: Path) -> Path:
        """Return the side config path inside ``directory``."""
        candidates = [
            directory / f"{self.settings.file_stem}{ext}" for ext in self.settings.extensions
        ]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise ConfigError(
            f"Side config file not found: {candidates[0]}",
            path=str(candidates[0]),
            details={"searched": [str(c) for c in candidates]}
        )

    def read(self, directory: Path) -> Dict[str, Any]:
        """Load the side config record without build provenance."""
        config_path = self.locate(directory)

        try:
            text = config_path.read_text(encoding=self.settings.encoding)
        except (OSError, UnicodeError) as e:
            raise ConfigError(f"Cannot read side config {config_path}: {e}", path=str(config_path))

        try:
            literals = find_object_literals(text)
        except ValueError as e:
            raise ConfigError(f"Cannot scan side config {config_path}: {e}", path=str(config_path))

        if len(literals) != 1:
            raise ConfigError(
                f"Expected exactly one object literal in {config_path}, found {len(literals)}",
                path=str(config_path)
            )

        try:
            record = self.evaluator.evaluate(literals[0])
        except LiteralEvaluationError as e:
            raise ConfigError(
                f"Side config {config_path} is not a plain data literal: {e}",
                path=str(config_path),
                details={"line_number": e.line_number}
            )

        try:
            PluginManifest.model_validate(record)
        except ValidationError as e:
            raise ConfigError(f"Invalid side config {config_path}: {e}", path=str(config_path))

        logger.debug(f"Loaded side config from {config_path} ({len(record)} keys)")
        return record

    def stamp(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Add ``built`` (ms since epoch) and ``builtReadable`` (ISO-8601)."""
        now = self.clock().astimezone(timezone.utc)
        record["built"] = (now - EPOCH) // timedelta(milliseconds=1)
        record["builtReadable"] = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return record

    def load(self, directory: Path) -> Dict[str, Any]:
        """Load the side config from ``directory`` and stamp it."""
        return self.stamp(self.read(directory))

    def render_binding(self, record: Dict[str, Any]) -> str:
        """Render the record as a ``const`` binding to prepend to a chunk."""
        literal = json.dumps(record, indent=2, ensure_ascii=False)
        return f"const {self.settings.binding_name} = {literal};\n\n"
