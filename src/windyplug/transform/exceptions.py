"""Custom exception hierarchy for chunk transformation."""

from typing import Optional, Tuple


class TransformError(Exception):
    """Base exception for all transformation-related errors."""
    
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParsingError(TransformError):
    """Raised when chunk code or a declaration shape cannot be understood."""
    
    def __init__(self, message: str, file_path: Optional[str] = None, 
                 line_number: Optional[int] = None, **kwargs):
        super().__init__(message, kwargs)
        self.file_path = file_path
        self.line_number = line_number


class EditRangeError(TransformError):
    """Raised when an edit targets a range outside the original text."""
    
    def __init__(self, start: int, end: int, length: int):
        message = f"Invalid edit range [{start}, {end}) for text of length {length}"
        super().__init__(message, {"start": start, "end": end, "length": length})
        self.start = start
        self.end = end


class EditConflictError(TransformError):
    """Raised when two scheduled edits touch overlapping ranges."""
    
    def __init__(self, first: Tuple[int, int], second: Tuple[int, int]):
        message = (
            f"Edit [{second[0]}, {second[1]}) overlaps already scheduled "
            f"edit [{first[0]}, {first[1]})"
        )
        super().__init__(message, {"first": first, "second": second})
        self.first = first
        self.second = second


class ConfigError(TransformError):
    """Raised when the side config file is missing, unreadable or malformed."""
    
    def __init__(self, message: str, path: Optional[str] = None, 
                 details: Optional[dict] = None):
        error_details = {"path": path}
        if details:
            error_details.update(details)
        super().__init__(message, error_details)
        self.path = path
