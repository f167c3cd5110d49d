"""Source-to-source transformation of bundled plugin chunks."""

from .buffer import Edit, EditKind, TextEditBuffer
from .sourcemap import PositionMap, SourceMap
from .parsers import JavaScriptParser, SyntaxTree, get_javascript_parser
from .registry import CapabilityRegistry
from .rewriters import Rewriter, VirtualImportRewriter, ExportRewriter
from .side_config import SideConfigLoader
from .models import TransformResult, ChunkOutcome, BuildReport
from .orchestrator import TransformOrchestrator, TransformStage
from .hook import BundlerHook
from .build import BuildDriver, ChunkJob, write_outputs
from .exceptions import (
    TransformError, ParsingError, EditConflictError, EditRangeError, ConfigError
)

__all__ = [
    # Text editing
    "Edit",
    "EditKind",
    "TextEditBuffer",
    "PositionMap",
    "SourceMap",
    
    # Parsing
    "JavaScriptParser",
    "SyntaxTree",
    "get_javascript_parser",
    
    # Rewriting
    "CapabilityRegistry",
    "Rewriter",
    "VirtualImportRewriter",
    "ExportRewriter",
    "SideConfigLoader",
    
    # Pipeline
    "TransformResult",
    "ChunkOutcome",
    "BuildReport",
    "TransformOrchestrator",
    "TransformStage",
    "BundlerHook",
    "BuildDriver",
    "ChunkJob",
    "write_outputs",
    
    # Exceptions
    "TransformError",
    "ParsingError",
    "EditConflictError",
    "EditRangeError",
    "ConfigError",
]
