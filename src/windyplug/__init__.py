"""
windyplug: build-time transformer for bundled plugin chunks.

Rewrites virtual ``@windy/`` imports into runtime registry lookups and
injects the plugin's side config into each chunk's exports.
"""

__version__ = "0.1.0"

from .core.config import Config
from .core.models import ChunkInfo, PluginManifest
from .transform import (
    BundlerHook, TransformOrchestrator, TransformResult, TextEditBuffer,
    TransformError, ParsingError, EditConflictError, ConfigError
)

__all__ = [
    "Config",
    "ChunkInfo",
    "PluginManifest",
    "BundlerHook",
    "TransformOrchestrator",
    "TransformResult",
    "TextEditBuffer",
    "TransformError",
    "ParsingError",
    "EditConflictError",
    "ConfigError",
]
