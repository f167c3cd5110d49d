"""Core configuration and data models for windyplug."""

from .config import Config, RewriteConfig, SideConfigSettings, OutputConfig
from .models import ChunkInfo, ChunkStatus, OutputFormat, PluginManifest

__all__ = [
    "Config",
    "RewriteConfig",
    "SideConfigSettings",
    "OutputConfig",
    "ChunkInfo",
    "ChunkStatus",
    "OutputFormat",
    "PluginManifest",
]
