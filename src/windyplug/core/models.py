"""Core data models for windyplug."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OutputFormat(str, Enum):
    """Supported report formats."""
    
    TEXT = "text"
    JSON = "json"


class ChunkStatus(str, Enum):
    """Outcome of transforming one chunk."""
    
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


class ChunkInfo(BaseModel):
    """Identity of a bundler output chunk."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    file_name: str = Field(alias="fileName")
    facade_module_id: Optional[str] = Field(default=None, alias="facadeModuleId")
    is_entry: bool = Field(default=True, alias="isEntry")
    
    @property
    def source_directory(self) -> Optional[Path]:
        """Directory of the module this chunk was built from."""
        if not self.facade_module_id:
            return None
        return Path(self.facade_module_id).parent


class PluginManifest(BaseModel):
    """Declarative plugin metadata read from the side config file.
    
    Unknown keys are kept; known keys are type checked.
    """
    
    model_config = ConfigDict(extra="allow")
    
    name: Optional[str] = None
    version: Optional[str] = None
    icon: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    repository: Optional[str] = None
    desktopUI: Optional[str] = None
    mobileUI: Optional[str] = None
    desktopWidth: Optional[int] = None
    routerPath: Optional[str] = None
    listenToSingleclick: Optional[bool] = None
    addToContextmenu: Optional[bool] = None
    private: Optional[bool] = None

