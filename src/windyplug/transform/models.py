"""Result models for chunk transformation and builds."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from ..core.models import ChunkInfo, ChunkStatus
from .sourcemap import SourceMap


class TransformResult(BaseModel):
    """Transformed chunk code and its optional position map."""
    
    code: str
    map: Optional[SourceMap] = None
    
    def to_hook_result(self) -> Dict[str, Any]:
        """Shape expected by the bundler's renderChunk contract."""
        return {"code": self.code, "map": self.map.to_dict() if self.map else None}


class ChunkOutcome(BaseModel):
    """Result of one chunk job within a build."""
    
    chunk: ChunkInfo
    status: ChunkStatus
    result: Optional[TransformResult] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_path: Optional[str] = None


class BuildReport(BaseModel):
    """Aggregated outcome of a build."""
    
    outcomes: List[ChunkOutcome] = Field(default_factory=list)
    aborted: bool = False
    
    @computed_field
    @property
    def succeeded(self) -> bool:
        return not self.aborted and all(o.status == ChunkStatus.OK for o in self.outcomes)
    
    @property
    def failures(self) -> List[ChunkOutcome]:
        return [o for o in self.outcomes if o.status == ChunkStatus.FAILED]
