"""Bundler plugin hook adapter."""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from ..core.config import Config
from ..core.models import ChunkInfo
from .models import TransformResult
from .orchestrator import TransformOrchestrator


logger = logging.getLogger(__name__)


class BundlerHook:
    """Adapter the bundler calls once for options and once per output chunk."""
    
    name = "transform-to-esm-plugin"
    
    def __init__(self, config: Optional[Config] = None,
                 orchestrator: Optional[TransformOrchestrator] = None):
        self.config = config or Config()
        self.orchestrator = orchestrator or TransformOrchestrator(self.config)
        self._sourcemaps = self.config.output.sourcemap
        self._options_resolved = False
    
    @property
    def sourcemaps(self) -> bool:
        """Whether position maps are emitted; fixed once options are resolved."""
        return self._sourcemaps
    
    def options(self, options: Mapping[str, Any]) -> None:
        """Read whether source maps are requested. Never overrides options."""
        if self._options_resolved:
            logger.warning("Build options resolved twice; keeping the first sourcemap setting")
            return None
        
        output = options.get("output") or {}
        if isinstance(output, (list, tuple)):
            output = output[0] if output else {}
        
        self._sourcemaps = bool(output.get("sourcemap"))
        self._options_resolved = True
        logger.debug(f"Source maps {'enabled' if self._sourcemaps else 'disabled'}")
        return None
    
    def render_chunk(self, code: str, 
                     chunk: Union[ChunkInfo, Mapping[str, Any]]) -> TransformResult:
        """Transform one output chunk."""
        if not isinstance(chunk, ChunkInfo):
            chunk = ChunkInfo.model_validate(dict(chunk))
        return self.orchestrator.transform(code, chunk, sourcemap=self._sourcemaps)
    
    def __call__(self, code: str, chunk: Union[ChunkInfo, Mapping[str, Any]]) -> Dict[str, Any]:
        """renderChunk in the bundler's own result shape."""
        return self.render_chunk(code, chunk).to_hook_result()
