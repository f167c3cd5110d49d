"""Per-chunk transformation pipeline."""

import logging
import time
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..core.config import Config
from ..core.models import ChunkInfo
from .buffer import Edit, TextEditBuffer
from .exceptions import ConfigError
from .models import TransformResult
from .parsers import BaseParser, get_javascript_parser
from .registry import CapabilityRegistry
from .rewriters import ExportRewriter, VirtualImportRewriter
from .side_config import SideConfigLoader


logger = logging.getLogger(__name__)


class TransformStage(str, Enum):
    """Stages a chunk passes through, in order."""
    
    PARSED = "parsed"
    IMPORTS_REWRITTEN = "imports_rewritten"
    CONFIG_INJECTED = "config_injected"
    EXPORTS_REWRITTEN = "exports_rewritten"
    RENDERED = "rendered"


class TransformOrchestrator:
    """Runs parse, import rewrite, config injection, export rewrite and render."""
    
    def __init__(self, config: Optional[Config] = None,
                 parser: Optional[BaseParser] = None,
                 side_config_loader: Optional[SideConfigLoader] = None):
        self.config = config or Config()
        self.parser = parser or get_javascript_parser()
        self.side_config_loader = side_config_loader or SideConfigLoader(self.config.side_config)
        
        self.import_rewriter = VirtualImportRewriter(
            prefix=self.config.rewrite.virtual_prefix,
            registry=CapabilityRegistry(self.config.rewrite.runtime_global)
        )
        self.export_rewriter = ExportRewriter([self.config.side_config.binding_name])
    
    def transform(self, code: str, chunk: ChunkInfo, 
                  sourcemap: bool = False) -> TransformResult:
        """Transform one chunk's code.
        
        Args:
            code: Rendered chunk code from the bundler
            chunk: Identity of the chunk; its facade module locates the side config
            sourcemap: Whether to produce a Source Map v3 for the result
        
        Returns:
            TransformResult with the new code and optional map
        
        Raises:
            ParsingError: chunk code or a declaration shape is not understood
            EditConflictError: two passes scheduled overlapping edits
            ConfigError: the side config is missing or malformed
        """
        start_time = time.time()
        file_path = Path(chunk.facade_module_id) if chunk.facade_module_id else None
        
        tree = self.parser.parse(code, file_path=file_path)
        self._advance(chunk, TransformStage.PARSED)
        
        edits: List[Edit] = self.import_rewriter.rewrite(tree)
        self._advance(chunk, TransformStage.IMPORTS_REWRITTEN)
        
        directory = chunk.source_directory
        if directory is None:
            if not chunk.is_entry:
                raise ConfigError(
                    f"Chunk {chunk.file_name} is a shared (non-entry) chunk; "
                    f"the side config is only injected into entry chunks",
                    details={"is_entry": False}
                )
            raise ConfigError(
                f"Chunk {chunk.file_name} has no facade module; cannot locate side config"
            )
        record = self.side_config_loader.load(directory)
        edits.append(Edit.prepend(self.side_config_loader.render_binding(record)))
        self._advance(chunk, TransformStage.CONFIG_INJECTED)
        
        edits.extend(self.export_rewriter.rewrite(tree))
        self._advance(chunk, TransformStage.EXPORTS_REWRITTEN)
        
        buffer = TextEditBuffer(code).apply(edits)
        result = TransformResult(
            code=buffer.render(),
            map=buffer.generate_map(
                source=chunk.file_name,
                file=chunk.file_name,
                include_content=self.config.output.include_sources_content,
                hires=self.config.output.hires
            ) if sourcemap else None
        )
        self._advance(chunk, TransformStage.RENDERED)
        
        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(f"Transformed chunk {chunk.file_name} in {elapsed_ms:.1f}ms ({len(edits)} edits)")
        return result
    
    def _advance(self, chunk: ChunkInfo, stage: TransformStage) -> None:
        logger.debug(f"{chunk.file_name}: {stage.value}")
