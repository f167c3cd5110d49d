"""Build driver that turns chunk failures into a build-level report."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from ..core.models import ChunkInfo, ChunkStatus
from .exceptions import ConfigError, TransformError
from .hook import BundlerHook
from .models import BuildReport, ChunkOutcome


logger = logging.getLogger(__name__)


@dataclass
class ChunkJob:
    """One chunk waiting to be transformed."""
    
    code: str
    chunk: ChunkInfo


class BuildDriver:
    """Processes chunks one at a time and decides when a build aborts.
    
    A config error aborts the whole build. Parse and edit errors fail their
    chunk and, unless ``continue_on_chunk_error`` is set, abort as well.
    Chunks that were never reached are reported as skipped.
    """
    
    def __init__(self, hook: BundlerHook, continue_on_chunk_error: bool = False):
        self.hook = hook
        self.continue_on_chunk_error = continue_on_chunk_error
    
    def run(self, jobs: Iterable[ChunkJob]) -> BuildReport:
        report = BuildReport()
        pending = list(jobs)
        
        for index, job in enumerate(pending):
            try:
                result = self.hook.render_chunk(job.code, job.chunk)
            except TransformError as e:
                logger.error(f"Failed to transform {job.chunk.file_name}: {e}")
                report.outcomes.append(ChunkOutcome(
                    chunk=job.chunk,
                    status=ChunkStatus.FAILED,
                    error=str(e),
                    error_type=type(e).__name__,
                    error_path=getattr(e, 'path', None) or getattr(e, 'file_path', None)
                ))
                if isinstance(e, ConfigError) or not self.continue_on_chunk_error:
                    report.aborted = True
                    report.outcomes.extend(
                        ChunkOutcome(chunk=skipped.chunk, status=ChunkStatus.SKIPPED)
                        for skipped in pending[index + 1:]
                    )
                    break
                continue
            
            report.outcomes.append(ChunkOutcome(
                chunk=job.chunk, status=ChunkStatus.OK, result=result
            ))
        
        return report


def write_outputs(report: BuildReport, out_dir: Path) -> List[Path]:
    """Write every transformed chunk, or nothing when the build failed."""
    if not report.succeeded:
        logger.error("Build failed; no output written")
        return []
    
    written = []
    out_dir.mkdir(parents=True, exist_ok=True)
    for outcome in report.outcomes:
        target = out_dir / outcome.chunk.file_name
        target.parent.mkdir(parents=True, exist_ok=True)
        code = outcome.result.code
        
        if outcome.result.map is not None:
            map_path = target.with_name(f"{target.name}.map")
            map_path.write_text(outcome.result.map.to_json(), encoding='utf-8')
            code = f"{code}//# sourceMappingURL={map_path.name}\n"
            written.append(map_path)
        
        target.write_text(code, encoding='utf-8')
        written.append(target)
        logger.info(f"Wrote {target}")
    
    return written
