"""Output formatting utilities."""

import json
from typing import Any, Dict

from ..core.config import OutputConfig
from ..core.models import ChunkStatus, OutputFormat
from ..transform.models import BuildReport


class OutputFormatter:
    """Formats build reports for the terminal."""
    
    def __init__(self, config: OutputConfig):
        self.config = config
    
    def format_report(self, report: BuildReport) -> str:
        """Format a build report according to configuration."""
        if self.config.format == OutputFormat.JSON:
            return self._format_json(report)
        return self._format_text(report)
    
    def _format_text(self, report: BuildReport) -> str:
        """Format as human-readable text."""
        output = []
        
        output.append("windyplug build")
        output.append("=" * 40)
        
        for outcome in report.outcomes:
            marker = {
                ChunkStatus.OK: "✓",
                ChunkStatus.FAILED: "✗",
                ChunkStatus.SKIPPED: "-",
            }[outcome.status]
            line = f"  {marker} {outcome.chunk.file_name}"
            if outcome.status == ChunkStatus.OK and outcome.result is not None:
                line += f" ({len(outcome.result.code)} chars"
                line += ", with source map)" if outcome.result.map else ")"
            elif outcome.status == ChunkStatus.FAILED:
                line += f": {outcome.error_type}: {outcome.error}"
            output.append(line)
        
        output.append("")
        if report.succeeded:
            output.append(f"Build succeeded: {len(report.outcomes)} chunk(s)")
        else:
            output.append(f"Build failed: {len(report.failures)} chunk(s) failed")
        
        return "\n".join(output)
    
    def _format_json(self, report: BuildReport) -> str:
        """Format as JSON, without chunk code."""
        data: Dict[str, Any] = {
            "succeeded": report.succeeded,
            "aborted": report.aborted,
            "chunks": [
                {
                    "file_name": outcome.chunk.file_name,
                    "facade_module_id": outcome.chunk.facade_module_id,
                    "status": outcome.status.value,
                    "error": outcome.error,
                    "error_type": outcome.error_type,
                    "error_path": outcome.error_path,
                    "has_map": bool(outcome.result and outcome.result.map),
                }
                for outcome in report.outcomes
            ],
        }
        return json.dumps(data, indent=2, default=str)
