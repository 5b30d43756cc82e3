"""JSON exporter for component documentation."""

from pathlib import Path
import json
from typing import Any, Dict, List, Optional

from propdoc.config import ExportConfig
from propdoc.pipeline import ParseResult


class JSONExporter:
    """Export parse results to JSON."""

    def __init__(self, config: Optional[ExportConfig] = None) -> None:
        self.config = config or ExportConfig()

    def build(self, results: List[ParseResult], errors: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "metadata": {
                "total_files": len(results),
                "total_components": sum(len(result.documentations) for result in results),
                "failed_files": len(errors or {}),
            },
            "files": [result.to_dict() for result in results],
        }
        if errors:
            data["errors"] = errors
        return data

    def dumps(self, results: List[ParseResult], errors: Optional[Dict[str, str]] = None, pretty: Optional[bool] = None) -> str:
        """Serialize results to a JSON string."""
        pretty = self.config.pretty if pretty is None else pretty
        indent = self.config.indent if pretty else None
        return json.dumps(self.build(results, errors), indent=indent, default=str)

    def export(
        self,
        results: List[ParseResult],
        output_path: Path,
        errors: Optional[Dict[str, str]] = None,
        pretty: Optional[bool] = None
    ) -> None:
        """Export results to a JSON file."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(self.dumps(results, errors, pretty))
