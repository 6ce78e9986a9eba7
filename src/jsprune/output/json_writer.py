"""JSON output for analysis reports."""

import json
from pathlib import Path

from jsprune.models.results import AnalysisResults


def write_results(results: AnalysisResults, output_path: Path) -> None:
    """Write an analysis report as JSON."""
    data = results.to_dict()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

