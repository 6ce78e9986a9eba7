"""Output formatters for jsprune."""

from jsprune.output.json_writer import write_results
from jsprune.output.tree import build_results_tree, build_summary_table, display_tree

__all__ = ["build_results_tree", "build_summary_table", "display_tree", "write_results"]
