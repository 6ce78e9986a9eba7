"""Rich rendering of unused binding findings."""

from collections import defaultdict
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from jsprune.models.results import Finding

console = Console()

KIND_STYLES = {
    "import": "magenta",
    "variable": "yellow",
    "parameter": "cyan",
    "function": "red",
}


def build_results_tree(findings: list[Finding], project_root: Path) -> Tree:
    """Build a Rich tree showing findings grouped by directory and file."""
    by_file: dict[Path, list[Finding]] = defaultdict(list)
    for finding in findings:
        try:
            rel_path = finding.file.resolve().relative_to(project_root.resolve())
        except ValueError:
            rel_path = finding.file
        by_file[rel_path].append(finding)

    root = Tree(f"[bold]{project_root.name or project_root}[/]", guide_style="dim")

    # Track directories we've added
    dir_nodes: dict[Path, Tree] = {}

    for file_path in sorted(by_file):
        parent = root
        for i, part in enumerate(file_path.parts[:-1]):
            dir_path = Path(*file_path.parts[: i + 1])
            if dir_path not in dir_nodes:
                dir_nodes[dir_path] = parent.add(f"[bold blue]{part}/[/]")
            parent = dir_nodes[dir_path]

        file_node = parent.add(f"[yellow]{file_path.name}[/]")

        for finding in sorted(by_file[file_path], key=lambda f: (f.line, f.column)):
            style = KIND_STYLES.get(finding.kind.value, "white")
            item_text = Text()
            item_text.append("x ", style="red bold")
            item_text.append(finding.name, style=style)
            item_text.append(
                f" ({finding.kind.value}, line {finding.line}, {finding.action})",
                style="dim",
            )
            file_node.add(item_text)

    return root


def build_summary_table(findings: list[Finding]) -> Table:
    """Build a table counting findings per kind."""
    counts: dict[str, int] = defaultdict(int)
    for finding in findings:
        counts[finding.kind.value] += 1

    table = Table(title="Unused Bindings")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")

    for kind, count in sorted(counts.items()):
        table.add_row(Text(kind, style=KIND_STYLES.get(kind, "white")), str(count))

    table.add_row("[bold]total[/]", f"[bold]{len(findings)}[/]")
    return table


def display_tree(tree: Tree) -> None:
    """Display the tree to console."""
    console.print()
    console.print(tree)
    console.print()
