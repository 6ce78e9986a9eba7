"""Unused function detection with export and naming heuristics.

Functions that are exported, or that look like they are referenced through
markup or event registration, are kept even with no visible references.
Keeping a dead function is preferred over deleting a live one.
"""

import logging
import re
from typing import Iterable, Protocol, runtime_checkable

from tree_sitter import Node

from jsprune.analysis.declarations import is_intentionally_unused
from jsprune.analysis.nodes import FUNCTION_DECLARATION_TYPES, JSX_TYPES, contains_type, walk
from jsprune.models.bindings import BindingKind, UnusedBindingRecord
from jsprune.parsing import SyntaxTree

logger = logging.getLogger(__name__)


@runtime_checkable
class FunctionExclusionRule(Protocol):
    """Decides whether an unreferenced function is kept anyway."""

    @property
    def name(self) -> str:
        """Human-readable rule name."""
        ...

    def excludes(self, tree: SyntaxTree, function: Node, name: str) -> bool:
        """Return True if the function must not be treated as dead code."""
        ...


class ComponentRule:
    """Keep capitalized functions that render JSX (React components)."""

    name = "component"

    def excludes(self, tree: SyntaxTree, function: Node, name: str) -> bool:
        if not name[:1].isupper():
            return False
        body = function.child_by_field_name("body")
        return body is not None and contains_type(body, JSX_TYPES)


class HandlerRule:
    """Keep event-handler style names such as ``onClick`` or ``handleSubmit``."""

    name = "handler"
    pattern = re.compile(r"^(on[A-Z]|handle[A-Z])")

    def excludes(self, tree: SyntaxTree, function: Node, name: str) -> bool:
        return bool(self.pattern.match(name))


DEFAULT_RULES: tuple[FunctionExclusionRule, ...] = (ComponentRule(), HandlerRule())


def collect_exported_names(tree: SyntaxTree) -> set[str]:
    """Collect names exported from the file.

    Covers ``export { a, b as c }`` lists, ``export function f`` (including
    ``export default function f``) and ``export default <identifier>``.
    """
    exported: set[str] = set()

    for node in walk(tree.root):
        if node.type != "export_statement":
            continue

        for child in node.named_children:
            if child.type == "export_clause":
                for spec in child.named_children:
                    if spec.type != "export_specifier":
                        continue
                    for field_name in ("name", "alias"):
                        part = spec.child_by_field_name(field_name)
                        if part is not None:
                            exported.add(tree.text(part))

        declaration = node.child_by_field_name("declaration")
        if declaration is not None and declaration.type in FUNCTION_DECLARATION_TYPES:
            name = declaration.child_by_field_name("name")
            if name is not None:
                exported.add(tree.text(name))

        value = node.child_by_field_name("value")
        if value is None:
            continue
        if value.type == "identifier":
            exported.add(tree.text(value))
        else:
            # export default function main() {} may parse as an expression
            name = value.child_by_field_name("name")
            if name is not None:
                exported.add(tree.text(name))

    return exported


def is_excluded_function(
    tree: SyntaxTree,
    function: Node,
    name: str,
    rules: Iterable[FunctionExclusionRule] = DEFAULT_RULES,
) -> bool:
    """Check whether any exclusion rule keeps the function."""
    for rule in rules:
        if rule.excludes(tree, function, name):
            logger.debug("Keeping function %s (%s rule)", name, rule.name)
            return True
    return False


def find_unused_functions(
    tree: SyntaxTree,
    used: set[str],
    rules: Iterable[FunctionExclusionRule] = DEFAULT_RULES,
) -> list[UnusedBindingRecord]:
    """Find top-level function declarations to treat as dead code."""
    rules = tuple(rules)
    exported = collect_exported_names(tree)
    unused: list[UnusedBindingRecord] = []

    for node in tree.root.named_children:
        if node.type not in FUNCTION_DECLARATION_TYPES:
            continue
        name_node = node.child_by_field_name("name")
        if name_node is None:
            continue
        name = tree.text(name_node)
        if is_intentionally_unused(name) or name in used or name in exported:
            continue
        if is_excluded_function(tree, node, name, rules):
            continue
        unused.append(UnusedBindingRecord(BindingKind.FUNCTION, name, node, name_node))

    return unused
