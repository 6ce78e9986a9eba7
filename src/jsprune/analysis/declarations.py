"""Unused variable and parameter detection."""

import logging

from tree_sitter import Node

from jsprune.analysis.nodes import (
    FUNCTION_TYPES,
    VARIABLE_DECLARATION_TYPES,
    is_exported,
    parameter_name_node,
    parameter_nodes,
    walk,
)
from jsprune.models.bindings import BindingKind, UnusedBindingRecord
from jsprune.parsing import SyntaxTree

logger = logging.getLogger(__name__)

UNUSED_MARKER = "_"


def is_intentionally_unused(name: str) -> bool:
    """Names starting with an underscore are never reported."""
    return name.startswith(UNUSED_MARKER)


def _unused_variable(tree: SyntaxTree, declarator: Node, used: set[str]) -> UnusedBindingRecord | None:
    name_node = declarator.child_by_field_name("name")
    if name_node is None or name_node.type != "identifier":
        return None

    name = tree.text(name_node)
    if name in used or is_intentionally_unused(name):
        return None

    declaration = declarator.parent
    if declaration is not None and declaration.type in VARIABLE_DECLARATION_TYPES and is_exported(declaration):
        return None

    return UnusedBindingRecord(BindingKind.VARIABLE, name, declarator, name_node)


def _unused_parameters(tree: SyntaxTree, function: Node, used: set[str]) -> list[UnusedBindingRecord]:
    records = []
    for param in parameter_nodes(function):
        name_node = parameter_name_node(param)
        if name_node is None:
            continue
        name = tree.text(name_node)
        if name in used or is_intentionally_unused(name):
            continue
        records.append(UnusedBindingRecord(BindingKind.PARAMETER, name, param, name_node, owner=function))
    return records


def find_unused_variables_and_parameters(
    tree: SyntaxTree,
    used: set[str],
) -> tuple[list[UnusedBindingRecord], list[UnusedBindingRecord]]:
    """Find variable declarators and parameters whose names are never used.

    Only simple identifier bindings are considered; destructuring patterns are
    left alone. Variables declared in ``export`` statements count as used.

    Returns:
        Tuple of (unused variables, unused parameters), each in source order.
    """
    variables: list[UnusedBindingRecord] = []
    parameters: list[UnusedBindingRecord] = []

    for node in walk(tree.root):
        try:
            if node.type == "variable_declarator":
                record = _unused_variable(tree, node, used)
                if record is not None:
                    variables.append(record)
            elif node.type in FUNCTION_TYPES:
                parameters.extend(_unused_parameters(tree, node, used))
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Skipping %s at %s:%d: %s", node.type, tree.file_name, node.start_point[0] + 1, e
            )

    return variables, parameters
