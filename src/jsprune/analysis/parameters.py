"""Unused parameter handling: underscore prefixes and trailing removal."""

import logging
from collections import defaultdict

from tree_sitter import Node

from jsprune.analysis.declarations import UNUSED_MARKER
from jsprune.analysis.nodes import NodeKey, node_key, parameter_name_node, parameter_nodes
from jsprune.edits import EditSpan, prefix_identifier
from jsprune.models.bindings import UnusedBindingRecord
from jsprune.parsing import SyntaxTree

logger = logging.getLogger(__name__)


def last_used_index(params: list[Node], unused: set[NodeKey]) -> int:
    """Index of the last parameter not flagged unused, or -1."""
    for index in range(len(params) - 1, -1, -1):
        if node_key(params[index]) not in unused:
            return index
    return -1


def _prefixed_text(tree: SyntaxTree, param: Node) -> str:
    """Parameter source text with its bound name underscore-prefixed once."""
    text = tree.text(param)
    name_node = parameter_name_node(param)
    if name_node is None:
        return text
    name = tree.text(name_node)
    if name.startswith(UNUSED_MARKER):
        return text
    offset = len(tree.slice(param.start_byte, name_node.start_byte))
    return f"{text[:offset]}{UNUSED_MARKER}{text[offset:]}"


def plan_parameter_edits(
    tree: SyntaxTree,
    params: list[Node],
    unused: list[UnusedBindingRecord],
    remove_trailing: bool,
) -> list[EditSpan]:
    """Compute the edits for one function's unused parameters.

    Unused parameters up to the last used one are prefixed with ``_``.
    Unused parameters after it are dropped when ``remove_trailing`` is set
    and at least one parameter is used; in that case the whole list is
    rebuilt and no separate prefix edits are emitted.
    """
    unused_keys = {node_key(record.node) for record in unused}
    last_used = last_used_index(params, unused_keys)
    has_trailing = any(
        index > last_used for index, param in enumerate(params) if node_key(param) in unused_keys
    )

    if remove_trailing and has_trailing and last_used >= 0:
        retained = []
        for param in params[: last_used + 1]:
            if node_key(param) in unused_keys:
                retained.append(_prefixed_text(tree, param))
            else:
                retained.append(tree.text(param))
        return [EditSpan(params[0].start_byte, params[-1].end_byte, ", ".join(retained))]

    return [
        prefix_identifier(record.name_node.start_byte, record.name_node.end_byte, record.name)
        for record in unused
    ]


def plan_unused_parameters(
    tree: SyntaxTree,
    unused_parameters: list[UnusedBindingRecord],
    remove_trailing: bool,
) -> list[EditSpan]:
    """Group unused parameters by function and plan each function's edits."""
    by_function: dict[NodeKey, list[UnusedBindingRecord]] = defaultdict(list)
    owners: dict[NodeKey, Node] = {}
    for record in unused_parameters:
        if record.owner is None:
            continue
        key = node_key(record.owner)
        by_function[key].append(record)
        owners[key] = record.owner

    spans: list[EditSpan] = []
    for key, records in by_function.items():
        function = owners[key]
        try:
            spans.extend(plan_parameter_edits(tree, parameter_nodes(function), records, remove_trailing))
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Skipping parameters of function at %s:%d: %s",
                tree.file_name,
                function.start_point[0] + 1,
                e,
            )
    return spans
