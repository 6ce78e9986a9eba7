"""Identifier usage collection.

Usage tracking is name based: a name referenced anywhere in the file counts
as used for every binding of that name, whatever scope declared it.
"""

import logging
from typing import Iterable

from tree_sitter import Node

from jsprune.analysis.nodes import (
    FUNCTION_DECLARATION_TYPES,
    IDENTIFIER_TYPES,
    IMPORT_TYPES,
    NodeKey,
    node_key,
    parameter_name_node,
    parameter_nodes,
    walk,
)
from jsprune.parsing import SyntaxTree

logger = logging.getLogger(__name__)


def _is_parameter_container(node: Node) -> bool:
    return node.type == "formal_parameters" or (
        node.type == "arrow_function" and node.child_by_field_name("parameter") is not None
    )


def collect_declaration_sites(tree: SyntaxTree) -> set[NodeKey]:
    """Collect identifiers that declare a binding rather than reference one.

    Covers variable declarator names, parameter names (including parameters
    of type-level signatures) and function declaration names.
    """
    sites: set[NodeKey] = set()

    for node in walk(tree.root):
        if node.type == "variable_declarator":
            name = node.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                sites.add(node_key(name))
        elif node.type in FUNCTION_DECLARATION_TYPES:
            name = node.child_by_field_name("name")
            if name is not None:
                sites.add(node_key(name))

        if _is_parameter_container(node):
            params = node.named_children if node.type == "formal_parameters" else parameter_nodes(node)
            for param in params:
                name = parameter_name_node(param)
                if name is not None:
                    sites.add(node_key(name))

    return sites


def collect_used_names(tree: SyntaxTree, implicit: Iterable[str] = ()) -> set[str]:
    """Collect every identifier name referenced outside top-level imports.

    Args:
        tree: Parsed source.
        implicit: Names always treated as used (e.g. the JSX factory ``React``).

    Returns:
        The set of used names.
    """
    imports = {node_key(child) for child in tree.root.children if child.type in IMPORT_TYPES}
    declarations = collect_declaration_sites(tree)

    used: set[str] = set(implicit)
    for node in walk(tree.root, skip=lambda n: node_key(n) in imports):
        if node.type in IDENTIFIER_TYPES and node_key(node) not in declarations:
            used.add(tree.text(node))

    logger.debug("Collected %d used names from %s", len(used), tree.file_name)
    return used
