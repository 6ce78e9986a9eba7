"""Syntax node helpers shared by the analysis passes."""

from typing import Callable, Iterator

from tree_sitter import Node

# Node types whose text is an identifier name
IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "type_identifier",
    }
)

IMPORT_TYPES = frozenset({"import_statement"})

VARIABLE_DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

FUNCTION_DECLARATION_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration"}
)

# Function-like nodes with a body whose parameters are analyzed.
# Type-level signatures (method_signature, function_type, ...) are left out.
FUNCTION_TYPES = FUNCTION_DECLARATION_TYPES | frozenset(
    {
        "function",
        "function_expression",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

JSX_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

# Parents in which a variable declaration stands as its own statement
STATEMENT_CONTAINERS = frozenset(
    {"program", "statement_block", "switch_case", "switch_default"}
)

# TypeScript parameter wrappers and the modifiers that turn them into
# class properties
TS_PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})
TS_PARAMETER_PROPERTY_MODIFIERS = frozenset(
    {"accessibility_modifier", "override_modifier", "readonly"}
)

NodeKey = tuple[int, int, str]


def node_key(node: Node) -> NodeKey:
    """Hashable identity for a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


def walk(node: Node, skip: Callable[[Node], bool] | None = None) -> Iterator[Node]:
    """Yield ``node`` and its descendants in document order.

    Subtrees whose root satisfies ``skip`` are not entered.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if skip is not None and skip(current):
            continue
        yield current
        stack.extend(reversed(current.children))


def ascend(node: Node, predicate: Callable[[Node], bool]) -> Node | None:
    """Return the nearest ancestor-or-self matching ``predicate``."""
    current: Node | None = node
    while current is not None:
        if predicate(current):
            return current
        current = current.parent
    return None


def contains_type(node: Node, types: frozenset[str]) -> bool:
    """Check whether any node in the subtree has one of ``types``."""
    return any(n.type in types for n in walk(node))


def is_exported(node: Node) -> bool:
    """Check whether a declaration is wrapped directly in an export statement."""
    return node.parent is not None and node.parent.type == "export_statement"


def parameter_nodes(function: Node) -> list[Node]:
    """Return the ordered parameter nodes of a function-like node.

    Arrow functions with a single unparenthesized parameter yield that
    identifier.
    """
    params = function.child_by_field_name("parameters")
    if params is None:
        single = function.child_by_field_name("parameter")
        return [single] if single is not None else []
    return [child for child in params.named_children if child.type != "comment"]


def parameter_name_node(param: Node) -> Node | None:
    """Return the identifier a parameter binds, or None for patterns.

    Destructuring patterns, ``this`` parameters and TypeScript parameter
    properties (``constructor(private x)``) bind no simple name.
    """
    match param.type:
        case "identifier":
            return param
        case "assignment_pattern":
            left = param.child_by_field_name("left")
            return left if left is not None and left.type == "identifier" else None
        case "rest_pattern":
            inner = param.named_children[0] if param.named_children else None
            return inner if inner is not None and inner.type == "identifier" else None
        case "required_parameter" | "optional_parameter":
            if any(child.type in TS_PARAMETER_PROPERTY_MODIFIERS for child in param.children):
                return None
            pattern = param.child_by_field_name("pattern")
            return parameter_name_node(pattern) if pattern is not None else None
    return None
