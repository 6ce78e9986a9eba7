"""Unused import removal.

Each top-level import declaration is decomposed into its default, namespace
and named bindings, classified against the used-name set, and turned into the
smallest text replacement that drops the unused parts.
"""

import logging
from typing import Iterator

from tree_sitter import Node

from jsprune.analysis.nodes import IMPORT_TYPES
from jsprune.edits import EditPlan, EditSpan, collapse_blank_lines
from jsprune.models.bindings import ImportDescriptor, NamedSpecifier
from jsprune.parsing import SyntaxTree

logger = logging.getLogger(__name__)


def describe_import(tree: SyntaxTree, node: Node) -> ImportDescriptor | None:
    """Decompose an import statement.

    Returns:
        The descriptor, or None for side-effect imports (``import 'x'``) and
        other forms without an import clause.
    """
    clause = next((child for child in node.named_children if child.type == "import_clause"), None)
    source = node.child_by_field_name("source")
    if clause is None or source is None:
        return None

    descriptor = ImportDescriptor(node=node, clause=clause, module_specifier=tree.text(source))

    for part in clause.named_children:
        match part.type:
            case "identifier":
                descriptor.default = part
                descriptor.default_name = tree.text(part)
            case "namespace_import":
                descriptor.namespace = part
                name = next(c for c in part.named_children if c.type == "identifier")
                descriptor.namespace_name = tree.text(name)
            case "named_imports":
                descriptor.named = part
                descriptor.specifiers = [
                    _describe_specifier(tree, spec)
                    for spec in part.named_children
                    if spec.type == "import_specifier"
                ]

    return descriptor


def _describe_specifier(tree: SyntaxTree, spec: Node) -> NamedSpecifier:
    name = spec.child_by_field_name("name")
    alias = spec.child_by_field_name("alias")
    if alias is not None:
        return NamedSpecifier(
            local=tree.text(alias),
            imported=tree.text(name) if name is not None else None,
            text=tree.text(spec),
            node=spec,
        )
    return NamedSpecifier(local=tree.text(name), imported=None, text=tree.text(spec), node=spec)


def iter_imports(tree: SyntaxTree) -> Iterator[ImportDescriptor]:
    """Yield descriptors for every top-level import with a clause."""
    for child in tree.root.children:
        if child.type not in IMPORT_TYPES:
            continue
        descriptor = describe_import(tree, child)
        if descriptor is not None:
            yield descriptor


def _erase(node: Node) -> EditSpan:
    return EditSpan(node.start_byte, node.end_byte, "")


def _named_only_import(tree: SyntaxTree, descriptor: ImportDescriptor, specifiers: list[NamedSpecifier]) -> EditSpan:
    """Replace the whole declaration with a named-imports-only declaration."""
    names = ", ".join(spec.text for spec in specifiers)
    semicolon = ";" if tree.text(descriptor.node).rstrip().endswith(";") else ""
    return EditSpan(
        descriptor.node.start_byte,
        descriptor.node.end_byte,
        f"import {{ {names} }} from {descriptor.module_specifier}{semicolon}",
    )


def plan_import_edits(tree: SyntaxTree, descriptor: ImportDescriptor, used: set[str]) -> list[EditSpan]:
    """Compute the edits that remove a declaration's unused bindings."""
    default = descriptor.default
    default_used = default is None or descriptor.default_name in used

    if descriptor.named is not None:
        named = descriptor.named
        used_specs = [spec for spec in descriptor.specifiers if spec.local in used]

        if len(used_specs) == len(descriptor.specifiers):
            if default_used:
                return []
            return [_named_only_import(tree, descriptor, descriptor.specifiers)]

        if not used_specs:
            if default is not None and default_used:
                # Drop ", { ... }" after the default binding
                return [EditSpan(default.end_byte, named.end_byte, "")]
            return [_erase(descriptor.node)]

        rebuilt = "{ " + ", ".join(spec.text for spec in used_specs) + " }"
        if default_used:
            return [EditSpan(named.start_byte, named.end_byte, rebuilt)]
        return [_named_only_import(tree, descriptor, used_specs)]

    if descriptor.namespace is not None:
        namespace_used = descriptor.namespace_name in used
        if not namespace_used:
            if default is not None and default_used:
                # Drop ", * as X" after the default binding
                return [EditSpan(default.end_byte, descriptor.namespace.end_byte, "")]
            return [_erase(descriptor.node)]
        if not default_used:
            # Drop "Default, " before the namespace binding
            return [EditSpan(default.start_byte, descriptor.namespace.start_byte, "")]
        return []

    if not default_used:
        return [_erase(descriptor.node)]
    return []


def plan_unused_imports(tree: SyntaxTree, used: set[str]) -> EditPlan:
    """Plan edits for every import declaration in the file.

    A declaration that fails to classify is skipped; the others still get
    their edits.
    """
    plan = EditPlan()
    for child in tree.root.children:
        if child.type not in IMPORT_TYPES:
            continue
        try:
            descriptor = describe_import(tree, child)
            if descriptor is None:
                continue
            plan.extend(plan_import_edits(tree, descriptor, used))
        except Exception as e:  # noqa: BLE001
            row = child.start_point[0] + 1
            logger.warning("Skipping import at %s:%d: %s", tree.file_name, row, e)
    return plan


def remove_unused_imports(tree: SyntaxTree, used: set[str]) -> str | None:
    """Remove unused import bindings from the tree's source.

    Returns:
        The updated text, or None when nothing changes.
    """
    plan = plan_unused_imports(tree, used)

    # Blank-line runs are collapsed file-wide even when no import changes
    original = tree.source.decode("utf-8")
    updated = collapse_blank_lines(plan.apply(tree.source).decode("utf-8"))
    if updated == original:
        return None

    logger.debug("Planned %d import edits for %s", len(plan), tree.file_name)
    return updated
