"""Entry points for the import and binding cleanups.

Every operation is a pure function of (source text, file name, settings) and
returns the new text, or None when nothing needs to change.
"""

import logging
from pathlib import Path

from tree_sitter import Node

from jsprune.analysis.declarations import find_unused_variables_and_parameters
from jsprune.analysis.heuristics import DEFAULT_RULES, FunctionExclusionRule, find_unused_functions
from jsprune.analysis.imports import iter_imports, remove_unused_imports as _remove_imports
from jsprune.analysis.nodes import STATEMENT_CONTAINERS, VARIABLE_DECLARATION_TYPES, ascend, node_key
from jsprune.analysis.parameters import plan_unused_parameters
from jsprune.analysis.usage import collect_used_names
from jsprune.config import CleanSettings, VariableAction
from jsprune.edits import (
    UNUSED_FUNCTION_MARKER,
    UNUSED_VARIABLE_MARKER,
    EditPlan,
    EditSpan,
    apply_edits,
    comment_out,
    prefix_identifier,
)
from jsprune.errors import JsPruneError
from jsprune.models.bindings import BindingKind, UnusedBindingRecord
from jsprune.models.results import Finding
from jsprune.parsing import SyntaxTree, is_supported_file, parse_source

logger = logging.getLogger(__name__)


def _variable_comment_span(tree: SyntaxTree, records: list[UnusedBindingRecord]) -> EditSpan | None:
    """Comment out the declaration statement holding ``records``.

    ``records`` are the flagged declarators of one declaration. The statement
    is only commented when every declarator in it is flagged.
    """
    declarator = records[0].node
    declaration = ascend(declarator, lambda n: n.type in VARIABLE_DECLARATION_TYPES)

    if declaration is None:
        # No enclosing let/const/var: comment the declarator alone
        end = declarator.end_byte
        if tree.source[end : end + 1] == b";":
            end += 1
        return comment_out(tree.source, declarator.start_byte, end, UNUSED_VARIABLE_MARKER)

    if declaration.parent is None or declaration.parent.type not in STATEMENT_CONTAINERS:
        logger.debug(
            "Not commenting declaration at %s:%d outside statement position",
            tree.file_name,
            declaration.start_point[0] + 1,
        )
        return None

    declarators = [c for c in declaration.named_children if c.type == "variable_declarator"]
    flagged = {node_key(record.node) for record in records}
    if any(node_key(d) not in flagged for d in declarators):
        logger.debug(
            "Not commenting declaration at %s:%d with used declarators",
            tree.file_name,
            declaration.start_point[0] + 1,
        )
        return None

    end = declaration.end_byte
    if not tree.text(declaration).endswith(";") and tree.source[end : end + 1] == b";":
        end += 1
    return comment_out(tree.source, declaration.start_byte, end, UNUSED_VARIABLE_MARKER)


def _plan_variables(
    tree: SyntaxTree,
    variables: list[UnusedBindingRecord],
    action: VariableAction,
) -> list[EditSpan]:
    if action is VariableAction.PREFIX:
        return [prefix_identifier(r.name_node.start_byte, r.name_node.end_byte, r.name) for r in variables]
    if action is not VariableAction.COMMENT:
        return []

    # One span per declaration statement
    by_declaration: dict[tuple, list[UnusedBindingRecord]] = {}
    for record in variables:
        parent: Node | None = record.node.parent
        key = node_key(parent) if parent is not None else node_key(record.node)
        by_declaration.setdefault(key, []).append(record)

    spans = []
    for records in by_declaration.values():
        try:
            span = _variable_comment_span(tree, records)
        except Exception as e:  # noqa: BLE001
            logger.warning("Skipping variable %s in %s: %s", records[0].name, tree.file_name, e)
            continue
        if span is not None:
            spans.append(span)
    return spans


def _drop_commented(spans: list[EditSpan], comments: list[EditSpan]) -> list[EditSpan]:
    """Drop spans that fall inside a variable comment-out.

    The commented text no longer runs, so edits to parameters or variables
    nested in its initializer are moot.
    """
    kept = []
    for span in spans:
        if any(comment is not span and comment.contains(span) for comment in comments):
            logger.debug("Dropping edit at byte %d inside commented declaration", span.start)
            continue
        kept.append(span)
    return kept


def _plan_functions(
    tree: SyntaxTree,
    functions: list[UnusedBindingRecord],
    action: VariableAction,
    other_spans: list[EditSpan],
) -> list[EditSpan]:
    if action is VariableAction.PREFIX:
        return [prefix_identifier(r.name_node.start_byte, r.name_node.end_byte, r.name) for r in functions]
    if action is not VariableAction.COMMENT:
        return []

    spans = []
    for record in functions:
        span = comment_out(tree.source, record.node.start_byte, record.node.end_byte, UNUSED_FUNCTION_MARKER)
        if any(span.overlaps(other) for other in other_spans):
            # Edits inside the function win over commenting it out
            logger.debug("Keeping function %s with pending inner edits", record.name)
            continue
        spans.append(span)
    return spans


def plan_unused_bindings(
    tree: SyntaxTree,
    settings: CleanSettings,
    rules: tuple[FunctionExclusionRule, ...] = DEFAULT_RULES,
) -> EditPlan:
    """Plan edits for unused variables, functions and parameters.

    Raises:
        OverlappingEditsError: If the planned edits collide.
    """
    used = collect_used_names(tree, settings.implicitly_used)
    variables, parameters = find_unused_variables_and_parameters(tree, used)
    functions = find_unused_functions(tree, used, rules)

    variable_spans = _plan_variables(tree, variables, settings.unused_variable_action)
    spans = variable_spans + plan_unused_parameters(tree, parameters, settings.remove_trailing_parameters)
    if settings.unused_variable_action is VariableAction.COMMENT:
        spans = _drop_commented(spans, variable_spans)
    spans.extend(_plan_functions(tree, functions, settings.unused_variable_action, spans))

    plan = EditPlan(spans)
    plan.validate()
    return plan


def remove_unused_imports(
    source: str,
    file_name: str | Path,
    settings: CleanSettings | None = None,
) -> str | None:
    """Remove unused import bindings.

    Raises:
        ParseFailure: If the source does not parse.
    """
    if not is_supported_file(file_name):
        return None
    settings = settings or CleanSettings()
    tree = parse_source(source, file_name)
    used = collect_used_names(tree, settings.implicitly_used)
    return _remove_imports(tree, used)


def handle_unused_variables(
    source: str,
    file_name: str | Path,
    settings: CleanSettings | None = None,
) -> str | None:
    """Comment out or prefix unused variables and functions, trim parameters.

    Raises:
        ParseFailure: If the source does not parse.
        OverlappingEditsError: If the planned edits collide.
    """
    if not is_supported_file(file_name):
        return None
    settings = settings or CleanSettings()
    tree = parse_source(source, file_name)
    plan = plan_unused_bindings(tree, settings)
    return apply_edits(source, plan)


def clean_all(
    source: str,
    file_name: str | Path,
    settings: CleanSettings | None = None,
    *,
    imports: bool = True,
    variables: bool = True,
) -> str | None:
    """Remove unused imports, then handle unused bindings on the result.

    A failure in one step is logged and does not block the other.
    """
    current = source

    if imports:
        try:
            current = remove_unused_imports(current, file_name, settings) or current
        except JsPruneError as e:
            logger.warning("Could not remove unused imports from %s: %s", file_name, e)

    if variables:
        try:
            current = handle_unused_variables(current, file_name, settings) or current
        except JsPruneError as e:
            logger.warning("Could not handle unused variables in %s: %s", file_name, e)

    return current if current != source else None


def clean_on_save(source: str, file_name: str | Path, settings: CleanSettings) -> str | None:
    """Run the cleanups enabled by the auto-run toggles."""
    if not (settings.auto_remove_unused_imports or settings.auto_handle_unused_variables):
        return None
    return clean_all(
        source,
        file_name,
        settings,
        imports=settings.auto_remove_unused_imports,
        variables=settings.auto_handle_unused_variables,
    )


def _action_for(kind: BindingKind, settings: CleanSettings) -> str:
    if kind is BindingKind.IMPORT:
        return "remove"
    if kind is BindingKind.PARAMETER:
        return "trim" if settings.remove_trailing_parameters else "prefix"
    return settings.unused_variable_action.value


def analyze_source(
    source: str,
    file_name: str | Path,
    settings: CleanSettings | None = None,
) -> list[Finding]:
    """Report the unused bindings behind the cleanups, in source order.

    Raises:
        ParseFailure: If the source does not parse.
    """
    if not is_supported_file(file_name):
        return []
    settings = settings or CleanSettings()
    tree = parse_source(source, file_name)
    used = collect_used_names(tree, settings.implicitly_used)
    path = Path(file_name)

    findings: list[Finding] = []
    for descriptor in iter_imports(tree):
        row, column = descriptor.node.start_point
        for name in descriptor.unused_names(used):
            findings.append(
                Finding(
                    name=name,
                    kind=BindingKind.IMPORT,
                    file=path,
                    line=row + 1,
                    column=column + 1,
                    action=_action_for(BindingKind.IMPORT, settings),
                )
            )

    variables, parameters = find_unused_variables_and_parameters(tree, used)
    functions = find_unused_functions(tree, used)
    for record in [*variables, *parameters, *functions]:
        findings.append(
            Finding(
                name=record.name,
                kind=record.kind,
                file=path,
                line=record.line,
                column=record.column,
                action=_action_for(record.kind, settings),
            )
        )

    findings.sort(key=lambda f: (f.line, f.column))
    return findings
