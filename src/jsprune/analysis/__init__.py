"""Analysis passes for unused binding detection."""

from jsprune.analysis.declarations import find_unused_variables_and_parameters
from jsprune.analysis.heuristics import (
    ComponentRule,
    FunctionExclusionRule,
    HandlerRule,
    collect_exported_names,
    find_unused_functions,
)
from jsprune.analysis.imports import iter_imports, plan_unused_imports, remove_unused_imports
from jsprune.analysis.parameters import plan_parameter_edits, plan_unused_parameters
from jsprune.analysis.usage import collect_declaration_sites, collect_used_names

__all__ = [
    "ComponentRule",
    "FunctionExclusionRule",
    "HandlerRule",
    "collect_declaration_sites",
    "collect_exported_names",
    "collect_used_names",
    "find_unused_functions",
    "find_unused_variables_and_parameters",
    "iter_imports",
    "plan_parameter_edits",
    "plan_unused_imports",
    "plan_unused_parameters",
    "remove_unused_imports",
]
