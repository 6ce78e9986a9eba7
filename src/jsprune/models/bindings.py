"""Data models for bindings found during analysis."""

from dataclasses import dataclass, field
from enum import Enum

from tree_sitter import Node


class BindingKind(Enum):
    """Kinds of bindings jsprune reports."""

    IMPORT = "import"
    VARIABLE = "variable"
    PARAMETER = "parameter"
    FUNCTION = "function"


@dataclass
class UnusedBindingRecord:
    """A binding whose name is never referenced."""

    kind: BindingKind
    name: str
    node: Node  # variable_declarator, parameter or function_declaration
    name_node: Node  # the identifier that declares the name
    owner: Node | None = None  # enclosing function, for parameters

    @property
    def line(self) -> int:
        return self.name_node.start_point[0] + 1

    @property
    def column(self) -> int:
        return self.name_node.start_point[1] + 1


@dataclass
class NamedSpecifier:
    """One entry of a named import list, e.g. ``useState`` or ``a as b``."""

    local: str
    imported: str | None  # source name when aliased
    text: str  # verbatim specifier text
    node: Node


@dataclass
class ImportDescriptor:
    """An import declaration decomposed into its bindings."""

    node: Node  # import_statement
    clause: Node  # import_clause
    module_specifier: str  # verbatim, quotes included
    default: Node | None = None
    namespace: Node | None = None  # namespace_import
    named: Node | None = None  # named_imports
    specifiers: list[NamedSpecifier] = field(default_factory=list)
    default_name: str | None = None
    namespace_name: str | None = None

    @property
    def local_names(self) -> list[str]:
        """All names this declaration binds, in source order."""
        names: list[str] = []
        if self.default_name:
            names.append(self.default_name)
        if self.namespace_name:
            names.append(self.namespace_name)
        names.extend(spec.local for spec in self.specifiers)
        return names

    def unused_names(self, used: set[str]) -> list[str]:
        """Bound names absent from the used set."""
        return [name for name in self.local_names if name not in used]
