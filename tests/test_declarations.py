"""Tests for unused variable and parameter detection."""

from textwrap import dedent

from jsprune.analysis.declarations import find_unused_variables_and_parameters, is_intentionally_unused
from jsprune.analysis.usage import collect_used_names
from jsprune.models.bindings import BindingKind
from jsprune.parsing import parse_source


def find(source: str, file_name: str = "test.js"):
    tree = parse_source(dedent(source), file_name)
    return find_unused_variables_and_parameters(tree, collect_used_names(tree))


def names(records) -> list[str]:
    return [record.name for record in records]


class TestIntentionallyUnused:
    """Tests for the underscore convention."""

    def test_underscore_prefix(self) -> None:
        assert is_intentionally_unused("_unused")
        assert is_intentionally_unused("_")
        assert not is_intentionally_unused("value_")


class TestUnusedVariables:
    """Tests for unused variable detection."""

    def test_finds_unused_variable(self) -> None:
        """Should report a declared variable with no references."""
        variables, _ = find(
            """\
            const data = fetchData();
            const config = getConfig();
            console.log(data);
            """
        )

        assert names(variables) == ["config"]
        assert variables[0].kind is BindingKind.VARIABLE
        assert variables[0].line == 2
        assert variables[0].column == 7

    def test_skips_underscore_variables(self) -> None:
        """Underscore-prefixed variables should never be reported."""
        variables, _ = find("const _tmp = compute();\n")

        assert variables == []

    def test_skips_destructuring(self) -> None:
        """Destructured bindings should be left alone."""
        variables, _ = find("const { a, b } = load();\nconst [c] = list();\n")

        assert variables == []

    def test_skips_exported_variables(self) -> None:
        """Exported declarations should count as used."""
        variables, _ = find("export const API_URL = '/api';\nexport let counter = 0;\n")

        assert variables == []

    def test_finds_nested_variables(self) -> None:
        """Should look inside function bodies."""
        variables, _ = find(
            """\
            export function run() {
              let temp = 1;
              return 2;
            }
            """
        )

        assert names(variables) == ["temp"]

    def test_var_declarations(self) -> None:
        """Should handle var declarations."""
        variables, _ = find("var legacy = 1;\n")

        assert names(variables) == ["legacy"]

    def test_source_order(self) -> None:
        """Records should come back in source order."""
        variables, _ = find("const b = 1;\nconst a = 2;\nconst c = 3;\n")

        assert names(variables) == ["b", "a", "c"]


class TestUnusedParameters:
    """Tests for unused parameter detection."""

    def test_finds_unused_parameters(self) -> None:
        """Should report parameters never referenced."""
        _, parameters = find(
            "function processUser(userId, userName, userRole, userAge) { console.log(userName); }\n"
        )

        assert names(parameters) == ["userId", "userRole", "userAge"]
        assert all(p.kind is BindingKind.PARAMETER for p in parameters)
        assert all(p.owner is not None and p.owner.type == "function_declaration" for p in parameters)

    def test_arrow_function_parameters(self) -> None:
        """Should analyze arrow functions, parenthesized or not."""
        _, parameters = find("export const f = (a, b) => a;\nexport const g = x => 1;\n")

        assert names(parameters) == ["b", "x"]

    def test_default_and_rest_parameters(self) -> None:
        """Should see through default values and rest elements."""
        _, parameters = find("export function f(a = 1, ...rest) { return 0; }\n")

        assert names(parameters) == ["a", "rest"]

    def test_skips_underscore_and_destructured_parameters(self) -> None:
        """Underscore and pattern parameters should not be reported."""
        _, parameters = find("export function f(_event, { id }) { return 0; }\n")

        assert parameters == []

    def test_method_parameters(self) -> None:
        """Should analyze class method parameters."""
        _, parameters = find(
            """\
            export class Store {
              update(key, value) {
                return key;
              }
            }
            """
        )

        assert names(parameters) == ["value"]
        assert parameters[0].owner.type == "method_definition"

    def test_typescript_parameters(self) -> None:
        """Should read names through TypeScript annotations."""
        _, parameters = find(
            "export function f(a: number, b?: string): number { return a; }\n",
            "mod.ts",
        )

        assert names(parameters) == ["b"]

    def test_typescript_parameter_properties_skipped(self) -> None:
        """Constructor parameter properties should count as used."""
        _, parameters = find(
            """\
            export class Service {
              constructor(private readonly client: Client, unused: number) {}
            }
            """,
            "service.ts",
        )

        assert names(parameters) == ["unused"]

    def test_type_signatures_skipped(self) -> None:
        """Parameters of bodiless signatures should not be reported."""
        _, parameters = find(
            """\
            export interface Handler {
              handle(request: Request, context: Context): void;
            }
            export type Fn = (value: number) => void;
            """,
            "types.ts",
        )

        assert parameters == []

    def test_name_collision_hides_unused_parameter(self) -> None:
        """A same-named reference elsewhere keeps the parameter (known limitation)."""
        _, parameters = find(
            """\
            export function first(value) { return 1; }
            export function second(value) { return value; }
            """
        )

        assert parameters == []
