"""Tests for edit spans, plans and comment-out rendering."""

import pytest

from jsprune.edits import (
    UNUSED_FUNCTION_MARKER,
    UNUSED_VARIABLE_MARKER,
    EditPlan,
    EditSpan,
    apply_edits,
    collapse_blank_lines,
    comment_out,
    newline_for,
    prefix_identifier,
)
from jsprune.errors import JsPruneError, OverlappingEditsError


def render(source: str, start: int, end: int, marker: str = UNUSED_VARIABLE_MARKER) -> str:
    span = comment_out(source.encode("utf-8"), start, end, marker)
    return apply_edits(source, EditPlan([span]))


class TestEditSpan:
    """Tests for EditSpan."""

    def test_overlaps(self) -> None:
        assert EditSpan(0, 5, "").overlaps(EditSpan(4, 8, ""))
        assert not EditSpan(0, 5, "").overlaps(EditSpan(5, 8, ""))

    def test_contains(self) -> None:
        assert EditSpan(0, 10, "").contains(EditSpan(2, 4, ""))
        assert not EditSpan(2, 4, "").contains(EditSpan(0, 10, ""))


class TestEditPlan:
    """Tests for EditPlan validation and application."""

    def test_applies_back_to_front(self) -> None:
        """Earlier offsets should stay valid while later spans change length."""
        plan = EditPlan([EditSpan(0, 1, "first"), EditSpan(4, 5, "second")])

        assert apply_edits("a b c", plan) == "first b second"

    def test_empty_plan_returns_none(self) -> None:
        assert apply_edits("const a = 1;", EditPlan()) is None

    def test_deletion_and_insertion(self) -> None:
        plan = EditPlan()
        plan.add(EditSpan(0, 4, ""))
        plan.add(EditSpan(9, 9, "!"))

        assert apply_edits("abc def ghi", plan) == "def g!hi"

    def test_byte_offsets_with_multibyte_text(self) -> None:
        """Offsets are byte offsets into the UTF-8 source."""
        source = "const é = 1; const x = 2;"
        start = source.encode("utf-8").index(b"x")
        plan = EditPlan([prefix_identifier(start, start + 1, "x")])

        assert apply_edits(source, plan) == "const é = 1; const _x = 2;"

    def test_overlapping_spans_rejected(self) -> None:
        """A plan with overlapping spans should fail as a whole."""
        plan = EditPlan([EditSpan(0, 10, "// commented"), EditSpan(4, 6, "_x")])

        with pytest.raises(OverlappingEditsError) as exc_info:
            plan.validate()

        assert isinstance(exc_info.value, JsPruneError)
        assert exc_info.value.first == EditSpan(0, 10, "// commented")

    def test_overlap_leaves_source_untouched(self) -> None:
        """No partial edits are applied when the plan is invalid."""
        source = "function f(a, b) { return 1; }"
        plan = EditPlan(
            [
                EditSpan(11, 15, "_a"),  # parameter list rewrite
                EditSpan(14, 15, "_b"),  # prefix inside the same range
                EditSpan(19, 28, ""),
            ]
        )

        with pytest.raises(OverlappingEditsError):
            apply_edits(source, plan)

    def test_identical_insertions_rejected(self) -> None:
        """Two insertions at the same offset have no defined order."""
        plan = EditPlan([EditSpan(3, 3, "a"), EditSpan(3, 3, "b")])

        with pytest.raises(OverlappingEditsError):
            plan.validate()

    def test_adjacent_spans_allowed(self) -> None:
        plan = EditPlan([EditSpan(0, 3, "x"), EditSpan(3, 6, "y")])
        plan.validate()

        assert apply_edits("abcdef", plan) == "xy"


class TestCommentOut:
    """Tests for comment_out."""

    def test_indented_statement(self) -> None:
        """The marker and commented line should keep the indentation."""
        source = "function f() {\n  const config = getConfig();\n}\n"
        start = source.index("const")
        end = source.index(";") + 1

        assert render(source, start, end) == (
            "function f() {\n"
            f"  {UNUSED_VARIABLE_MARKER}\n"
            "  // const config = getConfig();\n"
            "}\n"
        )

    def test_multiline_range(self) -> None:
        """Every line of the range should be commented at the same indent."""
        source = "  const options = {\n    retries: 3,\n  };\n"
        start = source.index("const")
        end = source.index("};") + 2

        assert render(source, start, end) == (
            f"  {UNUSED_VARIABLE_MARKER}\n"
            "  // const options = {\n"
            "  //   retries: 3,\n"
            "  // };\n"
        )

    def test_function_marker(self) -> None:
        source = "function dead() {\n  return 1;\n}\n"

        assert render(source, 0, len(source) - 1, UNUSED_FUNCTION_MARKER) == (
            f"{UNUSED_FUNCTION_MARKER}\n"
            "// function dead() {\n"
            "//   return 1;\n"
            "// }\n"
        )

    def test_code_after_range_stays_live(self) -> None:
        """Code following the range on its last line should not be commented."""
        source = "const unused = 1; run();\n"
        end = source.index(";") + 1

        result = render(source, 0, end)

        assert result.splitlines() == [UNUSED_VARIABLE_MARKER, "// const unused = 1;", " run();"]

    def test_trailing_comment_stays_on_line(self) -> None:
        """A trailing line comment may stay after the commented range."""
        source = "const unused = 1; // note\n"
        end = source.index(";") + 1

        assert render(source, 0, end) == f"{UNUSED_VARIABLE_MARKER}\n// const unused = 1; // note\n"

    def test_crlf_newlines(self) -> None:
        source = "  const unused = 1;\r\nrun();\r\n"
        start = source.index("const")
        end = source.index(";") + 1

        assert render(source, start, end) == (
            f"  {UNUSED_VARIABLE_MARKER}\r\n  // const unused = 1;\r\nrun();\r\n"
        )


class TestTextHelpers:
    """Tests for newline detection and blank-line collapsing."""

    def test_newline_for(self) -> None:
        assert newline_for("a\r\nb") == "\r\n"
        assert newline_for("a\nb") == "\n"

    def test_collapse_blank_lines(self) -> None:
        assert collapse_blank_lines("a\n\n\n\nb\n") == "a\n\nb\n"
        assert collapse_blank_lines("a\n  \n\t\nb") == "a\n\nb"
        assert collapse_blank_lines("a\n\nb") == "a\n\nb"

    def test_collapse_blank_lines_crlf(self) -> None:
        assert collapse_blank_lines("a\r\n\r\n\r\nb") == "a\r\n\r\nb"

    def test_prefix_identifier(self) -> None:
        assert prefix_identifier(3, 8, "value") == EditSpan(3, 8, "_value")
