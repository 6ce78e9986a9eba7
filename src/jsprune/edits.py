"""Edit spans, plan validation and back-to-front text patching."""

import logging
import re
from dataclasses import dataclass, field

from jsprune.errors import OverlappingEditsError

logger = logging.getLogger(__name__)

UNUSED_VARIABLE_MARKER = "// TODO: Unused variable"
UNUSED_FUNCTION_MARKER = "// TODO: Unused function"
COMMENT_PREFIX = "// "

_BLANK_LINE_RUN = re.compile(r"\r?\n\s*\n\s*\n")


@dataclass(frozen=True)
class EditSpan:
    """Replace ``source[start:end]`` (byte offsets) with ``replacement``."""

    start: int
    end: int
    replacement: str

    def contains(self, other: "EditSpan") -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "EditSpan") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass
class EditPlan:
    """An ordered collection of non-overlapping edit spans."""

    spans: list[EditSpan] = field(default_factory=list)

    def add(self, span: EditSpan) -> None:
        self.spans.append(span)

    def extend(self, spans: list[EditSpan]) -> None:
        self.spans.extend(spans)

    def is_empty(self) -> bool:
        return not self.spans

    def __len__(self) -> int:
        return len(self.spans)

    def validate(self) -> None:
        """Reject plans whose spans overlap.

        Raises:
            OverlappingEditsError: On the first overlapping pair.
        """
        ordered = sorted(self.spans, key=lambda s: (s.start, s.end))
        for previous, current in zip(ordered, ordered[1:]):
            if current.start < previous.end or (
                current.start == previous.start and current.end == previous.end
            ):
                raise OverlappingEditsError(previous, current)

    def apply(self, source: bytes) -> bytes:
        """Apply every span back-to-front so earlier offsets stay valid."""
        self.validate()
        result = source
        for span in sorted(self.spans, key=lambda s: s.start, reverse=True):
            result = result[: span.start] + span.replacement.encode("utf-8") + result[span.end :]
        return result


def apply_edits(source: str, plan: EditPlan) -> str | None:
    """Apply a plan to source text.

    Returns:
        The patched text, or None when the plan is empty.
    """
    if plan.is_empty():
        return None
    return plan.apply(source.encode("utf-8")).decode("utf-8")


def newline_for(text: str) -> str:
    """Return the newline style used by a source text."""
    return "\r\n" if "\r\n" in text else "\n"


def collapse_blank_lines(text: str) -> str:
    """Collapse every run of two or more blank lines to a single blank line."""
    newline = newline_for(text)
    return _BLANK_LINE_RUN.sub(newline * 2, text)


def comment_out(source: bytes, start: int, end: int, marker: str) -> EditSpan:
    """Build a span that comments out ``source[start:end]`` line by line.

    The marker line takes the place of the range; each original line follows
    with a ``// `` prefix, re-indented to the range's indentation. When code
    follows the range on its last line, a line break keeps it uncommented.
    """
    newline = "\r\n" if b"\r\n" in source else "\n"
    line_start = source.rfind(b"\n", 0, start) + 1
    leading = source[line_start:start].decode("utf-8")
    indent = leading if not leading.strip() else ""

    lines = source[start:end].decode("utf-8").split("\n")
    commented = [f"{indent}{COMMENT_PREFIX}{lines[0]}"]
    for line in lines[1:]:
        if indent and line.startswith(indent):
            commented.append(f"{indent}{COMMENT_PREFIX}{line[len(indent):]}")
        else:
            commented.append(f"{COMMENT_PREFIX}{line}")

    replacement = marker + newline + "\n".join(commented)

    line_end = source.find(b"\n", end)
    rest = source[end : line_end if line_end != -1 else len(source)].decode("utf-8").strip()
    if rest and not rest.startswith("//"):
        replacement += newline + indent

    return EditSpan(start, end, replacement)


def prefix_identifier(start: int, end: int, name: str) -> EditSpan:
    """Build a span that renames an identifier with a leading underscore."""
    return EditSpan(start, end, f"_{name}")
