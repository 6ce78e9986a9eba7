"""Exception types raised by jsprune."""


class JsPruneError(Exception):
    """Base class for all jsprune errors."""


class ParseFailure(JsPruneError):
    """The source could not be parsed cleanly, so it cannot be analyzed."""

    def __init__(self, file_name: str, line: int, column: int) -> None:
        self.file_name = file_name
        self.line = line
        self.column = column
        super().__init__(f"Syntax error in {file_name} at line {line}, column {column}")


class UnsupportedLanguageError(JsPruneError):
    """The file extension is not one of .js, .jsx, .ts, .tsx."""


class OverlappingEditsError(JsPruneError):
    """Two planned edits touch the same text."""

    def __init__(self, first: object, second: object) -> None:
        self.first = first
        self.second = second
        super().__init__(f"Overlapping edits: {first!r} and {second!r}")


class ConfigError(JsPruneError):
    """A configuration value is missing or invalid."""
