"""Source file discovery with gitignore-style exclusion.

Patterns come from three places, matched together with pathspec:
built-in excludes for JS tooling output, the project's ``.gitignore``, and
the ``exclude`` list from configuration.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import pathspec

from jsprune.parsing import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

# Dependency, VCS and build output directories, plus generated bundles
DEFAULT_EXCLUDES = [
    "node_modules",
    "bower_components",
    ".git",
    "dist",
    "build",
    "out",
    "coverage",
    ".next",
    ".nuxt",
    ".turbo",
    ".cache",
    "*.min.js",
    "*.bundle.js",
    "*.d.ts",
]


@dataclass(frozen=True)
class PatternSource:
    """A named group of gitignore-style patterns."""

    origin: str  # "defaults", "config" or a file path
    patterns: tuple[str, ...]


def read_ignore_file(path: Path) -> PatternSource | None:
    """Read patterns from an ignore file, or None if it is missing or unreadable."""
    if not path.is_file():
        return None
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Ignoring unreadable %s: %s", path, e)
        return None

    stripped = (line.strip() for line in lines)
    patterns = tuple(line for line in stripped if line and not line.startswith("#"))
    return PatternSource(str(path), patterns)


class FileExcluder:
    """Decides which files under a project root are left out of analysis."""

    def __init__(
        self,
        project_root: Path,
        include_ignored: bool = False,
        extra_excludes: list[str] | None = None,
    ) -> None:
        """Set up exclusion for a project.

        Args:
            project_root: Directory that patterns are relative to.
            include_ignored: Bypass every pattern and analyze all files.
            extra_excludes: Configured patterns added after the others.
        """
        self.project_root = project_root
        self.include_ignored = include_ignored
        self._sources: list[PatternSource] = []

        if not include_ignored:
            self._sources.append(PatternSource("defaults", tuple(DEFAULT_EXCLUDES)))
            gitignore = read_ignore_file(project_root / ".gitignore")
            if gitignore is not None:
                self._sources.append(gitignore)
            if extra_excludes:
                self._sources.append(PatternSource("config", tuple(extra_excludes)))

        self._matcher = pathspec.PathSpec.from_lines("gitignore", self.patterns)

    @property
    def sources(self) -> list[str]:
        """Where the active patterns came from."""
        return [source.origin for source in self._sources]

    @property
    def patterns(self) -> list[str]:
        """Every active pattern, in source order."""
        return [pattern for source in self._sources for pattern in source.patterns]

    def should_exclude(self, file_path: Path) -> bool:
        """Check a file against the active patterns.

        Files outside the project root are never excluded.
        """
        if not self._sources:
            return False
        try:
            relative = file_path.relative_to(self.project_root)
        except ValueError:
            return False

        if self._matcher.match_file(relative.as_posix()):
            return True
        # Directory names alone, so "dist" also excludes "dist/app.js"
        return any(self._matcher.match_file(part) for part in relative.parts[:-1])


def iter_source_files(path: Path, excluder: FileExcluder) -> Iterator[Path]:
    """Yield the JS/TS files to analyze under ``path``, sorted.

    An explicitly named file is yielded when its extension is supported, even
    if a pattern would exclude it.
    """
    if path.is_file():
        if path.suffix.lower() in SUPPORTED_EXTENSIONS:
            yield path
        return

    for candidate in sorted(path.rglob("*")):
        if candidate.suffix.lower() not in SUPPORTED_EXTENSIONS or not candidate.is_file():
            continue
        if excluder.should_exclude(candidate):
            logger.debug("Excluded %s", candidate)
            continue
        yield candidate
