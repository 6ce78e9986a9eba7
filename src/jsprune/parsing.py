"""Tree-sitter parsing for JavaScript and TypeScript sources."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from jsprune.errors import ParseFailure, UnsupportedLanguageError

logger = logging.getLogger(__name__)

# File extension -> tree-sitter-language-pack grammar name.
# The javascript grammar parses JSX natively; plain .ts needs the grammar
# without JSX so that `<T>expr` casts parse.
LANGUAGE_BY_EXTENSION: dict[str, SupportedLanguage] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
}

SUPPORTED_EXTENSIONS = frozenset(LANGUAGE_BY_EXTENSION)


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed source file.

    All node offsets are byte offsets into ``source``.
    """

    source: bytes
    root: Node
    language: str
    file_name: str = "<source>"

    def text(self, node: Node) -> str:
        """Return the exact source text covered by a node."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def slice(self, start: int, end: int) -> str:
        """Return the source text between two byte offsets."""
        return self.source[start:end].decode("utf-8")


def is_supported_file(file_name: str | PurePath) -> bool:
    """Check whether the file extension is one jsprune analyzes."""
    return PurePath(file_name).suffix.lower() in SUPPORTED_EXTENSIONS


def language_for(file_name: str | PurePath) -> SupportedLanguage:
    """Get the grammar name for a file.

    Raises:
        UnsupportedLanguageError: If the extension is not supported.
    """
    ext = PurePath(file_name).suffix.lower()
    try:
        return LANGUAGE_BY_EXTENSION[ext]
    except KeyError:
        raise UnsupportedLanguageError(f"Not a JavaScript or TypeScript file: {file_name}") from None


@lru_cache(maxsize=None)
def _parser(language: SupportedLanguage) -> Parser:
    logger.debug("Loading tree-sitter grammar %s", language)
    return get_parser(language)


def _first_error(node: Node) -> Node | None:
    """Find the first ERROR or MISSING node below ``node`` in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def parse_source(source: str, file_name: str | PurePath) -> SyntaxTree:
    """Parse a source string with the grammar matching its file name.

    Raises:
        UnsupportedLanguageError: If the extension is not supported.
        ParseFailure: If the parser reports syntax errors.
    """
    language = language_for(file_name)
    data = source.encode("utf-8")
    tree = _parser(language).parse(data)
    root = tree.root_node

    if root.has_error:
        error = _first_error(root) or root
        row, column = error.start_point
        raise ParseFailure(str(file_name), row + 1, column + 1)

    return SyntaxTree(source=data, root=root, language=language, file_name=str(file_name))
