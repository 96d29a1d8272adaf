"""
Tree-sitter parser initialization and Go file parsing utilities.

This module provides functions to initialize the Go parser, parse source
files and check the resulting trees for syntax errors.
"""

import logging
from typing import Optional, Tuple, Union

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

from inspection.config import ERROR_NODE, PACKAGE_CLAUSE, PACKAGE_IDENTIFIER
from inspection.errors import GoParseError

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
GO_LANGUAGE = Language(tsgo.language())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Go.

    Returns:
        A Parser instance configured with the Go language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"package main\\nfunc main() {}\\n")
    """
    parser = Parser(GO_LANGUAGE)
    logger.debug("Created tree-sitter Go parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of Go source code.

    Args:
        source: UTF-8 encoded bytes of Go source code.

    Returns:
        A Tree object representing the parsed AST. Syntax errors do not
        raise here; use ``check_syntax`` for that.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"package foo")
        >>> tree.root_node.type
        'source_file'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    if tree.root_node.has_error:
        logger.debug("Parsed tree contains syntax errors")

    logger.debug("Parsed %d bytes of Go code", len(source))
    return tree


def check_encoding(source: bytes, file_path: str = "") -> None:
    """Reject source that is not valid UTF-8, as the Go compiler does.

    Raises:
        GoParseError: Located at the first offending byte.
    """
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        line_start = source.rfind(b"\n", 0, e.start) + 1
        line = source.count(b"\n", 0, e.start) + 1
        column = e.start - line_start + 1
        logger.error("Illegal UTF-8 encoding in %s at %d:%d", file_path or "<source>", line, column)
        raise GoParseError(file_path, line, column, "illegal UTF-8 encoding") from e


def parse_file(
    file_path: str,
    source: Optional[Union[bytes, str]] = None,
) -> Tuple[Tree, bytes]:
    """Parse a Go source file.

    Args:
        file_path: Path to the .go file. Only used for reading and
            messages when ``source`` is given.
        source: Optional source text; when provided the file is not read.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        GoParseError: If the source is not valid UTF-8.
    """
    if source is None:
        try:
            with open(file_path, "rb") as f:
                source_bytes = f.read()
        except FileNotFoundError:
            logger.error("File not found: %s", file_path)
            raise
        except OSError as e:
            logger.error("Error reading file %s: %s", file_path, e)
            raise
    elif isinstance(source, str):
        source_bytes = source.encode("utf-8")
    else:
        source_bytes = source

    check_encoding(source_bytes, file_path)
    tree = parse_bytes(source_bytes)
    logger.debug("Parsed file: %s", file_path or "<source>")
    return tree, source_bytes


def _iter_nodes(node: Node):
    yield node
    for child in node.children:
        yield from _iter_nodes(child)


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and missing nodes in a tree."""
    if not tree.root_node.has_error:
        return 0
    return sum(
        1 for node in _iter_nodes(tree.root_node)
        if node.type == ERROR_NODE or node.is_missing
    )


def first_error_node(node: Node) -> Optional[Node]:
    """Return the first ERROR or missing node below ``node`` in source order."""
    if node.type == ERROR_NODE or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error_node(child)
        if found is not None:
            return found
    return None


def check_syntax(tree: Tree, file_path: str, strict: bool = True) -> int:
    """Check a parsed tree for syntax errors.

    Args:
        tree: The parsed tree.
        file_path: Path used in messages.
        strict: Raise on the first error instead of logging it.

    Returns:
        The number of error nodes found.

    Raises:
        GoParseError: In strict mode, if the tree contains errors.
    """
    if not tree.root_node.has_error:
        return 0

    error_count = count_error_nodes(tree)
    node = first_error_node(tree.root_node) or tree.root_node
    line = node.start_point.row + 1
    column = node.start_point.column + 1
    detail = "missing token" if node.is_missing else "syntax error"

    if strict:
        raise GoParseError(file_path, line, column, detail)

    logger.warning(
        "File %s contains syntax errors (%d error nodes, first at %d:%d)",
        file_path,
        error_count,
        line,
        column,
    )
    return error_count


def package_name(tree: Tree, file_path: str = "", required: bool = True) -> str:
    """Return the name declared by the file's package clause.

    Args:
        tree: The parsed tree.
        file_path: Path used in error messages.
        required: Raise when the clause is missing; otherwise return "".

    Raises:
        GoParseError: If ``required`` and the file has no package clause.
    """
    for child in tree.root_node.named_children:
        if child.type != PACKAGE_CLAUSE:
            continue
        for part in child.named_children:
            if part.type == PACKAGE_IDENTIFIER and part.text:
                return part.text.decode("utf-8")
    if required:
        raise GoParseError(file_path, 1, 1, "expected 'package' clause")
    return ""
