"""
Canonical re-printer for Go syntax tree nodes.

tree-sitter has no pretty printer, so this module rebuilds text from the
leaf tokens of a node: comments are dropped and the spacing between two
tokens is decided by their kinds, gofmt style, so differently spaced
declarations print the same. Multi-line parameter lists come out on one
line.
"""

import logging
from typing import Iterator, List, Optional

from tree_sitter import Node

from inspection.config import COMMENT_NODE, ERROR_NODE, METHOD_DECLARATION, SLICE_TYPES
from inspection.errors import RenderError

logger = logging.getLogger(__name__)

# Nodes printed verbatim (their children are not tokens we re-space)
ATOMIC_NODE_TYPES = {
    "interpreted_string_literal",
    "raw_string_literal",
    "rune_literal",
}

_NO_SPACE_AFTER = {"(", "[", "]", "{", ".", "...", "*", "~"}
_NO_SPACE_BEFORE = {")", "]", "}", ",", "."}
_SPACE_AFTER = {",", ")"}
# Prefix tokens spaced from a preceding name: "s *T", "args ...T", "T ~int"
_SPACED_AFTER_WORD = {"*", "...", "~"}
_CLOSERS = {")", "]"}


def _is_word(text: str) -> bool:
    """Identifiers, keywords and literals."""
    return text[0].isalnum() or text[0] in "_\"`'"


def _needs_space(prev: Node, prev_text: str, token: Node, text: str, gap: bool) -> bool:
    """Decide whether one space separates two adjacent tokens."""
    if prev_text in _NO_SPACE_AFTER or text in _NO_SPACE_BEFORE:
        return False
    if prev_text in _SPACE_AFTER or "|" in (prev_text, text):
        return True
    if text == "(":
        # Only the receiver list is spaced from "func"
        return prev_text == "func" and prev.parent is not None and prev.parent.type == METHOD_DECLARATION
    if text == "[":
        return token.parent is not None and token.parent.type in SLICE_TYPES and _is_word(prev_text)
    if prev_text == "<-":
        return text != "chan"
    if text == "<-":
        return _is_word(prev_text) and prev_text != "chan"
    if _is_word(prev_text):
        return _is_word(text) or text in _SPACED_AFTER_WORD
    return gap


class GoPrinter:
    """Renders nodes of a Go syntax tree back to canonical source text."""

    def iter_tokens(self, node: Node, start: int, end: int) -> Iterator[Node]:
        """Yield the leaf tokens of ``node`` that lie within ``[start, end)``.

        Raises:
            RenderError: If the range contains an ERROR or missing node.
        """
        if node.end_byte <= start or node.start_byte >= end:
            return
        if node.type == ERROR_NODE or node.is_missing:
            raise RenderError(
                f"cannot render {node.type} at line {node.start_point.row + 1}"
            )
        if node.type == COMMENT_NODE:
            return
        if node.child_count == 0 or node.type in ATOMIC_NODE_TYPES:
            yield node
            return
        for child in node.children:
            yield from self.iter_tokens(child, start, end)

    def render_range(self, node: Node, source: bytes, start: int, end: int) -> str:
        """Render the part of ``node`` between two byte offsets."""
        parts: List[str] = []
        prev: Optional[Node] = None
        prev_text = ""

        for token in self.iter_tokens(node, start, end):
            try:
                text = source[token.start_byte:token.end_byte].decode("utf-8")
            except UnicodeDecodeError as e:
                raise RenderError(f"invalid UTF-8 in token at byte {token.start_byte}") from e
            text = text.strip()
            if not text:
                continue

            if prev is not None:
                if text in _CLOSERS and prev_text == ",":
                    parts.pop()
                elif _needs_space(prev, prev_text, token, text, token.start_byte > prev.end_byte):
                    parts.append(" ")
            parts.append(text)
            prev, prev_text = token, text

        return "".join(parts)

    def render_node(self, node: Node, source: bytes) -> str:
        """Render a whole node."""
        return self.render_range(node, source, node.start_byte, node.end_byte)

    def render_declaration(
        self,
        node: Node,
        source: bytes,
        doc_start: Optional[int] = None,
    ) -> bytes:
        """Render a function or method declaration without its body.

        The output starts at ``doc_start`` when given: the doc comment is
        emitted verbatim up to the ``func`` keyword, followed by the
        canonical header. Callers slice the comment off by offset.

        Args:
            node: A function_declaration or method_declaration node.
            source: The source buffer the node was parsed from.
            doc_start: Byte offset of the doc comment, if any.

        Returns:
            The rendered declaration as UTF-8 bytes.

        Raises:
            RenderError: If the header cannot be rendered.
        """
        body = node.child_by_field_name("body")
        end = body.start_byte if body is not None else node.end_byte

        header = self.render_range(node, source, node.start_byte, end)
        if not header:
            raise RenderError(f"empty declaration at line {node.start_point.row + 1}")

        leading = b""
        if doc_start is not None and doc_start < node.start_byte:
            leading = source[doc_start:node.start_byte]
        return leading + header.encode("utf-8")


DEFAULT_PRINTER = GoPrinter()
