"""
Syntax tree traversal and declaration extraction.

This module turns the top-level declarations of one parsed Go file into
Function, Interface and import records. It never parses text itself; it
reads node kinds and byte offsets from the tree-sitter tree and uses the
printer to render declaration headers.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from tree_sitter import Node, Tree

from inspection.config import (
    COMMENT_NODE,
    EMBED_IDENTIFIER,
    EMBED_SELECTOR,
    EMBED_WRAPPER_TYPES,
    FUNCTION_DECLARATION_TYPES,
    GENERIC_TYPE,
    IMPORT_DECLARATION,
    IMPORT_SPEC,
    IMPORT_SPEC_LIST,
    INTERFACE_MEMBER_LIST,
    INTERFACE_TYPE,
    METHOD_DECLARATION,
    METHOD_MEMBER_TYPES,
    RECEIVER_TYPE_WRAPPERS,
    TYPE_DECLARATION,
    TYPE_SPEC_LIST,
    TYPE_SPEC_TYPES,
)
from inspection.errors import RenderError
from inspection.models import (
    FuncOption,
    Function,
    GoFile,
    Interface,
    VisibilityPredicate,
    is_exported,
)
from inspection.parser import package_name
from inspection.printer import DEFAULT_PRINTER, GoPrinter

logger = logging.getLogger(__name__)

# //line, //extern, //export and //word:word comments are tool directives
_DIRECTIVE_RE = re.compile(r"^(?:line |extern |export |[a-z0-9]+:[a-z0-9])")


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text else ""


# ---------------------------------------------------------------------------
# Doc comments
# ---------------------------------------------------------------------------


def is_directive(comment_body: str) -> bool:
    """Check if the text after ``//`` is a tool directive such as ``go:generate``."""
    return bool(_DIRECTIVE_RE.match(comment_body))


def clean_doc_comment(comments: List[str]) -> str:
    """Return the text of a comment group with the comment markers removed.

    Follows Go's comment-group text rules: ``//`` and one following space
    are removed, ``/*``/``*/`` are removed, directive lines are dropped,
    trailing whitespace is stripped from every line, leading and trailing
    blank lines are removed and runs of interior blank lines are collapsed.

    Args:
        comments: Raw comment texts in source order.

    Returns:
        The trimmed documentation text, or "" if nothing remains.
    """
    lines: List[str] = []
    for comment in comments:
        if comment.startswith("//"):
            body = comment[2:]
            if body.startswith(" "):
                body = body[1:]
            elif is_directive(body):
                continue
        elif comment.startswith("/*"):
            body = comment[2:]
            if body.endswith("*/"):
                body = body[:-2]
        else:
            body = comment
        for line in body.split("\n"):
            lines.append(line.rstrip())

    collapsed: List[str] = []
    for line in lines:
        if not line and (not collapsed or not collapsed[-1]):
            continue
        collapsed.append(line)

    return "\n".join(collapsed).strip()


def get_doc_comment(node: Node) -> Tuple[Optional[int], str]:
    """Find the doc comment group directly preceding a declaration.

    The group is the run of comments whose last member ends on the line
    just above the declaration, with no blank line between members. A
    comment sharing a line with the end of an earlier declaration belongs
    to that declaration and ends the group.

    Args:
        node: A top-level declaration node.

    Returns:
        A tuple of (doc_start_byte, text). doc_start_byte is None when the
        declaration has no doc comment.
    """
    group: List[Node] = []
    expected_row = node.start_point.row
    sibling = node.prev_named_sibling

    while sibling is not None and sibling.type == COMMENT_NODE:
        gap = expected_row - sibling.end_point.row
        if gap > 1 or (not group and gap != 1) or gap < 0:
            break
        before = sibling.prev_named_sibling
        if (
            before is not None
            and before.type != COMMENT_NODE
            and before.end_point.row == sibling.start_point.row
        ):
            break
        group.append(sibling)
        expected_row = sibling.start_point.row
        sibling = before

    if not group:
        return None, ""

    group.reverse()
    text = clean_doc_comment([_node_text(c) for c in group])
    return group[0].start_byte, text


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


def receiver_type_name(node: Node) -> str:
    """Return the base type name of a method's receiver (``T`` for ``(t *T)``)."""
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return ""
    for param in receiver.named_children:
        type_node = param.child_by_field_name("type")
        while type_node is not None and type_node.type in RECEIVER_TYPE_WRAPPERS:
            inner = [c for c in type_node.named_children if c.type != COMMENT_NODE]
            type_node = inner[0] if inner else None
        if type_node is not None and type_node.type == GENERIC_TYPE:
            type_node = type_node.child_by_field_name("type")
        if type_node is not None:
            return _node_text(type_node)
    return ""


def function_name(node: Node) -> str:
    name_node = node.child_by_field_name("name")
    return _node_text(name_node) if name_node is not None else ""


def parse_function(
    node: Node,
    source: bytes,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> Optional[Function]:
    """Build a Function from a function or method declaration.

    The declaration is rendered without its body, starting at its doc
    comment when it has one. The doc comment is then cut off by offset:
    ``func keyword start - doc comment start`` bytes are dropped from the
    front of the rendered text.

    Args:
        node: A function_declaration or method_declaration node.
        source: The source buffer the tree was parsed from.
        printer: Renders the body-less declaration.

    Returns:
        The Function, or None if the declaration has no body or cannot be
        rendered.
    """
    name = function_name(node)
    if not name:
        logger.debug("Skipping unnamed declaration at line %d", node.start_point.row + 1)
        return None

    if node.child_by_field_name("body") is None:
        logger.debug("Skipping forward declaration %s at line %d", name, node.start_point.row + 1)
        return None

    doc_start, documentation = get_doc_comment(node)
    if not documentation:
        doc_start = None

    try:
        rendered = printer.render_declaration(node, source, doc_start)
    except RenderError as e:
        logger.debug("Cannot render %s: %s", name, e)
        return None

    doc_offset = node.start_byte - doc_start if doc_start is not None else 0

    return Function(
        name=name,
        signature=rendered[doc_offset:].decode("utf-8"),
        documentation=documentation,
        receiver=receiver_type_name(node) if node.type == METHOD_DECLARATION else "",
    )


def parse_file_funcs(
    tree: Tree,
    source: bytes,
    func_option: FuncOption = FuncOption.BOTH,
    predicate: VisibilityPredicate = is_exported,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> List[Function]:
    """Extract the functions and methods of one file in source order.

    Args:
        tree: The parsed file.
        source: The source buffer.
        func_option: Which functions to keep.
        predicate: Visibility policy used by ``func_option``.
        printer: Renders declaration headers.
    """
    funcs: List[Function] = []
    for child in tree.root_node.named_children:
        if child.type not in FUNCTION_DECLARATION_TYPES:
            continue
        if not func_option.accepts(function_name(child), predicate):
            continue
        fn = parse_function(child, source, printer)
        if fn is not None:
            funcs.append(fn)
    return funcs


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------


def strip_import_quotes(literal: str) -> str:
    """Remove the quotes around an import path literal.

    ``"fmt"`` and ```fmt``` both give ``fmt``; text without a matching pair
    of quotes is returned unchanged.
    """
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "\"`":
        return literal[1:-1]
    return literal


def _iter_import_specs(tree: Tree) -> Iterator[Node]:
    for decl in tree.root_node.named_children:
        if decl.type != IMPORT_DECLARATION:
            continue
        for child in decl.named_children:
            if child.type == IMPORT_SPEC:
                yield child
            elif child.type == IMPORT_SPEC_LIST:
                for spec in child.named_children:
                    if spec.type == IMPORT_SPEC:
                        yield spec


def parse_file_imports(tree: Tree) -> List[str]:
    """Return the import paths of one file in source order, duplicates kept."""
    imports: List[str] = []
    for spec in _iter_import_specs(tree):
        path_node = spec.child_by_field_name("path")
        if path_node is None:
            continue
        imports.append(strip_import_quotes(_node_text(path_node)))
    return imports


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmbeddedIdentifier:
    """An embedded interface named by a plain identifier (``Stringer``)."""

    name: str

    def apply(self, iface: Interface) -> None:
        iface.embedded_interfaces.append(self.name)


@dataclass(frozen=True)
class EmbeddedSelector:
    """An embedded interface from another package (``io.Reader``)."""

    name: str

    def apply(self, iface: Interface) -> None:
        iface.embedded_interfaces.append(self.name)


@dataclass(frozen=True)
class NamedMethod:
    """A method member, rendered as ``Name(params) results``."""

    signature: str

    def apply(self, iface: Interface) -> None:
        iface.methods.append(self.signature)


InterfaceMember = Union[EmbeddedIdentifier, EmbeddedSelector, NamedMethod]


def render_method_signature(member: Node, source: bytes, printer: GoPrinter) -> str:
    """Render a method member as its function type with the name spliced in.

    ``Read`` with type ``func(p []byte) (n int, err error)`` becomes
    ``Read(p []byte) (n int, err error)``.
    """
    name_node = member.child_by_field_name("name")
    params = member.child_by_field_name("parameters")
    if name_node is None or params is None:
        raise RenderError(f"incomplete method at line {member.start_point.row + 1}")

    func_type = "func" + printer.render_node(params, source)
    result = member.child_by_field_name("result")
    if result is not None:
        func_type += " " + printer.render_node(result, source)

    return _node_text(name_node) + func_type[len("func"):]


def _embedded_reference(
    node: Node,
    source: bytes,
    printer: GoPrinter,
) -> Optional[InterfaceMember]:
    if node.type == EMBED_IDENTIFIER:
        return EmbeddedIdentifier(_node_text(node))
    if node.type == EMBED_SELECTOR:
        return EmbeddedSelector(printer.render_node(node, source))
    return None


def classify_interface_member(
    member: Node,
    source: bytes,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> Optional[InterfaceMember]:
    """Classify one member of an interface body.

    Returns:
        EmbeddedIdentifier, EmbeddedSelector or NamedMethod, or None for
        anything else (unions, approximation elements, generic
        instantiations, comments).

    Raises:
        RenderError: If the member cannot be rendered.
    """
    if member.type in METHOD_MEMBER_TYPES:
        return NamedMethod(render_method_signature(member, source, printer))

    if member.type in EMBED_WRAPPER_TYPES:
        terms = [c for c in member.named_children if c.type != COMMENT_NODE]
        if len(terms) != 1:
            return None
        return _embedded_reference(terms[0], source, printer)

    return _embedded_reference(member, source, printer)


def _iter_interface_members(interface_node: Node) -> Iterator[Node]:
    for child in interface_node.named_children:
        if child.type == INTERFACE_MEMBER_LIST:
            yield from child.named_children
        else:
            yield child


def parse_interface(
    name: str,
    interface_node: Node,
    source: bytes,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> Interface:
    """Build an Interface from an interface_type node."""
    iface = Interface(name=name)
    for member in _iter_interface_members(interface_node):
        try:
            classified = classify_interface_member(member, source, printer)
        except RenderError as e:
            logger.debug("Skipping member of interface %s: %s", name, e)
            continue
        if classified is not None:
            classified.apply(iface)
    return iface


def _iter_type_specs(decl: Node) -> Iterator[Node]:
    for child in decl.named_children:
        if child.type in TYPE_SPEC_TYPES:
            yield child
        elif child.type == TYPE_SPEC_LIST:
            yield from _iter_type_specs(child)


def parse_file_interfaces(
    tree: Tree,
    source: bytes,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> List[Interface]:
    """Extract every top-level interface type declared in one file."""
    interfaces: List[Interface] = []
    for decl in tree.root_node.named_children:
        if decl.type != TYPE_DECLARATION:
            continue
        for spec in _iter_type_specs(decl):
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None or type_node.type != INTERFACE_TYPE:
                continue
            interfaces.append(parse_interface(_node_text(name_node), type_node, source, printer))
    return interfaces


# ---------------------------------------------------------------------------
# File level
# ---------------------------------------------------------------------------


def inspect_tree(
    tree: Tree,
    source: bytes,
    file_path: str = "",
    func_option: FuncOption = FuncOption.BOTH,
    predicate: VisibilityPredicate = is_exported,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> GoFile:
    """Run the function, import and interface extractors over one file.

    Args:
        tree: The parsed file.
        source: The source buffer.
        file_path: Path recorded on the result and used in messages.
        func_option: Which functions to keep.
        predicate: Visibility policy.
        printer: Renders declarations.

    Returns:
        A GoFile. Its package is "" if the file has no package clause.
    """
    go_file = GoFile(
        path=file_path,
        package=package_name(tree, file_path, required=False),
        imports=parse_file_imports(tree),
        functions=parse_file_funcs(tree, source, func_option, predicate, printer),
        interfaces=parse_file_interfaces(tree, source, printer),
    )
    logger.debug(
        "Inspected %s: %d functions, %d imports, %d interfaces",
        file_path or "<source>",
        len(go_file.functions),
        len(go_file.imports),
        len(go_file.interfaces),
    )
    return go_file
