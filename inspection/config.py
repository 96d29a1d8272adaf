"""
Configuration constants for Go syntax tree inspection.

Defines the tree-sitter-go node type strings the extractors look for.
Both the current grammar (``method_elem``/``type_elem``) and the older
one (``method_spec``/``constraint_elem``) are listed.
"""

from typing import Set

PACKAGE_CLAUSE: str = "package_clause"
PACKAGE_IDENTIFIER: str = "package_identifier"

# Declarations we turn into Function records
FUNCTION_DECLARATION_TYPES: Set[str] = {
    "function_declaration",
    "method_declaration",
}
METHOD_DECLARATION: str = "method_declaration"

# Receiver type wrappers unwrapped to reach the base type name
RECEIVER_TYPE_WRAPPERS: Set[str] = {
    "pointer_type",
    "parenthesized_type",
}
GENERIC_TYPE: str = "generic_type"

# Type literals whose opening bracket is spaced from a preceding name
SLICE_TYPES: Set[str] = {
    "slice_type",
    "array_type",
    "implicit_length_array_type",
}

IMPORT_DECLARATION: str = "import_declaration"
IMPORT_SPEC: str = "import_spec"
IMPORT_SPEC_LIST: str = "import_spec_list"

TYPE_DECLARATION: str = "type_declaration"
TYPE_SPEC_TYPES: Set[str] = {
    "type_spec",
    "type_alias",
}
# Older grammars wrap grouped specs in a list node
TYPE_SPEC_LIST: str = "type_spec_list"

INTERFACE_TYPE: str = "interface_type"

# Named interface members
METHOD_MEMBER_TYPES: Set[str] = {
    "method_elem",
    "method_spec",
}

# Nodes that wrap a bare type reference inside an interface
EMBED_WRAPPER_TYPES: Set[str] = {
    "type_elem",
    "constraint_elem",
}

# Older grammars group interface members in a list node
INTERFACE_MEMBER_LIST: str = "method_spec_list"

# Embedded type references we recognise
EMBED_IDENTIFIER: str = "type_identifier"
EMBED_SELECTOR: str = "qualified_type"

COMMENT_NODE: str = "comment"
ERROR_NODE: str = "ERROR"

# Go source file extension and test file suffix
GO_EXTENSION: str = ".go"
TEST_FILE_SUFFIX: str = "_test.go"

# Subtree holding non-library entry points, skipped by default
DEFAULT_RESERVED_SUBTREE: str = "cmd"

# Directory walk policy defaults
DEFAULT_IGNORE_TESTS: bool = True
DEFAULT_STRICT_PARSE: bool = True
