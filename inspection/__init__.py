"""
Go package inspection engine.

Tree-sitter-based Go source parser and metadata extractor.
Extracts functions with their signatures and doc comments, imports and
interface declarations, and merges them into per-package records.
"""

from inspection.models import FuncOption, Function, GoFile, Interface, Package, is_exported
from inspection.errors import GoParseError, InspectError, RenderError, TraversalError
from inspection.parser import create_parser, parse_file, parse_bytes, count_error_nodes, check_syntax
from inspection.printer import GoPrinter
from inspection.traversal import (
    parse_function,
    parse_file_funcs,
    parse_file_imports,
    parse_file_interfaces,
    inspect_tree,
)
from inspection.merge import merge_files, merge_into_registry
from inspection.extractor import (
    new_file,
    parse_dir,
    parse_packages_from_dir,
    inspect_path,
    discover_go_files,
    ExtractionStats,
)
from inspection.encoding import encode_packages, write_packages_json, format_interfaces

__all__ = [
    # Data models
    "FuncOption",
    "Function",
    "GoFile",
    "Interface",
    "Package",
    "is_exported",
    "ExtractionStats",
    # Errors
    "InspectError",
    "GoParseError",
    "RenderError",
    "TraversalError",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    "check_syntax",
    "GoPrinter",
    # Per-file extraction
    "parse_function",
    "parse_file_funcs",
    "parse_file_imports",
    "parse_file_interfaces",
    "inspect_tree",
    # Merging
    "merge_files",
    "merge_into_registry",
    # High-level orchestration
    "new_file",
    "parse_dir",
    "parse_packages_from_dir",
    "inspect_path",
    "discover_go_files",
    # Output
    "encode_packages",
    "write_packages_json",
    "format_interfaces",
]
