"""
High-level orchestrator for Go package inspection.

This module provides the main entry points for inspecting single files,
single directories (one package compilation unit each) and entire
directory trees folded into a registry keyed by package name.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Union

from core.structured_logging import directory_scope
from inspection.config import (
    DEFAULT_IGNORE_TESTS,
    DEFAULT_RESERVED_SUBTREE,
    DEFAULT_STRICT_PARSE,
    GO_EXTENSION,
    TEST_FILE_SUFFIX,
)
from inspection.errors import GoParseError, InspectError, TraversalError
from inspection.merge import merge_files, merge_into_registry
from inspection.models import FuncOption, GoFile, Package, VisibilityPredicate, is_exported
from inspection.parser import check_syntax, parse_file
from inspection.printer import DEFAULT_PRINTER, GoPrinter
from inspection.traversal import inspect_tree

logger = logging.getLogger(__name__)


@dataclass
class FileInspectionDiagnostics:
    """Per-file inspection result plus parse diagnostics."""

    go_file: GoFile
    parse_error_count: int


class ExtractionStats:
    """Statistics for an inspection run."""

    def __init__(self):
        self.directories_visited = 0
        self.files_parsed = 0
        self.packages = 0
        self.functions = 0
        self.interfaces = 0
        self.parse_errors = 0

    def record_package(self, package: Package) -> None:
        self.packages += 1
        self.functions += len(package.funcs)
        self.interfaces += len(package.interfaces)

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "directories_visited": self.directories_visited,
            "files_parsed": self.files_parsed,
            "packages": self.packages,
            "functions": self.functions,
            "interfaces": self.interfaces,
            "parse_errors": self.parse_errors,
        }

    def __str__(self) -> str:
        return (
            f"ExtractionStats(dirs={self.directories_visited}, "
            f"files={self.files_parsed}, packages={self.packages}, "
            f"functions={self.functions}, interfaces={self.interfaces}, "
            f"parse_errors={self.parse_errors})"
        )


def is_test_file(file_name: str) -> bool:
    """Check if a file name follows the Go test file convention."""
    return file_name.endswith(TEST_FILE_SUFFIX)


def _inspect_file_with_diagnostics(
    file_path: str,
    source: Optional[Union[bytes, str]],
    func_option: FuncOption,
    strict: bool,
    predicate: VisibilityPredicate,
    printer: GoPrinter,
) -> FileInspectionDiagnostics:
    tree, source_bytes = parse_file(file_path, source)
    parse_error_count = check_syntax(tree, file_path, strict=strict)
    go_file = inspect_tree(
        tree,
        source_bytes,
        file_path=file_path,
        func_option=func_option,
        predicate=predicate,
        printer=printer,
    )
    return FileInspectionDiagnostics(go_file=go_file, parse_error_count=parse_error_count)


def new_file(
    file_path: str,
    source: Optional[Union[bytes, str]] = None,
    func_option: FuncOption = FuncOption.BOTH,
    strict: bool = DEFAULT_STRICT_PARSE,
    predicate: VisibilityPredicate = is_exported,
    printer: GoPrinter = DEFAULT_PRINTER,
) -> GoFile:
    """Inspect a single Go file.

    Args:
        file_path: Path to the file. Only used for messages when ``source``
            is given.
        source: Optional source text to use instead of reading the file.
        func_option: Which functions to keep.
        strict: Raise GoParseError on syntax errors instead of logging them.
        predicate: Visibility policy.
        printer: Renders declarations.

    Returns:
        The file's package name, imports, functions and interfaces.

    Raises:
        FileNotFoundError: If the file does not exist and no source is given.
        GoParseError: In strict mode, if the file has syntax errors.

    Example:
        >>> go_file = new_file("client.go")
        >>> [f.name for f in go_file.functions if f.is_exported]
    """
    diagnostics = _inspect_file_with_diagnostics(
        file_path, source, func_option, strict, predicate, printer
    )
    return diagnostics.go_file


def discover_go_files(directory: str, ignore_tests: bool = DEFAULT_IGNORE_TESTS) -> List[str]:
    """List the Go files directly inside one directory, sorted by name.

    Args:
        directory: Directory to list (not recursed).
        ignore_tests: Leave out ``*_test.go`` files.

    Returns:
        Absolute paths of the selected files.
    """
    directory = os.path.abspath(directory)
    go_files = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if not entry.is_file() or not entry.name.endswith(GO_EXTENSION):
                continue
            if ignore_tests and is_test_file(entry.name):
                continue
            go_files.append(entry.path)
    return sorted(go_files)


def group_by_package(files: Iterable[GoFile]) -> Dict[str, List[GoFile]]:
    """Group per-file results by package clause, in order of first appearance."""
    groups: Dict[str, List[GoFile]] = {}
    for go_file in files:
        groups.setdefault(go_file.package, []).append(go_file)
    return groups


def parse_dir(
    directory: str,
    ignore_tests: bool = DEFAULT_IGNORE_TESTS,
    func_option: FuncOption = FuncOption.BOTH,
    strict: bool = DEFAULT_STRICT_PARSE,
    predicate: VisibilityPredicate = is_exported,
    printer: GoPrinter = DEFAULT_PRINTER,
    stats: Optional[ExtractionStats] = None,
) -> Dict[str, Package]:
    """Inspect one directory as a package compilation unit.

    Every selected file is parsed, files are grouped by their package
    clause (a directory may hold ``foo`` and ``foo_test``) and each group
    is merged into one Package.

    Returns:
        Packages found in the directory, keyed by name.

    Raises:
        OSError: If a file cannot be read.
        GoParseError: If a file has no package clause, or has syntax errors
            in strict mode.
    """
    parsed: List[GoFile] = []
    for file_path in discover_go_files(directory, ignore_tests):
        diagnostics = _inspect_file_with_diagnostics(
            file_path, None, func_option, strict, predicate, printer
        )
        if not diagnostics.go_file.package:
            raise GoParseError(file_path, 1, 1, "expected 'package' clause")
        parsed.append(diagnostics.go_file)
        if stats is not None:
            stats.files_parsed += 1
            stats.parse_errors += diagnostics.parse_error_count

    return {
        name: merge_files(name, files)
        for name, files in group_by_package(parsed).items()
    }


def _raise_walk_error(error: OSError) -> None:
    raise error


def _error_path(error: Exception, fallback: str) -> str:
    return getattr(error, "filename", None) or getattr(error, "path", None) or fallback


def parse_packages_from_dir(
    directory: str,
    ignore_tests: bool = DEFAULT_IGNORE_TESTS,
    func_option: FuncOption = FuncOption.BOTH,
    reserved_subtree: Optional[str] = DEFAULT_RESERVED_SUBTREE,
    strict: bool = DEFAULT_STRICT_PARSE,
    exclude_dirs: Sequence[str] = (),
    predicate: VisibilityPredicate = is_exported,
    printer: GoPrinter = DEFAULT_PRINTER,
    stats: Optional[ExtractionStats] = None,
) -> Dict[str, Package]:
    """Inspect every package in a directory tree.

    Directories are visited depth-first in sorted order; each one is a
    separate compilation unit (see ``parse_dir``). Packages that share a
    name across directories are folded into one registry entry by
    appending, without duplicate suppression.

    Args:
        directory: Root of the tree.
        ignore_tests: Leave out ``*_test.go`` files.
        func_option: Which functions to keep.
        reserved_subtree: Subdirectory of the root that is skipped entirely
            (not descended into). None disables the skip.
        strict: Raise on syntax errors instead of logging them.
        exclude_dirs: Directory names skipped wherever they appear.
        predicate: Visibility policy.
        printer: Renders declarations.
        stats: Optional statistics collector.

    Returns:
        Registry of packages keyed by package name.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        TraversalError: If reading or parsing fails. The walk stops and the
            error's ``packages`` holds the registry accumulated so far.

    Example:
        >>> pkgs = parse_packages_from_dir("/usr/local/go/src", func_option=FuncOption.EXPORTED)
        >>> pkgs.pop("main", None)
    """
    root = os.path.abspath(directory)
    if not os.path.isdir(root):
        raise FileNotFoundError(f"Directory not found: {root}")

    reserved = os.path.normpath(os.path.join(root, reserved_subtree)) if reserved_subtree else None
    excluded = set(exclude_dirs)
    packages: Dict[str, Package] = {}
    current = root

    logger.info("Inspecting Go packages under %s", root)

    try:
        for current, dirs, _files in os.walk(root, onerror=_raise_walk_error):
            dirs[:] = sorted(
                d for d in dirs
                if d not in excluded and os.path.join(current, d) != reserved
            )
            if stats is not None:
                stats.directories_visited += 1

            with directory_scope(os.path.relpath(current, root)) as label:
                found = parse_dir(
                    current,
                    ignore_tests=ignore_tests,
                    func_option=func_option,
                    strict=strict,
                    predicate=predicate,
                    printer=printer,
                    stats=stats,
                )
                for package in found.values():
                    if stats is not None:
                        stats.record_package(package)
                    merge_into_registry(packages, package)
                if found:
                    logger.info("Found package(s) %s in %s", ", ".join(sorted(found)), label)
    except (OSError, InspectError) as e:
        path = _error_path(e, current)
        logger.error("Error inspecting %s: %s", path, e)
        raise TraversalError(path, packages) from e

    logger.info("Inspection complete: %d packages", len(packages))
    return packages


def inspect_path(
    source: str,
    ignore_tests: bool = DEFAULT_IGNORE_TESTS,
    func_option: FuncOption = FuncOption.BOTH,
    reserved_subtree: Optional[str] = DEFAULT_RESERVED_SUBTREE,
    strict: bool = DEFAULT_STRICT_PARSE,
    exclude_dirs: Sequence[str] = (),
    stats: Optional[ExtractionStats] = None,
) -> Dict[str, Package]:
    """Inspect a file or a directory tree and return a package registry.

    A single file yields a registry holding the one package it declares.
    """
    source = os.path.abspath(source)

    if os.path.isfile(source):
        go_file = new_file(source, func_option=func_option, strict=strict)
        if not go_file.package:
            raise GoParseError(source, 1, 1, "expected 'package' clause")
        package = merge_files(go_file.package, [go_file])
        if stats is not None:
            stats.files_parsed += 1
            stats.record_package(package)
        return {package.name: package}
    if os.path.isdir(source):
        return parse_packages_from_dir(
            source,
            ignore_tests=ignore_tests,
            func_option=func_option,
            reserved_subtree=reserved_subtree,
            strict=strict,
            exclude_dirs=exclude_dirs,
            stats=stats,
        )
    raise FileNotFoundError(f"Source not found: {source}")
