"""
Package merging.

Files of one package are merged with duplicate suppression; packages of
the same name found in different directories are folded into one registry
entry by plain appending.
"""

import logging
from typing import Dict, Iterable, Set

from inspection.models import GoFile, Package

logger = logging.getLogger(__name__)


def merge_files(name: str, files: Iterable[GoFile]) -> Package:
    """Merge the per-file results of one package.

    Imports are unioned by path and functions by ``Function.key``; in both
    cases the first occurrence wins and later duplicates are dropped.
    Interfaces are concatenated as-is.

    Args:
        name: Package name.
        files: Per-file results, in file order.

    Returns:
        The merged Package. No files gives an empty package.
    """
    package = Package(name=name)
    seen_imports: Set[str] = set()
    seen_funcs: Set[str] = set()

    for go_file in files:
        for path in go_file.imports:
            if path in seen_imports:
                continue
            seen_imports.add(path)
            package.imports.append(path)

        for fn in go_file.functions:
            if fn.key in seen_funcs:
                logger.debug(
                    "Dropping duplicate function %s from %s", fn.key, go_file.path or "<source>"
                )
                continue
            seen_funcs.add(fn.key)
            package.funcs.append(fn)

        package.interfaces.extend(go_file.interfaces)

    return package


def merge_into_registry(registry: Dict[str, Package], package: Package) -> Package:
    """Fold a package into a registry keyed by package name.

    A new name is inserted as-is. An existing entry has the new package's
    functions, imports and interfaces appended to it; no duplicate
    suppression happens across directories.

    Returns:
        The registry entry for ``package.name``.
    """
    existing = registry.get(package.name)
    if existing is None:
        registry[package.name] = package
        return package

    logger.debug("Appending to existing package %s", package.name)
    existing.funcs.extend(package.funcs)
    existing.imports.extend(package.imports)
    existing.interfaces.extend(package.interfaces)
    return existing
