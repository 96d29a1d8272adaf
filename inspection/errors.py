"""
Exception types raised by the inspection engine.
"""

from typing import Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from inspection.models import Package


class InspectError(Exception):
    """Base class for inspection failures."""


class GoParseError(InspectError):
    """Raised when a Go source file cannot be turned into a clean syntax tree."""

    def __init__(self, path: str, line: int, column: int, detail: str = "syntax error"):
        self.path = path
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(f"{path or '<source>'}:{line}:{column}: {detail}")


class RenderError(InspectError):
    """Raised by the printer when a node cannot be rendered as text."""


class TraversalError(InspectError):
    """Raised when a directory walk is aborted.

    Attributes:
        path: File or directory whose processing failed.
        packages: Registry entries accumulated before the failure.
    """

    def __init__(self, path: str, packages: Optional[Dict[str, "Package"]] = None):
        self.path = path
        self.packages = packages if packages is not None else {}
        super().__init__(f"error: parsing directory {path}")
