"""
Data models for inspected Go packages.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List


def is_exported(name: str) -> bool:
    """Report whether a Go identifier is exported (starts with an upper-case letter)."""
    return name[:1].isupper()


# Pluggable visibility policy: name -> exported?
VisibilityPredicate = Callable[[str], bool]


class FuncOption(enum.IntFlag):
    """Selects which functions are kept in a file or package result.

    ``EXPORTED | UNEXPORTED`` (``BOTH``) keeps every function.
    """

    EXPORTED = 1
    UNEXPORTED = 2
    BOTH = EXPORTED | UNEXPORTED

    @classmethod
    def from_name(cls, value: str) -> "FuncOption":
        """Parse ``exported``, ``unexported`` or ``both`` (case-insensitive)."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown function option {value!r}; "
                "expected one of: exported, unexported, both"
            ) from None

    def accepts(self, name: str, predicate: VisibilityPredicate = is_exported) -> bool:
        """Return True if a function called ``name`` passes this filter."""
        if predicate(name):
            return bool(self & FuncOption.EXPORTED)
        return bool(self & FuncOption.UNEXPORTED)


@dataclass
class Function:
    """A function or method declaration.

    Attributes:
        name: Function name (without receiver).
        signature: Declaration header, e.g. ``func (s *Server) Close() error``.
            Never contains the body or the doc comment.
        documentation: Trimmed doc comment text, empty if there is none.
        receiver: Receiver base type name for methods, empty for functions.
    """

    name: str
    signature: str
    documentation: str = ""
    receiver: str = ""

    @property
    def is_exported(self) -> bool:
        return is_exported(self.name)

    @property
    def key(self) -> str:
        """Identity used for duplicate suppression within a package."""
        if self.receiver:
            return f"{self.receiver}.{self.name}"
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert the function to its serialized form.

        ``Doc`` is omitted when there is no documentation.
        """
        payload: Dict[str, Any] = {"Name": self.name, "Sig": self.signature}
        if self.documentation:
            payload["Doc"] = self.documentation
        return payload

    def __str__(self) -> str:
        return self.signature


@dataclass
class Interface:
    """An interface type declaration.

    Attributes:
        name: Interface type name.
        methods: Method signatures like ``Read(p []byte) (n int, err error)``.
        embedded_interfaces: Embedded interface names, possibly package
            qualified (``io.Reader``). Not resolved.
    """

    name: str
    methods: List[str] = field(default_factory=list)
    embedded_interfaces: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"Name": self.name}
        if self.methods:
            payload["Methods"] = list(self.methods)
        if self.embedded_interfaces:
            payload["Interfaces"] = list(self.embedded_interfaces)
        return payload


@dataclass
class GoFile:
    """Everything extracted from a single Go source file."""

    path: str
    package: str
    imports: List[str] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    interfaces: List[Interface] = field(default_factory=list)


@dataclass
class Package:
    """A Go package: its imports, functions and interfaces.

    The name is the merge key in a registry and is left out of the
    serialized form unless asked for.
    """

    name: str
    imports: List[str] = field(default_factory=list)
    funcs: List[Function] = field(default_factory=list)
    interfaces: List[Interface] = field(default_factory=list)

    def exported_funcs(self) -> List[Function]:
        return [f for f in self.funcs if f.is_exported]

    def to_dict(self, include_name: bool = False) -> Dict[str, Any]:
        """Convert the package to a dictionary suitable for JSON serialization.

        Empty ``Imports``, ``Funcs`` and ``Interfaces`` are omitted.

        Args:
            include_name: Emit ``Name``; off when the package is a map value
                keyed by its name.
        """
        payload: Dict[str, Any] = {}
        if include_name:
            payload["Name"] = self.name
        if self.imports:
            payload["Imports"] = list(self.imports)
        if self.funcs:
            payload["Funcs"] = [f.to_dict() for f in self.funcs]
        if self.interfaces:
            payload["Interfaces"] = [i.to_dict() for i in self.interfaces]
        return payload
