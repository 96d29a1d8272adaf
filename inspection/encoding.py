"""
Serialization and text reports for package registries.
"""

import json
from typing import IO, Any, Dict, List, Mapping, Union

from inspection.models import Package


def encode_packages(packages: Mapping[str, Package]) -> Dict[str, Any]:
    """Encode a registry as a JSON-ready mapping sorted by package name.

    Package names are the keys, so each package is encoded without its
    ``Name`` field.
    """
    return {name: packages[name].to_dict() for name in sorted(packages)}


def write_packages_json(
    packages: Mapping[str, Package],
    destination: Union[str, IO[str]],
) -> None:
    """Write a registry as tab-indented JSON to a path or text stream."""
    payload = encode_packages(packages)
    if isinstance(destination, str):
        with open(destination, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent="\t", ensure_ascii=False)
            f.write("\n")
        return
    json.dump(payload, destination, indent="\t", ensure_ascii=False)
    destination.write("\n")


def format_interfaces(packages: Mapping[str, Package]) -> str:
    """Render the interfaces of every package as a text report.

    Packages without interfaces are left out.
    """
    lines: List[str] = []
    for name in sorted(packages):
        interfaces = packages[name].interfaces
        if not interfaces:
            continue
        heading = f"Package {name}:"
        lines.extend(["", heading, "=" * (len(heading) - 1)])
        for iface in interfaces:
            title = f"Interface {iface.name}"
            lines.extend(["", f"\t{title}", "\t" + "-" * len(title)])
            if iface.embedded_interfaces:
                lines.append("\tImplements:")
                lines.extend(f"\t\t{embedded}" for embedded in iface.embedded_interfaces)
            if iface.methods:
                lines.append("\tMethods:")
                lines.extend(f"\t\t{method}" for method in iface.methods)
            lines.append("")
    return "\n".join(lines)


def format_functions(packages: Mapping[str, Package]) -> str:
    """Render imports and functions of every package, unexported first."""
    lines: List[str] = []
    rule = "-" * 20
    for name in sorted(packages):
        package = packages[name]
        lines.extend([f"Package {name!r}:", rule, "", "Imports:", rule])
        lines.extend(package.imports)
        lines.extend([rule, ""])
        exported = package.exported_funcs()
        unexported = [f for f in package.funcs if not f.is_exported]
        for title, funcs in (("Unexported functions:", unexported), ("Exported functions:", exported)):
            lines.extend([title, rule])
            lines.extend(str(f) for f in funcs)
            lines.extend([rule, ""])
    return "\n".join(lines)

