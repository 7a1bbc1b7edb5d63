"""bankgen - Generated source rendering.

Renders an IdentifierTable into a source listing containing an
enumeration of every identifier (table order) and a mapping from each
member back to its path, plus a lookup accessor. Only the identifier ->
path associations are a compatibility contract; formatting is not.
"""

from __future__ import annotations

import keyword
from collections.abc import Callable

from bankgen.config import (
    DEFAULT_CODE_NAMESPACE,
    LANGUAGE_CSHARP,
    LANGUAGE_PYTHON,
)
from bankgen.identifiers import IdentifierTable

BANNER = "<auto-generated> Lumenfish FMOD codegen </auto-generated>"


def _summary_line(table: IdentifierTable) -> str:
    return f"{len(table)} {table.namespace.plural}, source digest {table.source_digest()}"


def _csharp_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def csharp_member_name(identifier: str, enum_name: str) -> str:
    """C# enum member name; a name equal to the enum type gets a trailing underscore."""
    if identifier == enum_name:
        return identifier + "_"
    return identifier


def render_csharp(table: IdentifierTable, code_namespace: str = DEFAULT_CODE_NAMESPACE) -> str:
    """Render the table as a C# enum plus a static path database."""
    ns = table.namespace
    enum_name = ns.enum_name
    lines = [
        f"// {BANNER}",
        f"// {_summary_line(table)}",
        "using System.Collections.Generic;",
        "",
        f"namespace {code_namespace}",
        "{",
        f"    public enum {enum_name}",
        "    {",
    ]
    lines.extend(f"        {csharp_member_name(entry.identifier, enum_name)}," for entry in table)
    lines += [
        "    }",
        "",
        f"    public static class {ns.database_name}",
        "    {",
        f"        private static readonly Dictionary<{enum_name}, string> _map = new()",
        "        {",
    ]
    lines.extend(
        f"            [{enum_name}.{csharp_member_name(entry.identifier, enum_name)}] = "
        f"{_csharp_string(entry.path)},"
        for entry in table
    )
    lines += [
        "        };",
        "",
        f"        public static string GetPath({enum_name} id) => _map[id];",
        "    }",
        "}",
    ]
    return "\n".join(lines) + "\n"


def python_member_name(identifier: str) -> str:
    """Enum member name for an identifier; keywords get a trailing underscore."""
    if keyword.iskeyword(identifier):
        return identifier + "_"
    return identifier


def render_python(table: IdentifierTable) -> str:
    """Render the table as a Python Enum plus a path mapping."""
    ns = table.namespace
    enum_name = ns.enum_name
    lines = [
        f"# {BANNER}",
        f"# {_summary_line(table)}",
        f'"""FMOD {ns.value} identifiers. Regenerate with `bankgen {ns.plural}`; do not edit."""',
        "",
        "from enum import Enum, auto",
        "",
        "",
        f"class {enum_name}(Enum):",
    ]
    lines.extend(f"    {python_member_name(entry.identifier)} = auto()" for entry in table)
    lines += ["", "", "_PATHS = {"]
    lines.extend(
        f"    {enum_name}.{python_member_name(entry.identifier)}: {entry.path!r}," for entry in table
    )
    lines += [
        "}",
        "",
        "",
        f"def get_path(member: {enum_name}) -> str:",
        "    return _PATHS[member]",
    ]
    return "\n".join(lines) + "\n"


_RENDERERS: dict[str, Callable[..., str]] = {
    LANGUAGE_CSHARP: render_csharp,
    LANGUAGE_PYTHON: lambda table, **_: render_python(table),
}


def render(table: IdentifierTable, language: str = LANGUAGE_CSHARP, **options) -> str:
    """Render a table in the given output language.

    Args:
        table: Identifier table to render.
        language: "csharp" or "python".
        **options: Renderer options (code_namespace for C#).

    Raises:
        ValueError: If the language is not supported.
    """
    try:
        renderer = _RENDERERS[language]
    except KeyError:
        raise ValueError(f"Unsupported output language: {language}") from None
    return renderer(table, **options)
