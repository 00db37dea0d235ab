"""
Naming and literal helpers shared by all target adapters.

Widget and data source ids come straight from the design document, so
anything that ends up as an identifier goes through ``identifier`` first
and anything that ends up in a string literal goes through the target's
quoting function.
"""

from __future__ import annotations

import json
import re
from typing import Any

_NON_IDENT = re.compile(r"[^0-9A-Za-z_]+")


def snake_case(name: str) -> str:
    """Convert PascalCase/kebab-case/spaced names to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0 and name[i - 1] not in "_- ":
            result.append("_")
        result.append(char.lower())
    return _NON_IDENT.sub("_", "".join(result)).strip("_")


def pascal_case(name: str) -> str:
    """Convert snake_case/kebab-case names to PascalCase."""
    words = [w for w in _NON_IDENT.sub("_", name).split("_") if w]
    return "".join(word[0].upper() + word[1:] for word in words)


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def identifier(name: str) -> str:
    """A snake_case identifier that never starts with a digit."""
    ident = snake_case(name) or "item"
    if ident[0].isdigit():
        ident = f"w_{ident}"
    return ident


def widget_class_name(widget_id: str) -> str:
    """Type name for a widget's generated class, e.g. 'cpu-card' -> 'CpuCardWidget'."""
    base = pascal_case(widget_id) or "Item"
    if base[0].isdigit():
        base = f"W{base}"
    return f"{base}Widget"


# =============================================================================
# String literals
# =============================================================================


def py_str(value: str) -> str:
    """Python string literal."""
    return repr(value)


def js_str(value: str) -> str:
    """JavaScript (and Go) double-quoted string literal."""
    return json.dumps(value, ensure_ascii=False)


def go_str(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def rust_str(value: str) -> str:
    """Rust string literal; control characters use the \\u{..} form."""
    out = ['"']
    for char in value:
        if char == "\\":
            out.append("\\\\")
        elif char == '"':
            out.append('\\"')
        elif char == "\n":
            out.append("\\n")
        elif char == "\r":
            out.append("\\r")
        elif char == "\t":
            out.append("\\t")
        elif ord(char) < 0x20:
            out.append(f"\\u{{{ord(char):x}}}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)


# =============================================================================
# Value literals
# =============================================================================


def py_literal(value: Any) -> str:
    """Python literal for JSON-like data."""
    return repr(value)


def js_literal(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def number_literal(value: float) -> str:
    """Float literal valid in Go, Rust and JavaScript (always has a decimal point)."""
    text = repr(float(value))
    if "inf" in text or "nan" in text:
        return "0.0"
    return text


def comment_text(text: str) -> str:
    """Single-line text safe inside any comment or docstring."""
    return " ".join(str(text).replace("\\", "/").replace('"', "'").replace("*/", "* /").split())


_STRING_LITERAL = re.compile(
    r'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\'|"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\'|`[^`]*`'
)
_LINE_COMMENT = re.compile(r"^[ \t]*(?:#|//).*$", re.MULTILINE)


def code_only(body: str) -> str:
    """``body`` with full-line comments removed and string literals emptied."""
    return _STRING_LITERAL.sub('""', _LINE_COMMENT.sub("", body))


def used_modules(body: str, candidates: list[str]) -> list[str]:
    """Candidates referenced as ``name.`` in the code of ``body``, in candidate order."""
    code = code_only(body)
    return [name for name in candidates if re.search(rf"(?<![\w.]){re.escape(name)}\.", code)]


def tab_indent(text: str) -> str:
    """Turn leading 4-space indentation units into tabs (Go style)."""
    out = []
    for line in text.split("\n"):
        stripped = line.lstrip(" ")
        depth = (len(line) - len(stripped)) // 4
        out.append("\t" * depth + stripped if stripped else "")
    return "\n".join(out)


def indent(text: str, spaces: int) -> str:
    """Indent every non-empty line of ``text``."""
    pad = " " * spaces
    return "\n".join(pad + line if line else line for line in text.split("\n"))


def join_sections(*sections: str, sep: str = "\n\n") -> str:
    """Join non-empty code sections with ``sep``, ending in a newline."""
    parts = [s.strip("\n") for s in sections if s and s.strip()]
    return sep.join(parts) + "\n"
