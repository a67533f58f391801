"""Serialization of accepted tokens into XHTML fragments."""

from __future__ import annotations

from collections.abc import Mapping


def escape_text(text: str | None) -> str:
    if not text:
        return ""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def escape_attr_value(value: str | None) -> str:
    # Values are always double quoted, so the text escape covers them too.
    return escape_text(value)


def serialize_attrs(attrs: Mapping[str, str] | None) -> str:
    if not attrs:
        return ""
    return " ".join(f'{name}="{escape_attr_value(value)}"' for name, value in attrs.items())


def serialize_start_tag(name: str, attrs: Mapping[str, str] | None = None, *, is_empty: bool = False) -> str:
    """Return ``<name a="v">``, or ``<name a="v" />`` for empty elements."""
    attr_str = serialize_attrs(attrs)
    if is_empty:
        if attr_str:
            return f"<{name} {attr_str} />"
        return f"<{name} />"
    if attr_str:
        return f"<{name} {attr_str}>"
    return f"<{name}>"


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"
