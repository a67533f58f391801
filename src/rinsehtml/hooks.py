"""Interception hooks.

Four typed slots let callers observe, rewrite or veto tokens while a fragment
is being cleaned:

- ``on_tag_open(sanitizer, tag)``: ``tag.name`` and ``tag.attrs`` may be edited.
- ``on_tag_close(sanitizer, tag)``: end tags never carry attributes.
- ``on_text(sanitizer, text, in_marked_section)``: ``text.data`` may be edited.
- ``on_output(sanitizer, fragments)``: the whole fragment list, which may be
  replaced in place (``fragments[:] = [...]``).

A hook returning a falsy value drops that token (or, for ``on_output``, the
whole result). Edits are honored when it returns a truthy value.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from .errors import ConfigurationError

Hook = Callable[..., Any]


class HookKind(Enum):
    TAG_OPEN = "on_tag_open"
    TAG_CLOSE = "on_tag_close"
    TEXT = "on_text"
    OUTPUT = "on_output"


def accept(*_args: Any) -> bool:
    """Default hook: keep the token unchanged."""
    return True


# Alternate names for the tag slots: start_tag, end_tag.
_ALIASES = {
    "start_tag": HookKind.TAG_OPEN,
    "end_tag": HookKind.TAG_CLOSE,
}


def _coerce_kind(kind: HookKind | str) -> HookKind:
    if isinstance(kind, HookKind):
        return kind
    if isinstance(kind, str) and kind.lower() in _ALIASES:
        return _ALIASES[kind.lower()]
    try:
        return HookKind(kind)
    except ValueError:
        pass
    try:
        return HookKind[str(kind).upper()]
    except KeyError:
        raise ConfigurationError("hook kind", kind, "expected one of " + ", ".join(k.name for k in HookKind)) from None


class Hooks:
    __slots__ = ("on_output", "on_tag_close", "on_tag_open", "on_text")

    def __init__(self) -> None:
        self.on_tag_open: Hook = accept
        self.on_tag_close: Hook = accept
        self.on_text: Hook = accept
        self.on_output: Hook = accept

    def __repr__(self) -> str:
        custom = [kind.name for kind in HookKind if self.get(kind) is not accept]
        return f"Hooks(custom={custom})"

    def get(self, kind: HookKind | str) -> Hook:
        return getattr(self, _coerce_kind(kind).value)

    def set(self, kind: HookKind | str, hook: Any) -> None:
        """Install ``hook`` in slot ``kind``. Non-callables are ignored."""
        kind = _coerce_kind(kind)
        if not callable(hook):
            return
        setattr(self, kind.value, hook)

    def unset(self, kind: HookKind | str) -> None:
        setattr(self, _coerce_kind(kind).value, accept)
