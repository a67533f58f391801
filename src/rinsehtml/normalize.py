"""Tidy post-pass built on html5lib.

The sanitizer only emits whitelisted markup, but it does not balance it:
``<p><b>bold`` stays unclosed. The normalizer re-parses the fragment with
html5lib, which closes and re-nests elements the way a browser would, and
serializes it back in XHTML style (``<br />``, every attribute quoted).

The DOM tree builder is used because the etree builder drops content that the
HTML5 rules move out of tables (``<table><p>a</p></table>``).

html5lib only knows the standard void elements. Elements added as empty on the
rule set (``add_acceptable_element("foo", empty=True)``) would otherwise be
opened and swallow their following siblings, so :class:`EmptyElementFilter`
turns them back into empty tags and lets their parsed children follow them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import html5lib
from html5lib.constants import voidElements
from html5lib.filters.base import Filter
from html5lib.serializer import HTMLSerializer

from .rules import NORMALIZER_OPTIONS


class EmptyElementFilter(Filter):
    """Emit ``EmptyTag`` for custom empty elements and drop their end tags."""

    def __init__(self, source, empty_elements):
        super().__init__(source)
        self.empty_elements = empty_elements

    def __iter__(self):
        empty_elements = self.empty_elements
        for token in super().__iter__():
            kind = token["type"]
            if kind == "StartTag" and token["name"] in empty_elements:
                yield {"type": "EmptyTag", "name": token["name"], "namespace": token["namespace"], "data": token["data"]}
            elif kind == "EndTag" and token["name"] in empty_elements:
                continue
            else:
                yield token


class XHTMLSerializer(HTMLSerializer):
    """HTMLSerializer that also closes custom empty elements with a solidus."""

    def serialize(self, treewalker, encoding=None):
        pending = []
        for token in treewalker:
            if token["type"] == "EmptyTag" and token["name"] not in voidElements:
                # A custom empty tag never sits inside raw text, so splitting the
                # stream here keeps the serializer's CDATA tracking intact.
                yield from super().serialize(pending, encoding)
                pending = []
                yield self._empty_tag(token, encoding)
            else:
                pending.append(token)
        yield from super().serialize(pending, encoding)

    def _empty_tag(self, token, encoding):
        parts = list(super().serialize([token], encoding))
        closing = " />" if self.space_before_trailing_solidus else "/>"
        if encoding:
            return b"".join(parts)[:-1] + closing.encode(encoding)
        return "".join(parts)[:-1] + closing


class Normalizer:
    __slots__ = ("_serializer", "_walker", "container", "options", "rules")

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        container: str = "div",
        rules: Any = None,
    ) -> None:
        self.options = dict(NORMALIZER_OPTIONS if options is None else options)
        self.container = container
        # Read on every call, so later rule mutations are honored.
        self.rules = rules
        self._serializer = XHTMLSerializer(**self.options)
        self._walker = html5lib.getTreeWalker("dom")

    def __repr__(self) -> str:
        return f"Normalizer(container={self.container!r})"

    def custom_empty_elements(self) -> frozenset[str]:
        if self.rules is None:
            return frozenset()
        return frozenset(self.rules.empty_elements - voidElements)

    def normalize(self, fragment: str) -> str:
        if not fragment:
            return ""
        tree = html5lib.parseFragment(
            fragment,
            container=self.container,
            treebuilder="dom",
            namespaceHTMLElements=False,
        )
        stream = self._walker(tree)
        empty_elements = self.custom_empty_elements()
        if empty_elements:
            stream = EmptyElementFilter(stream, empty_elements)
        return self._serializer.render(stream)
