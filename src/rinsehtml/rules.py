"""Whitelist tables for fragment sanitizing.

The defaults are derived from Mark Pilgrim and Aaron Swartz's ``sanitize.py``
lists. Each table is kept as a list to maintain a stable iteration order;
:class:`RuleSet` turns them into sets for lookups.

Usage:
    from rinsehtml.rules import RuleSet

    rules = RuleSet()
    rules.add_acceptable_element("video")
    rules.add_unacceptable_element(["h1", "h2"])
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

ACCEPTABLE_ATTRIBUTES = [
    "abbr",
    "accept",
    "accept-charset",
    "accesskey",
    "action",
    "align",
    "alt",
    "axis",
    "border",
    "cellpadding",
    "cellspacing",
    "char",
    "charoff",
    "charset",
    "checked",
    "cite",
    "class",
    "clear",
    "cols",
    "colspan",
    "color",
    "compact",
    "coords",
    "datetime",
    "dir",
    "disabled",
    "enctype",
    "for",
    "frame",
    "headers",
    "height",
    "href",
    "hreflang",
    "hspace",
    "id",
    "ismap",
    "label",
    "lang",
    "longdesc",
    "maxlength",
    "media",
    "method",
    "multiple",
    "name",
    "nohref",
    "noshade",
    "nowrap",
    "prompt",
    "readonly",
    "rel",
    "rev",
    "rows",
    "rowspan",
    "rules",
    "scope",
    "selected",
    "shape",
    "size",
    "span",
    "src",
    "start",
    "summary",
    "tabindex",
    "target",
    "title",
    "type",
    "usemap",
    "valign",
    "value",
    "vspace",
    "width",
    "xml:lang",
]

ACCEPTABLE_ELEMENTS = [
    "a",
    "abbr",
    "acronym",
    "address",
    "area",
    "b",
    "bdo",
    "big",
    "blockquote",
    "br",
    "button",
    "caption",
    "center",
    "cite",
    "code",
    "col",
    "colgroup",
    "dd",
    "del",
    "dfn",
    "dir",
    "div",
    "dl",
    "dt",
    "em",
    "fieldset",
    "font",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "i",
    "img",
    "input",
    "ins",
    "kbd",
    "label",
    "legend",
    "li",
    "map",
    "menu",
    "ol",
    "optgroup",
    "option",
    "p",
    "pre",
    "q",
    "s",
    "samp",
    "select",
    "small",
    "span",
    "strike",
    "strong",
    "sub",
    "sup",
    "table",
    "tbody",
    "td",
    "textarea",
    "tfoot",
    "th",
    "thead",
    "tr",
    "tt",
    "u",
    "ul",
    "var",
    "wbr",
]

# Elements that never have content; accepted ones are written as <name />.
EMPTY_ELEMENTS = [
    "area",
    "base",
    "basefont",
    "br",
    "col",
    "frame",
    "hr",
    "img",
    "input",
    "isindex",
    "link",
    "meta",
    "param",
]

# Removed together with everything inside them.
UNACCEPTABLE_ELEMENTS = [
    "applet",
    "script",
]

# Element -> attributes holding a URI that is resolved against the base URI.
REBASE_TARGETS = {
    "a": ["href"],
    "applet": ["codebase"],
    "area": ["href"],
    "blockquote": ["cite"],
    "body": ["background"],
    "del": ["cite"],
    "form": ["action"],
    "frame": ["longdesc", "src"],
    "iframe": ["longdesc", "src"],
    "img": ["longdesc", "src", "usemap"],
    "input": ["src", "usemap"],
    "ins": ["cite"],
    "link": ["href"],
    "object": ["classid", "codebase", "data", "usemap"],
    "q": ["cite"],
    "script": ["src"],
}

# html5lib HTMLSerializer settings for the normalizing post-pass.
NORMALIZER_OPTIONS = {
    "quote_attr_values": "always",
    "quote_char": '"',
    "use_best_quote_char": False,
    "omit_optional_tags": False,
    "minimize_boolean_attributes": False,
    "use_trailing_solidus": True,
    "space_before_trailing_solidus": True,
    "escape_lt_in_attrs": True,
    "escape_rcdata": False,
    "resolve_entities": False,
    "alphabetical_attributes": False,
    "strip_whitespace": False,
}


def _names(value: str | Iterable[str]) -> tuple[str, ...]:
    # A bare string is one name, not an iterable of characters.
    if isinstance(value, str):
        return (value,)
    return tuple(value)


class RuleSet:
    """Mutable whitelist consulted by the sanitizer on every token.

    Acceptable and unacceptable elements are kept mutually exclusive by the
    mutators. If both somehow contain a name, unacceptable wins.
    """

    __slots__ = ("_acceptable_a", "_acceptable_e", "_empty_e", "_rebase", "_unacceptable_e")

    def __init__(
        self,
        *,
        acceptable_elements: Iterable[str] | None = None,
        acceptable_attributes: Iterable[str] | None = None,
        empty_elements: Iterable[str] | None = None,
        unacceptable_elements: Iterable[str] | None = None,
        rebase_targets: Mapping[str, Iterable[str]] | None = None,
    ) -> None:
        self._acceptable_e: set[str] = set(ACCEPTABLE_ELEMENTS if acceptable_elements is None else acceptable_elements)
        self._acceptable_a: set[str] = set(
            ACCEPTABLE_ATTRIBUTES if acceptable_attributes is None else acceptable_attributes
        )
        self._empty_e: set[str] = set(EMPTY_ELEMENTS if empty_elements is None else empty_elements)
        self._unacceptable_e: set[str] = set(
            UNACCEPTABLE_ELEMENTS if unacceptable_elements is None else unacceptable_elements
        )
        self._acceptable_e -= self._unacceptable_e
        targets = REBASE_TARGETS if rebase_targets is None else rebase_targets
        self._rebase: dict[str, frozenset[str]] = {
            element: frozenset(_names(attrs)) for element, attrs in targets.items()
        }

    def __repr__(self) -> str:
        return (
            f"RuleSet(acceptable_elements={len(self._acceptable_e)}, "
            f"acceptable_attributes={len(self._acceptable_a)}, "
            f"empty_elements={len(self._empty_e)}, "
            f"unacceptable_elements={sorted(self._unacceptable_e)})"
        )

    def copy(self) -> RuleSet:
        return RuleSet(
            acceptable_elements=self._acceptable_e,
            acceptable_attributes=self._acceptable_a,
            empty_elements=self._empty_e,
            unacceptable_elements=self._unacceptable_e,
            rebase_targets=self._rebase,
        )

    # Lookups

    def is_acceptable_element(self, name: str) -> bool:
        return name in self._acceptable_e and name not in self._unacceptable_e

    def is_acceptable_attribute(self, name: str) -> bool:
        return name in self._acceptable_a

    def is_empty_element(self, name: str) -> bool:
        return name in self._empty_e

    def is_unacceptable_element(self, name: str) -> bool:
        return name in self._unacceptable_e

    def rebase_attributes_for(self, name: str) -> frozenset[str]:
        return self._rebase.get(name, frozenset())

    def normalizer_options(self) -> dict[str, object]:
        """Return the html5lib serializer settings for the normalizing pass."""
        return dict(NORMALIZER_OPTIONS)

    # Whole-table access

    @property
    def acceptable_elements(self) -> frozenset[str]:
        return frozenset(self._acceptable_e - self._unacceptable_e)

    @acceptable_elements.setter
    def acceptable_elements(self, names: Iterable[str]) -> None:
        self._acceptable_e = set(_names(names))

    @property
    def acceptable_attributes(self) -> frozenset[str]:
        return frozenset(self._acceptable_a)

    @acceptable_attributes.setter
    def acceptable_attributes(self, names: Iterable[str]) -> None:
        self._acceptable_a = set(_names(names))

    @property
    def empty_elements(self) -> frozenset[str]:
        return frozenset(self._empty_e)

    @empty_elements.setter
    def empty_elements(self, names: Iterable[str]) -> None:
        self._empty_e = set(_names(names))

    @property
    def unacceptable_elements(self) -> frozenset[str]:
        return frozenset(self._unacceptable_e)

    @unacceptable_elements.setter
    def unacceptable_elements(self, names: Iterable[str]) -> None:
        names = _names(names)
        self._acceptable_e.difference_update(names)
        self._unacceptable_e = set(names)

    @property
    def rebase_targets(self) -> dict[str, frozenset[str]]:
        return dict(self._rebase)

    # Mutators. Each takes a single name or an iterable of names.

    def add_acceptable_element(self, names: str | Iterable[str], *, empty: bool = False) -> None:
        """Accept ``names``, dropping them from the unacceptable list.

        With ``empty=True`` they are also flagged as empty elements and will be
        written in the self-closing ``<name />`` form.
        """
        for name in _names(names):
            self._acceptable_e.add(name)
            self._unacceptable_e.discard(name)
            if empty:
                self._empty_e.add(name)

    def remove_acceptable_element(self, names: str | Iterable[str]) -> None:
        """Stop accepting ``names``. Their content is still kept (they are unwrapped)."""
        self._acceptable_e.difference_update(_names(names))

    def add_unacceptable_element(self, names: str | Iterable[str]) -> None:
        """Strip ``names`` together with all of their content."""
        for name in _names(names):
            self._acceptable_e.discard(name)
            self._unacceptable_e.add(name)

    def remove_unacceptable_element(self, names: str | Iterable[str]) -> None:
        """Stop excising ``names``. This does not make them acceptable."""
        self._unacceptable_e.difference_update(_names(names))

    def add_acceptable_attribute(self, names: str | Iterable[str]) -> None:
        self._acceptable_a.update(_names(names))

    def remove_acceptable_attribute(self, names: str | Iterable[str]) -> None:
        self._acceptable_a.difference_update(_names(names))

    def add_empty_element(self, names: str | Iterable[str]) -> None:
        self._empty_e.update(_names(names))

    def remove_empty_element(self, names: str | Iterable[str]) -> None:
        """Drop ``names`` from the empty list. Acceptability is unchanged."""
        self._empty_e.difference_update(_names(names))

    def set_rebase_attributes(self, element: str, attributes: str | Iterable[str]) -> None:
        self._rebase[element] = frozenset(_names(attributes))

    def remove_rebase_target(self, element: str) -> None:
        self._rebase.pop(element, None)
