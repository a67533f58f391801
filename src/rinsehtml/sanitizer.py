"""Whitelist sanitizer for untrusted HTML fragments.

A :class:`Sanitizer` holds configuration only: the rule set, the hooks, the
base URI and the output assembler. Every call to :meth:`Sanitizer.clean`
builds a fresh :class:`CleaningRun` that owns the suppression counters, the
fragment list and the tokenizers for that call, so one sanitizer can be used
from several threads, or re-entered from inside a hook.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .hooks import HookKind, Hooks
from .normalize import Normalizer
from .output import OutputAssembler
from .rebase import rebase, validate_base_uri
from .rules import RuleSet
from .serialize import escape_text, serialize_end_tag, serialize_start_tag
from .suppression import SuppressionState
from .tokenizer import Tokenizer
from .tokens import Characters, Tag

logger = logging.getLogger(__name__)

# "< p>" -> "<p>", "< / p>" -> "</p>"
_TAG_LEADING_WHITESPACE = re.compile(r"(?<=<)\s*(/?)\s*")


class SanitizerOpts:
    __slots__ = ("base_uri", "trim_tag_whitespace", "trim_trailing_whitespace", "use_normalizer")

    def __init__(
        self,
        base_uri=None,
        use_normalizer=False,
        trim_trailing_whitespace=True,
        trim_tag_whitespace=False,
    ):
        self.base_uri = base_uri
        self.use_normalizer = bool(use_normalizer)
        self.trim_trailing_whitespace = bool(trim_trailing_whitespace)
        self.trim_tag_whitespace = bool(trim_tag_whitespace)

    def __repr__(self):
        return (
            f"SanitizerOpts(base_uri={self.base_uri!r}, use_normalizer={self.use_normalizer}, "
            f"trim_trailing_whitespace={self.trim_trailing_whitespace}, "
            f"trim_tag_whitespace={self.trim_tag_whitespace})"
        )


class Sanitizer:
    """Clean HTML fragments against an extensible whitelist.

    >>> Sanitizer().clean('<p onclick="x()">Hi<script>alert(1)</script></p>')
    '<p>Hi</p>'

    Options:

    - ``base_uri``: absolute URI used to rebase relative links (``a[href]``,
      ``img[src]``, ...). An empty or relative value disables rebasing; a value
      that is not a URI raises :class:`~rinsehtml.errors.ConfigurationError`.
    - ``use_normalizer``: run the html5lib tidy pass over the result.
    - ``trim_trailing_whitespace``: strip whitespace at the end of the output.
    - ``trim_tag_whitespace``: turn ``< p>`` into ``<p>`` before tokenizing.
    - ``rules``: a :class:`RuleSet` to start from instead of the defaults.
    - ``normalizer``: any object with ``normalize(str) -> str``; implies the
      tidy pass.
    """

    __slots__ = ("assembler", "base_uri", "hooks", "opts", "rules")

    def __init__(
        self,
        *,
        base_uri=None,
        use_normalizer=False,
        trim_trailing_whitespace=True,
        trim_tag_whitespace=False,
        rules=None,
        normalizer=None,
        opts=None,
    ):
        self.opts = opts or SanitizerOpts(
            base_uri=base_uri,
            use_normalizer=use_normalizer,
            trim_trailing_whitespace=trim_trailing_whitespace,
            trim_tag_whitespace=trim_tag_whitespace,
        )
        self.base_uri = validate_base_uri(self.opts.base_uri)
        self.rules = rules if rules is not None else RuleSet()
        self.hooks = Hooks()
        if normalizer is None and self.opts.use_normalizer:
            normalizer = Normalizer(self.rules.normalizer_options(), rules=self.rules)
        if normalizer is not None:
            logger.debug("Normalizing output with %r", normalizer)
        self.assembler = OutputAssembler(normalizer, trim_trailing_whitespace=self.opts.trim_trailing_whitespace)

    def __repr__(self):
        return f"Sanitizer(base_uri={self.base_uri!r}, normalizer={self.assembler.normalizer!r})"

    @property
    def normalizer(self):
        return self.assembler.normalizer

    def set_hook(self, kind: HookKind | str, hook: Any) -> None:
        self.hooks.set(kind, hook)

    def unset_hook(self, kind: HookKind | str) -> None:
        self.hooks.unset(kind)

    def clean(self, fragment: str | None) -> str:
        """Return the sanitized form of ``fragment``."""
        if fragment is None:
            return ""
        if not isinstance(fragment, str):
            raise TypeError(f"fragment must be a string, not {type(fragment).__name__}")
        if self.opts.trim_tag_whitespace:
            fragment = _TAG_LEADING_WHITESPACE.sub(r"\1", fragment)
        run = CleaningRun(self)
        try:
            run.feed(fragment)
            run.finish()
            return self.assembler.assemble(self, run.fragments)
        finally:
            run.release()


class CleaningRun:
    """State for one pass over one fragment.

    The top-level run counts unacceptable elements in ``state.outer_depth``.
    CDATA content is fed to a child run (``marked_section=True``) that shares
    the same :class:`SuppressionState` but counts in ``local_depth``, owns its
    own tokenizer and buffers its fragments until they are merged back.
    """

    __slots__ = ("_marked", "fragments", "marked_section", "sanitizer", "state", "tokenizer")

    def __init__(self, sanitizer, state=None, *, marked_section=False):
        self.sanitizer = sanitizer
        self.state = state if state is not None else SuppressionState()
        self.marked_section = marked_section
        self.fragments: list[str] = []
        # A CDATA section cannot nest, so the child tokenizer ignores them.
        self.tokenizer = Tokenizer(self, marked_sections=not marked_section)
        self._marked = None

    def feed(self, data):
        self.tokenizer.feed(data)

    def finish(self):
        """End of input: flush buffered text unless its scope is suppressed."""
        state = self.state
        if not state.in_marked_section and not state.outer_depth:
            self.tokenizer.flush()
        if self._marked is not None and not state.local_depth:
            self._feed_marked_section("")

    def release(self):
        # Whatever the tokenizers still hold belongs to a suppressed scope.
        self.tokenizer.reset()
        if self._marked is not None:
            self._marked.release()
            self._marked = None

    def process_token(self, token):
        if isinstance(token, Characters):
            self._text(token)
        elif token.kind == Tag.START:
            self._start_tag(token)
        else:
            self._end_tag(token)

    def _start_tag(self, tag):
        sanitizer = self.sanitizer
        if not sanitizer.hooks.on_tag_open(sanitizer, tag):
            return
        state = self.state
        state.touch()
        rules = sanitizer.rules
        name = tag.name
        if rules.is_unacceptable_element(name):
            state.enter()
            return
        if state.suppressed or not rules.is_acceptable_element(name):
            return
        self.fragments.append(
            serialize_start_tag(name, self._filter_attrs(name, tag.attrs), is_empty=rules.is_empty_element(name))
        )

    def _end_tag(self, tag):
        sanitizer = self.sanitizer
        if not sanitizer.hooks.on_tag_close(sanitizer, tag):
            return
        state = self.state
        state.touch()
        rules = sanitizer.rules
        name = tag.name
        if rules.is_unacceptable_element(name):
            state.leave()
            return
        if state.suppressed or not rules.is_acceptable_element(name):
            return
        if not rules.is_empty_element(name):
            self.fragments.append(serialize_end_tag(name))

    def _text(self, text):
        state = self.state
        if state.suppressed:
            return
        if text.marked_section:
            self._feed_marked_section(text.data)
            state.marked_section_dirty = True
            return
        sanitizer = self.sanitizer
        if not sanitizer.hooks.on_text(sanitizer, text, state.in_marked_section):
            return
        state.touch()
        self.fragments.append(escape_text(text.data))

    def _filter_attrs(self, name, attrs):
        rules = self.sanitizer.rules
        base_uri = self.sanitizer.base_uri
        rebase_names = rules.rebase_attributes_for(name) if base_uri else ()
        kept = {}
        for key, value in attrs.items():
            if not rules.is_acceptable_attribute(key):
                continue
            if value is None:
                value = key
            if key in rebase_names:
                value = rebase(value, base_uri)
            kept[key] = value
        return kept

    def _feed_marked_section(self, data):
        nested = self._marked
        if nested is None:
            nested = self._marked = CleaningRun(self.sanitizer, self.state, marked_section=True)
        state = self.state
        state.in_marked_section = True
        try:
            if data:
                nested.feed(data)
            # An open unacceptable element keeps its scope going into the next section.
            if not state.local_depth:
                nested.tokenizer.flush()
        finally:
            state.in_marked_section = False
        if nested.fragments:
            self.fragments.extend(nested.fragments)
            nested.fragments.clear()


def clean(fragment: str | None, **options: Any) -> str:
    """Clean ``fragment`` with a throwaway :class:`Sanitizer` built from ``options``."""
    return Sanitizer(**options).clean(fragment)
