"""Depth counters for excising unacceptable elements with their content.

Depth counting, not tag-name matching, decides when an excised element ends:
the tokenizer forgives mismatched tags, so ``<applet><script></applet>``
closes two levels just as ``<applet><applet></applet></applet>`` does.
"""


class SuppressionState:
    """Counters and flags for one cleaning run.

    ``marked_section_dirty`` is informational: it is set once a CDATA section
    has been processed and cleared by the next ordinary tag or text. Tokenizers
    are per run and always reset on release, so nothing depends on it.
    """

    __slots__ = ("in_marked_section", "local_depth", "marked_section_dirty", "outer_depth")

    def __init__(self):
        self.reset()

    def __repr__(self):
        return (
            f"SuppressionState(outer_depth={self.outer_depth}, local_depth={self.local_depth}, "
            f"in_marked_section={self.in_marked_section}, marked_section_dirty={self.marked_section_dirty})"
        )

    def reset(self):
        self.outer_depth = 0
        self.local_depth = 0
        self.in_marked_section = False
        self.marked_section_dirty = False

    @property
    def suppressed(self):
        """True while the current scope is inside an unacceptable element."""
        if self.in_marked_section:
            return self.local_depth > 0
        return self.outer_depth > 0

    def enter(self):
        if self.in_marked_section:
            self.local_depth += 1
        else:
            self.outer_depth += 1

    def leave(self):
        # Stray close tags must never push a counter below zero.
        if self.in_marked_section:
            self.local_depth = max(self.local_depth - 1, 0)
        else:
            self.outer_depth = max(self.outer_depth - 1, 0)

    def touch(self):
        """Record that ordinary markup followed the last marked section."""
        if not self.in_marked_section:
            self.marked_section_dirty = False
