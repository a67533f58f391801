class Tag:
    __slots__ = ("attrs", "kind", "name")

    START = 0
    END = 1

    def __init__(self, kind, name, attrs=None):
        self.kind = kind
        self.name = name
        self.attrs = attrs if attrs is not None else {}

    def __repr__(self):
        if self.kind == Tag.END:
            return f"Tag(END, {self.name!r})"
        return f"Tag(START, {self.name!r}, {self.attrs!r})"


class Characters:
    """Decoded text, or the raw body of a ``<![CDATA[...]]>`` section."""

    __slots__ = ("data", "marked_section")

    def __init__(self, data, marked_section=False):
        self.data = data
        self.marked_section = bool(marked_section)

    def __repr__(self):
        if self.marked_section:
            return f"Characters({self.data!r}, marked_section=True)"
        return f"Characters({self.data!r})"
