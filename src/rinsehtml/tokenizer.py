"""Token stream on top of the standard library HTML parser.

``html.parser.HTMLParser`` does the lexing. This adapter turns its callbacks
into :mod:`rinsehtml.tokens` objects and hands each one to
``sink.process_token`` in document order.

Tag and attribute names arrive lowercased, text and attribute values arrive
with character references decoded. ``<![CDATA[...]]>`` sections are reported
as :class:`Characters` with ``marked_section`` set, so the sink can re-parse
their content. Comments, doctypes, processing instructions and other marked
sections are dropped.
"""

from __future__ import annotations

from html.parser import HTMLParser

from .tokens import Characters, Tag

_CDATA_OPEN = "<![CDATA["
_CDATA_CLOSE = "]]>"


class Tokenizer(HTMLParser):
    def __init__(self, sink, *, marked_sections=True):
        self.sink = sink
        self.marked_sections = bool(marked_sections)
        super().__init__(convert_charrefs=True)

    def run(self, html):
        """Tokenize a complete chunk, flushing buffered text at the end."""
        self.feed(html)
        self.flush()

    def flush(self):
        """Emit whatever the parser is still holding, then make it reusable."""
        self.close()
        self.reset()

    # HTMLParser callbacks

    def handle_starttag(self, tag, attrs):
        self.sink.process_token(Tag(Tag.START, tag, _attr_dict(attrs)))

    def handle_endtag(self, tag):
        self.sink.process_token(Tag(Tag.END, tag))

    def handle_data(self, data):
        if data:
            self.sink.process_token(Characters(data))

    def handle_comment(self, data):
        # Some Python versions report CDATA outside foreign content as a bogus comment.
        if self.marked_sections and data.startswith("[CDATA[") and data.endswith("]]"):
            self._marked_section(data[7:-2])

    def unknown_decl(self, data):
        if self.marked_sections and data.startswith("CDATA["):
            self._marked_section(data[6:])

    def parse_html_declaration(self, i):
        if self.rawdata.startswith("<![", i):
            return self._parse_marked_section(i)
        return super().parse_html_declaration(i)

    def _parse_marked_section(self, i):
        rawdata = self.rawdata
        if rawdata.startswith(_CDATA_OPEN, i):
            j = rawdata.find(_CDATA_CLOSE, i + len(_CDATA_OPEN))
            if j < 0:
                return -1
            self.unknown_decl(rawdata[i + 3 : j])
            return j + len(_CDATA_CLOSE)
        # <![if ...]>, <![INCLUDE[ ...]]> and friends are discarded.
        j = rawdata.find(">", i + 3)
        if j < 0:
            return -1
        return j + 1

    def _marked_section(self, data):
        if data:
            self.sink.process_token(Characters(data, marked_section=True))


def _attr_dict(attrs):
    result = {}
    for name, value in attrs:
        if name in result:
            continue
        # Minimized attributes (<input checked>) take their own name as value.
        result[name] = name if value is None else value
    return result
