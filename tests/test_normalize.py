from __future__ import annotations

import unittest

from rinsehtml import Normalizer, Sanitizer


class UpperNormalizer:
    def normalize(self, fragment: str) -> str:
        return fragment.upper() + "   "


class TestNormalizer(unittest.TestCase):
    def test_closes_unclosed_tags(self) -> None:
        assert Normalizer().normalize("<p><b>bold") == "<p><b>bold</b></p>"

    def test_fixes_misnested_tags(self) -> None:
        assert Normalizer().normalize("<b><i>x</b></i>") == "<b><i>x</i></b>"

    def test_empty_elements_use_trailing_solidus(self) -> None:
        assert Normalizer().normalize('a<br />b<img src="i.png" />') == 'a<br />b<img src="i.png" />'

    def test_attributes_are_quoted_and_escaped(self) -> None:
        out = Normalizer().normalize('<a href="/x?a=1&amp;b=2" title="t">y</a>')
        assert out == '<a href="/x?a=1&amp;b=2" title="t">y</a>'

    def test_empty_input(self) -> None:
        assert Normalizer().normalize("") == ""


class TestSanitizerWithNormalizer(unittest.TestCase):
    def test_use_normalizer_builds_html5lib_pass(self) -> None:
        sanitizer = Sanitizer(use_normalizer=True)
        assert isinstance(sanitizer.normalizer, Normalizer)
        assert sanitizer.clean("<p><i>Germ-Free Adolescents<script>x</script>") == (
            "<p><i>Germ-Free Adolescents</i></p>"
        )

    def test_normalized_output_is_trimmed(self) -> None:
        sanitizer = Sanitizer(use_normalizer=True)
        assert sanitizer.clean("<p>x</p>\n\n") == "<p>x</p>"

    def test_custom_normalizer_takes_precedence(self) -> None:
        sanitizer = Sanitizer(normalizer=UpperNormalizer())
        assert sanitizer.clean("<b>x</b>") == "<B>X</B>"

    def test_output_veto_skips_normalizer(self) -> None:
        sanitizer = Sanitizer(normalizer=UpperNormalizer(), trim_trailing_whitespace=False)
        sanitizer.set_hook("output", lambda *_: False)
        assert sanitizer.clean("<b>x</b>") == ""

    def test_content_moved_out_of_tables_is_kept(self) -> None:
        sanitizer = Sanitizer(use_normalizer=True)
        out = sanitizer.clean("<table><p>a</p></table>")
        assert "<p>a" in out
        assert "<table>" in out
        assert "<p>a" in sanitizer.clean("<table><tr><p>a</p></tr></table>")

    def test_custom_empty_element_stays_empty(self) -> None:
        sanitizer = Sanitizer(use_normalizer=True)
        sanitizer.rules.add_acceptable_element("foo", empty=True)
        sanitizer.rules.add_acceptable_attribute("src")
        assert sanitizer.clean("<foo>bar<p>x</p>") == "<foo />bar<p>x</p>"
        assert sanitizer.clean('<foo src="a.swf"></foo>tail') == '<foo src="a.swf" />tail'

    def test_empty_elements_are_read_at_normalize_time(self) -> None:
        sanitizer = Sanitizer(use_normalizer=True)
        sanitizer.rules.add_acceptable_element("foo")
        assert sanitizer.clean("<foo>bar</foo>") == "<foo>bar</foo>"
        sanitizer.rules.add_empty_element("foo")
        assert sanitizer.clean("<foo>bar") == "<foo />bar"

    def test_normalizer_does_not_resurrect_stripped_markup(self) -> None:
        sanitizer = Sanitizer(use_normalizer=True)
        out = sanitizer.clean('<div onclick="x()"><applet><p>gone</p></applet><span>kept</span></div>')
        assert out == "<div><span>kept</span></div>"


if __name__ == "__main__":
    unittest.main()
