from __future__ import annotations

import unittest

from rinsehtml import ConfigurationError, HookKind, Hooks, Sanitizer
from rinsehtml.hooks import accept


class TestHookSlots(unittest.TestCase):
    def test_defaults_accept(self) -> None:
        hooks = Hooks()
        for kind in HookKind:
            assert hooks.get(kind) is accept
        assert accept(object(), object()) is True

    def test_set_and_unset(self) -> None:
        hooks = Hooks()

        def veto(*_args):
            return False

        hooks.set(HookKind.TEXT, veto)
        assert hooks.on_text is veto
        hooks.unset(HookKind.TEXT)
        assert hooks.on_text is accept

    def test_non_callable_is_ignored(self) -> None:
        hooks = Hooks()

        def veto(*_args):
            return False

        hooks.set(HookKind.OUTPUT, veto)
        hooks.set(HookKind.OUTPUT, "not a function")
        hooks.set(HookKind.OUTPUT, None)
        assert hooks.on_output is veto

    def test_kind_accepts_names(self) -> None:
        hooks = Hooks()

        def veto(*_args):
            return False

        hooks.set("text", veto)
        assert hooks.on_text is veto
        hooks.set("on_tag_open", veto)
        assert hooks.on_tag_open is veto
        hooks.unset("TEXT")
        assert hooks.on_text is accept

    def test_start_and_end_tag_aliases(self) -> None:
        hooks = Hooks()

        def veto(*_args):
            return False

        hooks.set("start_tag", veto)
        hooks.set("END_TAG", veto)
        assert hooks.on_tag_open is veto
        assert hooks.on_tag_close is veto
        hooks.unset("start_tag")
        assert hooks.on_tag_open is accept
        assert hooks.get("end_tag") is veto

    def test_unknown_kind_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            Hooks().set("start_tag_please", lambda *_: True)


class TestHooksInSanitizer(unittest.TestCase):
    def test_text_veto_keeps_tags(self) -> None:
        sanitizer = Sanitizer()
        sanitizer.set_hook(HookKind.TEXT, lambda *_: False)
        assert sanitizer.clean("<p>hello</p>") == "<p></p>"

    def test_text_rewrite_is_escaped(self) -> None:
        sanitizer = Sanitizer()

        def shout(_sanitizer, text, _in_marked_section):
            text.data = text.data.upper() + " <3"
            return True

        sanitizer.set_hook(HookKind.TEXT, shout)
        assert sanitizer.clean("<p>hi</p>") == "<p>HI &lt;3</p>"

    def test_hooks_receive_the_sanitizer(self) -> None:
        sanitizer = Sanitizer()
        seen = []

        def record(owner, *_args):
            seen.append(owner)
            return True

        for kind in HookKind:
            sanitizer.set_hook(kind, record)
        sanitizer.clean("<p>x</p>")
        assert len(seen) == 4
        assert all(owner is sanitizer for owner in seen)

    def test_open_veto_drops_only_the_start_tag(self) -> None:
        sanitizer = Sanitizer()
        sanitizer.set_hook(HookKind.TAG_OPEN, lambda _s, tag: tag.name != "b")
        assert sanitizer.clean("<p><b>x</b></p>") == "<p>x</b></p>"
        sanitizer.set_hook(HookKind.TAG_CLOSE, lambda _s, tag: tag.name != "b")
        assert sanitizer.clean("<p><b>x</b></p>") == "<p>x</p>"

    def test_tag_rename(self) -> None:
        sanitizer = Sanitizer()

        def i_to_em(_sanitizer, tag):
            if tag.name == "i":
                tag.name = "em"
            return True

        sanitizer.set_hook(HookKind.TAG_OPEN, i_to_em)
        sanitizer.set_hook(HookKind.TAG_CLOSE, i_to_em)
        assert sanitizer.clean("<i>x</i>") == "<em>x</em>"

    def test_added_attributes_are_still_filtered(self) -> None:
        sanitizer = Sanitizer()

        def nofollow(_sanitizer, tag):
            if tag.name == "a":
                tag.attrs["rel"] = "nofollow"
                tag.attrs["onmouseover"] = "steal()"
            return True

        sanitizer.set_hook(HookKind.TAG_OPEN, nofollow)
        assert sanitizer.clean('<a href="/x">y</a>') == '<a href="/x" rel="nofollow">y</a>'

    def test_close_hook_sees_no_attributes(self) -> None:
        sanitizer = Sanitizer()
        seen = []

        def record(_sanitizer, tag):
            seen.append((tag.name, dict(tag.attrs)))
            return True

        sanitizer.set_hook(HookKind.TAG_CLOSE, record)
        sanitizer.clean('<a href="/x" title="t">y</a>')
        assert seen == [("a", {})]

    def test_renaming_into_unacceptable_excises(self) -> None:
        sanitizer = Sanitizer()

        def blink_to_script(_sanitizer, tag):
            if tag.name == "blink":
                tag.name = "script"
            return True

        sanitizer.set_hook(HookKind.TAG_OPEN, blink_to_script)
        sanitizer.set_hook(HookKind.TAG_CLOSE, blink_to_script)
        assert sanitizer.clean("<blink><b>gone</b></blink><i>kept</i>") == "<i>kept</i>"

    def test_output_replace(self) -> None:
        sanitizer = Sanitizer()

        def wrap(_sanitizer, fragments):
            fragments[:] = ["<div>", *fragments, "</div>"]
            return True

        sanitizer.set_hook(HookKind.OUTPUT, wrap)
        assert sanitizer.clean("<b>x</b>") == "<div><b>x</b></div>"

    def test_output_receives_fragment_list(self) -> None:
        sanitizer = Sanitizer()
        seen = []

        def record(_sanitizer, fragments):
            seen.append(list(fragments))
            return True

        sanitizer.set_hook(HookKind.OUTPUT, record)
        sanitizer.clean('<p class="c">a &amp; b</p>')
        assert seen == [['<p class="c">', "a &amp; b", "</p>"]]

    def test_output_veto_returns_empty_string(self) -> None:
        sanitizer = Sanitizer()
        sanitizer.set_hook(HookKind.OUTPUT, lambda *_: False)
        assert sanitizer.clean("<p>hello</p>") == ""

    def test_text_hook_not_called_for_suppressed_text(self) -> None:
        sanitizer = Sanitizer()
        seen = []

        def record(_sanitizer, text, _in_marked_section):
            seen.append(text.data)
            return True

        sanitizer.set_hook(HookKind.TEXT, record)
        sanitizer.clean("<applet>hidden<b>also hidden</b></applet>shown")
        assert seen == ["shown"]

    def test_text_hook_flags_marked_section_text(self) -> None:
        sanitizer = Sanitizer()
        seen = []

        def record(_sanitizer, text, in_marked_section):
            seen.append((text.data, in_marked_section))
            return True

        sanitizer.set_hook(HookKind.TEXT, record)
        sanitizer.clean("out<![CDATA[in]]>")
        assert seen == [("out", False), ("in", True)]

    def test_unset_hook_restores_default(self) -> None:
        sanitizer = Sanitizer()
        sanitizer.set_hook(HookKind.TEXT, lambda *_: False)
        sanitizer.unset_hook(HookKind.TEXT)
        assert sanitizer.clean("<p>hello</p>") == "<p>hello</p>"

    def test_setting_non_callable_is_noop(self) -> None:
        sanitizer = Sanitizer()
        sanitizer.set_hook(HookKind.TEXT, 42)
        assert sanitizer.clean("<p>hello</p>") == "<p>hello</p>"


if __name__ == "__main__":
    unittest.main()
