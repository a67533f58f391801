from __future__ import annotations

import unittest

from rinsehtml.rules import (
    ACCEPTABLE_ATTRIBUTES,
    ACCEPTABLE_ELEMENTS,
    EMPTY_ELEMENTS,
    NORMALIZER_OPTIONS,
    UNACCEPTABLE_ELEMENTS,
    RuleSet,
)


class TestRuleSetDefaults(unittest.TestCase):
    def test_default_tables_are_loaded(self) -> None:
        rules = RuleSet()
        assert rules.acceptable_elements == frozenset(ACCEPTABLE_ELEMENTS)
        assert rules.acceptable_attributes == frozenset(ACCEPTABLE_ATTRIBUTES)
        assert rules.empty_elements == frozenset(EMPTY_ELEMENTS)
        assert rules.unacceptable_elements == frozenset(UNACCEPTABLE_ELEMENTS)

    def test_default_lookups(self) -> None:
        rules = RuleSet()
        assert rules.is_acceptable_element("p")
        assert rules.is_acceptable_element("img")
        assert not rules.is_acceptable_element("script")
        assert not rules.is_acceptable_element("blink")
        assert rules.is_unacceptable_element("script")
        assert rules.is_unacceptable_element("applet")
        assert rules.is_acceptable_attribute("href")
        assert rules.is_acceptable_attribute("xml:lang")
        assert not rules.is_acceptable_attribute("onclick")
        assert not rules.is_acceptable_attribute("style")
        assert rules.is_empty_element("br")
        assert not rules.is_empty_element("p")

    def test_lookups_are_total(self) -> None:
        rules = RuleSet()
        for name in ("", " ", "P", "x:y", "\x00"):
            assert not rules.is_acceptable_element(name)
            assert not rules.is_unacceptable_element(name)
            assert not rules.is_empty_element(name)
            assert rules.rebase_attributes_for(name) == frozenset()

    def test_rebase_targets(self) -> None:
        rules = RuleSet()
        assert rules.rebase_attributes_for("a") == frozenset({"href"})
        assert rules.rebase_attributes_for("img") == frozenset({"longdesc", "src", "usemap"})
        assert rules.rebase_attributes_for("p") == frozenset()

    def test_instances_do_not_share_tables(self) -> None:
        first = RuleSet()
        second = RuleSet()
        first.add_acceptable_element("video")
        assert first.is_acceptable_element("video")
        assert not second.is_acceptable_element("video")

    def test_normalizer_options_are_a_fresh_copy(self) -> None:
        rules = RuleSet()
        options = rules.normalizer_options()
        assert options == NORMALIZER_OPTIONS
        options["use_trailing_solidus"] = False
        assert rules.normalizer_options()["use_trailing_solidus"] is True


class TestRuleSetMutation(unittest.TestCase):
    def test_accepting_removes_from_unacceptable(self) -> None:
        rules = RuleSet()
        rules.add_acceptable_element("script")
        assert rules.is_acceptable_element("script")
        assert not rules.is_unacceptable_element("script")

    def test_unaccepting_removes_from_acceptable(self) -> None:
        rules = RuleSet()
        rules.add_unacceptable_element(["h1", "h2"])
        assert not rules.is_acceptable_element("h1")
        assert not rules.is_acceptable_element("h2")
        assert rules.is_unacceptable_element("h1")
        assert "h1" not in rules.acceptable_elements

    def test_removing_unacceptable_does_not_accept(self) -> None:
        rules = RuleSet()
        rules.remove_unacceptable_element("script")
        assert not rules.is_unacceptable_element("script")
        assert not rules.is_acceptable_element("script")

    def test_add_acceptable_element_with_empty_flag(self) -> None:
        rules = RuleSet()
        rules.add_acceptable_element(["embed", "source"], empty=True)
        assert rules.is_acceptable_element("embed")
        assert rules.is_empty_element("embed")
        assert rules.is_empty_element("source")

    def test_remove_acceptable_element(self) -> None:
        rules = RuleSet()
        rules.remove_acceptable_element(["img", "h1"])
        assert not rules.is_acceptable_element("img")
        assert not rules.is_acceptable_element("h1")
        assert not rules.is_unacceptable_element("img")

    def test_remove_empty_element_keeps_acceptability(self) -> None:
        rules = RuleSet()
        rules.remove_empty_element(["img", "br"])
        assert not rules.is_empty_element("img")
        assert rules.is_acceptable_element("img")

    def test_attribute_mutators(self) -> None:
        rules = RuleSet()
        rules.add_acceptable_attribute(["austen:id", "austen:footnote"])
        assert rules.is_acceptable_attribute("austen:id")
        rules.remove_acceptable_attribute("id")
        assert not rules.is_acceptable_attribute("id")

    def test_unknown_names_are_noops(self) -> None:
        rules = RuleSet()
        before = (rules.acceptable_elements, rules.acceptable_attributes, rules.empty_elements)
        rules.remove_acceptable_element("no-such-element")
        rules.remove_unacceptable_element("no-such-element")
        rules.remove_acceptable_attribute("no-such-attribute")
        rules.remove_empty_element("no-such-element")
        rules.remove_rebase_target("no-such-element")
        assert (rules.acceptable_elements, rules.acceptable_attributes, rules.empty_elements) == before

    def test_single_string_is_one_name(self) -> None:
        rules = RuleSet()
        rules.add_acceptable_element("video")
        assert rules.is_acceptable_element("video")
        assert not rules.is_acceptable_element("v")

    def test_replacing_tables(self) -> None:
        rules = RuleSet()
        rules.acceptable_elements = ["p", "b"]
        assert rules.acceptable_elements == frozenset({"p", "b"})
        rules.acceptable_attributes = ["id"]
        assert rules.acceptable_attributes == frozenset({"id"})
        rules.empty_elements = ["br"]
        assert rules.empty_elements == frozenset({"br"})

    def test_replacing_unacceptable_table_drops_acceptable(self) -> None:
        rules = RuleSet()
        rules.unacceptable_elements = ["p", "style"]
        assert rules.unacceptable_elements == frozenset({"p", "style"})
        assert not rules.is_acceptable_element("p")
        assert not rules.is_unacceptable_element("script")

    def test_unacceptable_wins_on_overlap(self) -> None:
        rules = RuleSet(acceptable_elements=["p", "script"], unacceptable_elements=["script"])
        assert not rules.is_acceptable_element("script")
        assert rules.is_unacceptable_element("script")
        assert rules.acceptable_elements == frozenset({"p"})

    def test_rebase_target_mutators(self) -> None:
        rules = RuleSet()
        rules.set_rebase_attributes("video", ["src", "poster"])
        assert rules.rebase_attributes_for("video") == frozenset({"src", "poster"})
        rules.remove_rebase_target("a")
        assert rules.rebase_attributes_for("a") == frozenset()

    def test_copy_is_independent(self) -> None:
        rules = RuleSet()
        clone = rules.copy()
        clone.add_acceptable_element("script")
        clone.set_rebase_attributes("video", "src")
        assert rules.is_unacceptable_element("script")
        assert rules.rebase_attributes_for("video") == frozenset()
        assert clone.is_acceptable_element("script")


if __name__ == "__main__":
    unittest.main()
