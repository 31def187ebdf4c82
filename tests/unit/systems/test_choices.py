"""Tests for choice providers and answer parsing."""

from skyward.systems.choices import (
    AutoChoices,
    ChoiceConstraints,
    ChoiceKind,
    ChoiceProvider,
    ScriptedChoices,
    match_name,
    parse_option,
    parse_yes_no,
)


class TestParsing:
    def test_yes_no(self):
        assert parse_yes_no("y")
        assert parse_yes_no(" YES ")
        assert not parse_yes_no("n", default=True)
        assert parse_yes_no("", default=True)
        assert not parse_yes_no("maybe")

    def test_option(self):
        assert parse_option("1", 4) == 0
        assert parse_option(" 4 ", 4) == 3
        assert parse_option("5", 4) is None
        assert parse_option("0", 4) is None
        assert parse_option("two", 4) is None
        assert parse_option(None, 4) is None


class TestMatchName:
    def test_exact_ignores_case(self):
        assert match_name("riley", ["Riley", "Quinn"]) == "Riley"

    def test_fuzzy(self):
        assert match_name("Rily", ["Riley", "Quinn"]) == "Riley"

    def test_no_match(self):
        assert match_name("Zed", ["Riley", "Quinn"]) is None
        assert match_name("", ["Riley"]) is None


class TestProviders:
    def test_scripted_then_defaults(self):
        choices = ScriptedChoices(["2"])
        menu = ChoiceConstraints.option(["a", "b", "c"], default=3)
        assert choices.ask_choice("Pick: ", menu) == "2"
        assert choices.ask_choice("Pick: ", menu) == "3"
        assert choices.asked == ["Pick: ", "Pick: "]
        assert choices.remaining == 0

    def test_push(self):
        choices = ScriptedChoices()
        choices.push("y", "n")
        assert choices.remaining == 2

    def test_auto_takes_default(self):
        assert AutoChoices().ask_choice("Go? ", ChoiceConstraints.yes_no(True)) == "y"
        assert AutoChoices().ask_choice("Go? ", ChoiceConstraints.yes_no()) == "n"

    def test_providers_satisfy_protocol(self):
        assert isinstance(ScriptedChoices(), ChoiceProvider)
        assert isinstance(AutoChoices(), ChoiceProvider)

    def test_constraint_kinds(self):
        assert ChoiceConstraints.name(["Riley"]).kind == ChoiceKind.NAME
        assert ChoiceConstraints().kind == ChoiceKind.TEXT
