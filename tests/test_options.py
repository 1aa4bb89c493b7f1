from django.utils import translation

from app.platform.profilefields.options import OptionSet, parse_option_labels
from app.platform.profilefields.utils import format_string, join_values, split_value

from tests.helpers import MULTILANG_RED


def test_parse_option_labels_splits_on_newline():
    assert parse_option_labels("Red\nGreen\nBlue") == ["Red", "Green", "Blue"]


def test_parse_option_labels_without_configuration():
    assert parse_option_labels(None) == []


def test_option_keys_are_the_raw_labels():
    options = OptionSet.from_config("Red\nGreen\nBlue")

    assert len(options) == 3
    assert options.keys() == ["Red", "Green", "Blue"]
    assert options.labels() == ["Red", "Green", "Blue"]


def test_required_field_gets_choose_placeholder_first():
    options = OptionSet.from_config("Red\nGreen\nBlue", required=True)

    assert len(options) == 4
    assert options.keys() == ["", "Red", "Green", "Blue"]
    assert options[""] == "Choose..."


def test_duplicate_labels_collapse_and_keep_first_position():
    options = OptionSet.from_config("Red\nGreen\nRed\nBlue")

    assert options.keys() == ["Red", "Green", "Blue"]


def test_missing_configuration_gives_empty_set():
    assert len(OptionSet.from_config(None)) == 0
    assert OptionSet.from_config(None, required=True).keys() == [""]


def test_labels_are_formatted_for_display():
    options = OptionSet.from_config(MULTILANG_RED + "\n<b>Blue</b>")

    assert options[MULTILANG_RED] == "Red"
    assert options["<b>Blue</b>"] == "Blue"


def test_find_key_returns_none_when_missing():
    options = OptionSet.from_config("Red\nBlue")

    assert options.find_key("Purple") is None
    assert options.find_key("Blue") == "Blue"


def test_find_key_finds_falsy_key():
    options = OptionSet.from_config("0\n1")

    assert options.find_key("0") == "0"
    assert options.resolve("0") == "0"


def test_resolve_prefers_key_then_label():
    options = OptionSet.from_config(MULTILANG_RED)

    assert options.resolve(MULTILANG_RED) == MULTILANG_RED
    assert options.resolve("Red") == MULTILANG_RED
    assert options.resolve("Rouge") is None


def test_unhashable_value_is_not_a_key():
    options = OptionSet.from_config("Red")

    assert ["Red"] not in options


def test_format_string_picks_active_language():
    assert format_string(MULTILANG_RED) == "Red"
    with translation.override("fr"):
        assert format_string(MULTILANG_RED) == "Rouge"


def test_format_string_falls_back_to_first_language():
    text = '<span lang="de" class="multilang">Rot</span><span lang="fr" class="multilang">Rouge</span>'

    assert format_string(text) == "Rot"


def test_format_string_strips_tags_and_whitespace():
    assert format_string("  <em>Green</em> ") == "Green"
    assert format_string(None) == ""


def test_split_and_join_values():
    assert split_value("Red, Blue") == ["Red", "Blue"]
    assert split_value(None) is None
    assert join_values(["Red", "Blue"]) == "Red, Blue"
