"""Tests for translation key suggestion."""

import re

import pytest

from i18n_sync.key_generator import is_key_like, suggest_key

KEY_CHARS = re.compile(r'^[a-z0-9_]+$')


class TestSuggestKey:
    """Suggested keys from layer names and text content."""

    @pytest.mark.parametrize("layer_name, expected", [
        ("home.title", "home.title"),
        ("Button_Submit", "button_submit"),
        ("settings.v2.Label", "settings.v2.label"),
    ])
    def test_key_like_layer_name_is_used(self, layer_name: str, expected: str) -> None:
        assert suggest_key(layer_name, "Whatever the text says") == expected

    def test_key_like_layer_name_ignores_text(self) -> None:
        assert suggest_key("nav.home", "Home") == suggest_key("nav.home", "Startseite")

    @pytest.mark.parametrize("layer_name", [
        "Frame 12",        # whitespace
        "1st-label",       # leading digit
        "x",               # too short for the pattern
        "a" * 50,          # too long
        "Überschrift",     # non-ASCII letter
        "",
    ])
    def test_non_key_layer_name_falls_back_to_text(self, layer_name: str) -> None:
        assert suggest_key(layer_name, "Sign in now") == "sign_in_now"

    def test_trailing_newline_is_not_key_like(self) -> None:
        assert suggest_key("title\n", "Hello world") == "hello_world"

    def test_text_is_stripped_of_special_characters(self) -> None:
        assert suggest_key("Text", "  Hello, World!  ") == "hello_world"

    def test_whitespace_runs_collapse(self) -> None:
        assert suggest_key("Text", "Save \t and\n\ncontinue") == "save_and_continue"

    def test_text_key_is_truncated(self) -> None:
        key = suggest_key("Text", "This is a rather long sentence that keeps going on")
        assert len(key) == 30
        assert key == "this_is_a_rather_long_sentence"

    @pytest.mark.parametrize("text", ["!!!", "¿¡", "日本語", "", "   "])
    def test_empty_derivation_uses_fallback(self, text: str) -> None:
        assert suggest_key("Text", text) == "text"

    @pytest.mark.parametrize("text", [
        "Grüße aus München",
        "100% free — no strings attached, honestly!",
        "A",
        "   leading and trailing   ",
        "tabs\tand\nnewlines",
    ])
    def test_text_keys_are_well_formed(self, text: str) -> None:
        key = suggest_key("Some Layer", text)
        assert key
        assert len(key) <= 30
        assert KEY_CHARS.match(key)

    def test_none_inputs_do_not_raise(self) -> None:
        assert suggest_key(None, None) == "text"


class TestIsKeyLike:
    def test_pattern_boundaries(self) -> None:
        assert is_key_like("ab")
        assert is_key_like("a" * 49)
        assert not is_key_like("a" * 50)
        assert not is_key_like("a-b")
