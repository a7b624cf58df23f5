"""Tests for text unit extraction from node trees."""

from types import SimpleNamespace

from helpers import frame, text_node
from i18n_sync.extractor import extract_text_units, iter_nodes


class TestExtractTextUnits:
    """Depth-first discovery of translatable text."""

    def test_depth_first_document_order(self) -> None:
        tree = [
            frame("1", [
                text_node("1:1", "Title"),
                frame("1:2", [
                    text_node("1:2:1", "Nested first"),
                    text_node("1:2:2", "Nested second"),
                ]),
                text_node("1:3", "Footer"),
            ]),
            text_node("2", "Second root"),
        ]

        units = extract_text_units(tree)

        assert [u.id for u in units] == ["1:1", "1:2:1", "1:2:2", "1:3", "2"]
        assert [u.text for u in units] == ["Title", "Nested first", "Nested second", "Footer", "Second root"]

    def test_digit_only_text_is_skipped(self) -> None:
        units = extract_text_units([frame("1", [text_node("a", "12345"), text_node("b", " 42 ")])])
        assert units == []

    def test_empty_and_whitespace_text_is_skipped(self) -> None:
        units = extract_text_units([text_node("a", ""), text_node("b", "   \n"), text_node("c", "ok")])
        assert [u.id for u in units] == ["c"]

    def test_mixed_digits_and_letters_are_kept(self) -> None:
        units = extract_text_units([text_node("a", "3 items"), text_node("b", "1.5")])
        assert [u.text for u in units] == ["3 items", "1.5"]

    def test_text_is_trimmed_and_key_suggested(self) -> None:
        units = extract_text_units([
            text_node("a", "  Sign in  ", name="auth.sign_in"),
            text_node("b", "Forgot password?", name="Text 3"),
        ])

        assert units[0].text == "Sign in"
        assert units[0].layer_name == "auth.sign_in"
        assert units[0].suggested_key == "auth.sign_in"
        assert units[1].suggested_key == "forgot_password"

    def test_nodes_without_content_are_traversed(self) -> None:
        tree = [{"id": "g", "type": "GROUP", "children": [
            {"id": "r", "type": "RECTANGLE"},
            text_node("t", "Inside group"),
        ]}]
        assert [u.id for u in extract_text_units(tree)] == ["t"]

    def test_unique_text_descendants_produce_one_unit_each(self) -> None:
        children = [text_node(f"n{i}", f"Label number {i}") for i in range(25)]
        units = extract_text_units([frame("root", children)])
        assert len(units) == 25
        assert [u.id for u in units] == [f"n{i}" for i in range(25)]

    def test_attribute_style_nodes(self) -> None:
        leaf = SimpleNamespace(id="x", type="TEXT", name="cta.buy", characters="Buy now")
        root = SimpleNamespace(id="f", type="FRAME", name="Frame", children=[leaf])

        units = extract_text_units([root])

        assert len(units) == 1
        assert units[0].suggested_key == "cta.buy"

    def test_deep_nesting_does_not_recurse(self) -> None:
        node = text_node("leaf", "Deep")
        for depth in range(5000):
            node = frame(f"f{depth}", [node])

        units = extract_text_units([node])

        assert [u.id for u in units] == ["leaf"]

    def test_empty_selection(self) -> None:
        assert extract_text_units([]) == []
        assert extract_text_units(None) == []


def test_iter_nodes_visits_every_node_once() -> None:
    tree = [frame("a", [frame("b", [text_node("c", "x")]), text_node("d", "y")])]
    assert [n["id"] for n in iter_nodes(tree)] == ["a", "b", "c", "d"]
