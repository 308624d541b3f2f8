"""Decoder tests for indentation-driven record blocks.

A record block has no closing delimiter, so these cover where a block
stops: sibling lines at the base indentation, deeper and shallower lines,
blank lines, column-0 structure characters, and end of input.
"""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from riv import ERR_GRAMMAR, GrammarError, Record, ValueMap, deserialize, serialize
from riv._config import snapshot
from riv._decoder import Decoder


class TestBlockBoundaries(unittest.TestCase):
    def test_siblings_at_base(self):
        self.assertEqual(deserialize("@\n  :a => 1\n  :b => 2"), {"a": 1, "b": 2})

    def test_deeper_line_stays_in_block(self):
        self.assertEqual(deserialize("@\n  :a => 1\n    :b => 2"), {"a": 1, "b": 2})

    def test_shallower_line_ends_nested_block(self):
        text = "@\n  :a =>\n    @\n      :x => 1\n     :y => 2\n  :b => 3"
        self.assertEqual(deserialize(text), {"a": {"x": 1}, "y": 2, "b": 3})

    def test_nested_block_returns_to_parent(self):
        text = "@\n  :a =>\n    @\n        :x => 1\n        :z => 2\n  :b => 3"
        self.assertEqual(deserialize(text), {"a": {"x": 1, "z": 2}, "b": 3})

    def test_two_levels_close_at_once(self):
        text = (
            "@\n"
            "  :a =>\n"
            "    @\n"
            "        :b =>\n"
            "            @\n"
            "                :c => 1\n"
            "  :d => 2\n"
        )
        self.assertEqual(deserialize(text), {"a": {"b": {"c": 1}}, "d": 2})

    def test_blank_lines_inside_block(self):
        text = "@\n  :a => 1\n\n   \n  :b => 2\n"
        self.assertEqual(deserialize(text), {"a": 1, "b": 2})

    def test_block_at_end_of_input(self):
        for text in ("@\n  :a => 1", "@\n  :a => 1\n", "@\n  :a => 1\n\n  \n"):
            with self.subTest(text=text):
                self.assertEqual(deserialize(text), {"a": 1})

    def test_column_zero_bracket_ends_block(self):
        text = "<\n@\n  :a => 1\n>"
        self.assertEqual(deserialize(text), [{"a": 1}])

    def test_column_zero_record_ends_block(self):
        text = "<\n@\n  :a => 1\n@\n  :b => 2\n>"
        self.assertEqual(deserialize(text), [{"a": 1}, {"b": 2}])

    def test_block_at_column_zero(self):
        self.assertEqual(deserialize("@\n:a => 1\n:b => 2"), {"a": 1, "b": 2})

    def test_empty_record_value_keeps_siblings(self):
        text = "@\n  :a => @\n  :b => 1"
        value = deserialize(text)
        self.assertEqual(value, {"a": {}, "b": 1})
        self.assertIsInstance(value["a"], Record)

    def test_named_empty_record_value(self):
        value = deserialize("@\n  :a => @point\n  :b => 1")
        self.assertEqual(value["a"].name, "point")
        self.assertEqual(value["b"], 1)

    def test_empty_record_value_at_end(self):
        self.assertEqual(deserialize("@\n  :a => 1\n  :b => @"), {"a": 1, "b": {}})

    def test_value_on_following_line(self):
        self.assertEqual(deserialize("@\n  :a =>\n    <1 2>\n  :b => 3"), {"a": [1, 2], "b": 3})

    def test_multiline_sequence_value(self):
        text = '@\n  :a =>\n    <\n      "aaaaaaaaaaaaaaaaaaaa"\n      "b"\n    >\n  :c => 1'
        self.assertEqual(deserialize(text), {"a": ["aaaaaaaaaaaaaaaaaaaa", "b"], "c": 1})

    def test_record_inside_map_value(self):
        text = serialize({"m": ValueMap({1: {"x": [1, 2]}})})
        self.assertEqual(deserialize(text), {"m": {1: {"x": [1, 2]}}})


class TestEmptyRecordItems(unittest.TestCase):
    """Empty records written one per line inside a multi-line sequence."""

    LONG = "x" * 70

    def _layouts(self, empty):
        return [[empty, self.LONG], [self.LONG, empty, "y"], [self.LONG, empty]]

    def test_header_followed_by_sibling_item(self):
        self.assertEqual(deserialize('<\n  @\n  "a"\n>'), [{}, "a"])
        self.assertEqual(deserialize("<\n  1\n  @\n>"), [1, {}])

    def test_top_level_sequence(self):
        for empty in (Record(), Record(name="n")):
            for items in self._layouts(empty):
                with self.subTest(name=empty.name, items=len(items)):
                    text = serialize(items)
                    self.assertIn("\n", text)
                    back = deserialize(text)
                    self.assertEqual(back, items)
                    self.assertEqual(back[items.index(empty)].name, empty.name)

    def test_sequence_as_entry_value(self):
        for empty in (Record(), Record(name="n")):
            for items in self._layouts(empty):
                with self.subTest(name=empty.name, items=len(items)):
                    value = {"a": items, "b": 1}
                    back = deserialize(serialize(value))
                    self.assertEqual(back, value)
                    self.assertEqual(back["a"][items.index(empty)].name, empty.name)

    def test_nested_sequence(self):
        value = [[self.LONG, {}]]
        self.assertEqual(deserialize(serialize(value)), value)

    def test_map_value_named_empty_record(self):
        value = {"m": ValueMap({self.LONG: Record(name="n")})}
        back = deserialize(serialize(value))
        self.assertEqual(back, value)
        self.assertEqual(back["m"][self.LONG].name, "n")


class TestLenientLines(unittest.TestCase):
    def test_stray_lines_are_skipped(self):
        text = "@\n  :a => 1\n  # a note\n  just text\n  :b => 2"
        self.assertEqual(deserialize(text), {"a": 1, "b": 2})

    def test_trailing_text_after_value_is_skipped(self):
        self.assertEqual(deserialize("@\n  :a => 1 extra\n  :b => 2"), {"a": 1, "b": 2})

    def test_duplicate_key_last_wins(self):
        value = deserialize("@\n  :a => 1\n  :a => 2")
        self.assertEqual(value, {"a": 2})

    def test_spacing_around_arrow(self):
        self.assertEqual(deserialize("@\n  :a=>1\n  :b   =>   2"), {"a": 1, "b": 2})

    def test_crlf_line_endings(self):
        self.assertEqual(deserialize("@\r\n  :a => 1\r\n  :b => 2\r\n"), {"a": 1, "b": 2})


class TestHeaderLine(unittest.TestCase):
    def test_name_stops_at_bracket(self):
        self.assertEqual(deserialize("<@a @b>"), [{}, {}])
        self.assertEqual([r.name for r in deserialize("<@a @b>")], ["a", "b"])

    def test_content_on_header_line_means_empty(self):
        self.assertEqual(deserialize("<@ 1>"), [{}, 1])

    def test_missing_arrow(self):
        with self.assertRaises(GrammarError) as ctx:
            deserialize("@\n  :a -> 1")
        self.assertEqual(ctx.exception.code, ERR_GRAMMAR)
        self.assertIn("'=>'", ctx.exception.message)


class TestCursor(unittest.TestCase):
    def test_cursor_after_value(self):
        parser = Decoder('"ab" rest', snapshot())
        self.assertEqual(parser.parse_value(0, -1), "ab")
        self.assertEqual(parser.pos, 4)

    def test_record_rewinds_to_dedented_line(self):
        text = "@\n  :a => 1\nnext"
        parser = Decoder(text, snapshot())
        parser.parse_value(0, -1)
        self.assertEqual(text[parser.pos:], "next")


if __name__ == "__main__":
    unittest.main()
