"""Tests for the process-wide configuration and per-call overrides."""

from __future__ import annotations

import os
import sys
import unittest
from datetime import datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from riv import (
    ERR_CONFIG,
    ConfigError,
    RivConfig,
    configure,
    deserialize,
    get_config,
    override,
    serialize,
)
from riv._config import snapshot

DAY = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestDefaults(unittest.TestCase):
    def test_values(self):
        cfg = RivConfig()
        self.assertEqual(cfg.indent, 2)
        self.assertEqual(cfg.max_depth, 100)
        self.assertEqual(cfg.max_length, 1_000_000)
        self.assertEqual(cfg.date_format, "iso")

    def test_snapshot_is_a_copy(self):
        snap = snapshot()
        self.assertIsNot(snap, get_config())
        self.assertEqual(snap, get_config())


class TestValidation(unittest.TestCase):
    def test_bad_values(self):
        cases = [
            {"indent": 0},
            {"indent": True},
            {"indent": 1.5},
            {"max_depth": -1},
            {"max_length": 0},
            {"date_format": "rfc2822"},
        ]
        for fields in cases:
            with self.subTest(fields=fields):
                with self.assertRaises(ConfigError) as ctx:
                    RivConfig(**fields).validate()
                self.assertEqual(ctx.exception.code, ERR_CONFIG)

    def test_per_call_config_is_validated(self):
        with self.assertRaises(ConfigError):
            serialize(1, config=RivConfig(indent=0))
        with self.assertRaises(ConfigError):
            deserialize("1", config=RivConfig(max_length=0))

    def test_zero_depth_allows_scalars_only(self):
        cfg = RivConfig(max_depth=0)
        self.assertEqual(serialize("x", config=cfg), '"x"')
        self.assertEqual(serialize([], config=cfg), "<>")


class TestConfigure(unittest.TestCase):
    def tearDown(self):
        configure(indent=2, max_depth=100, max_length=1_000_000, date_format="iso")

    def test_returns_previous(self):
        previous = configure(indent=4)
        self.assertEqual(previous, {"indent": 2})
        self.assertEqual(get_config().indent, 4)
        self.assertEqual(serialize({"a": 1}), "@\n    :a => 1")

    def test_unknown_field(self):
        with self.assertRaises(ConfigError):
            configure(colour="blue")

    def test_invalid_change_leaves_defaults(self):
        with self.assertRaises(ConfigError):
            configure(indent=3, date_format="bogus")
        self.assertEqual(get_config().indent, 2)
        self.assertEqual(get_config().date_format, "iso")

    def test_date_format(self):
        configure(date_format="timestamp")
        self.assertEqual(serialize(DAY), '#date:"1704067200000"')


class TestOverride(unittest.TestCase):
    def test_restores(self):
        with override(date_format="timestamp", indent=3):
            self.assertEqual(serialize(DAY), '#date:"1704067200000"')
            self.assertEqual(serialize({"a": 1}), "@\n   :a => 1")
        self.assertEqual(serialize(DAY), '#date:"2024-01-01T00:00:00.000Z"')
        self.assertEqual(get_config().indent, 2)

    def test_restores_after_error(self):
        with self.assertRaises(RuntimeError):
            with override(max_depth=5):
                raise RuntimeError("boom")
        self.assertEqual(get_config().max_depth, 100)

    def test_explicit_config_beats_default(self):
        with override(indent=8):
            self.assertEqual(serialize({"a": 1}, config=RivConfig()), "@\n  :a => 1")


if __name__ == "__main__":
    unittest.main()
