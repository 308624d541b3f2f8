"""Tests for the riv command-line interface."""

from __future__ import annotations

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from riv import __version__
from riv._cli import main


def _run(argv, stdin_text=None):
    """Run the CLI; returns (exit_code, stdout, stderr)."""
    out, err = io.StringIO(), io.StringIO()
    code = 0
    old_stdin = sys.stdin
    if stdin_text is not None:
        sys.stdin = io.TextIOWrapper(io.BytesIO(stdin_text.encode("utf-8")), encoding="utf-8")
    try:
        with redirect_stdout(out), redirect_stderr(err):
            try:
                main(argv)
            except SystemExit as e:
                code = e.code
    finally:
        sys.stdin = old_stdin
    return code, out.getvalue(), err.getvalue()


class TestCommands(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_version(self):
        code, out, _ = _run(["version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "riv {} (format 1.0)".format(__version__))

    def test_no_command(self):
        code, out, _ = _run([])
        self.assertEqual(code, 1)
        self.assertIn("usage", out)

    def test_encode(self):
        path = self._write("in.json", '{"name": "Ann", "tags": ["x", "y"]}')
        code, out, _ = _run(["encode", "--name", "user", "--input", path])
        self.assertEqual(code, 0)
        self.assertEqual(out, '@user\n  :name => "Ann"\n  :tags => <"x" "y">\n')

    def test_encode_from_stdin(self):
        code, out, _ = _run(["encode", "--indent", "4"], stdin_text='{"a": {"b": 1}}')
        self.assertEqual(code, 0)
        self.assertEqual(out, "@\n    :a =>\n        @\n                :b => 1\n")

    def test_decode(self):
        path = self._write("in.riv", '@user\n  :when => #date:"2024-01-01T00:00:00.000Z"\n'
                                     "  :n => #big:12\n  :s => #set:<1>\n")
        code, out, _ = _run(["decode", "-i", path])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"when": "2024-01-01T00:00:00.000Z", "n": "12", "s": [1]})

    def test_decode_compact(self):
        path = self._write("in.riv", "<1 2>")
        _, out, _ = _run(["decode", "--compact", "-i", path])
        self.assertEqual(out.strip(), "[1, 2]")

    def test_minify(self):
        path = self._write("in.riv", "@p\n  :a => 1\n  :b => <1 2>\n")
        code, out, _ = _run(["minify", "-i", path])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "@p :a => 1 :b => <1 2>")

    def test_check(self):
        path = self._write("in.riv", "@p\n  :a => 1\n")
        self.assertEqual(_run(["check", "-i", path])[1].strip(), "OK: record @p")
        path = self._write("seq.riv", "<1>")
        self.assertEqual(_run(["check", "-i", path])[1].strip(), "OK: sequence")

    def test_demo(self):
        code, out, _ = _run(["demo"])
        self.assertEqual(code, 0)
        self.assertIn("@user", out)
        self.assertIn("Equal? True", out)
        self.assertIn("Validation (valid): True", out)
        self.assertIn("Validation (invalid): False", out)
        self.assertIn('#date:"1704067200000"', out)


class TestErrors(unittest.TestCase):
    def test_grammar_error(self):
        code, _, err = _run(["check"], stdin_text="<1 ?>")
        self.assertEqual(code, 2)
        self.assertTrue(err.startswith("riv: error [ERR_GRAMMAR]:"))
        self.assertIn("context", err)

    def test_limit_error(self):
        code, _, err = _run(["decode"], stdin_text="<" * 150 + ">" * 150)
        self.assertEqual(code, 2)
        self.assertIn("[ERR_LIMIT_DEPTH]", err)

    def test_bad_json(self):
        code, _, err = _run(["encode"], stdin_text="{nope")
        self.assertEqual(code, 2)
        self.assertIn("[ERR_GRAMMAR]", err)

    def test_bad_indent(self):
        code, _, err = _run(["encode", "--indent", "0"], stdin_text="1")
        self.assertEqual(code, 2)
        self.assertIn("[ERR_CONFIG]", err)

    def test_bad_record_name(self):
        code, _, err = _run(["encode", "--name", "a<b"], stdin_text="{}")
        self.assertEqual(code, 2)
        self.assertIn("[ERR_GRAMMAR]", err)


if __name__ == "__main__":
    unittest.main()
