import contextlib
import io
import os
import pathlib
import tempfile
import unittest
from unittest import mock

from openriscv.exceptions import ResourceError
from openriscv.util import (
    log,
    LogType,
    read_lines,
    trim_comments,
)


class TestLog(unittest.TestCase):
    def output(self, silencelog, *args, **kwargs):
        stream = io.StringIO()
        env = dict(os.environ)
        env.pop("SILENCELOG", None)
        if silencelog is not None:
            env["SILENCELOG"] = silencelog
        with mock.patch.dict(os.environ, env, clear=True):
            with contextlib.redirect_stdout(stream):
                log(*args, **kwargs)
        return stream.getvalue()

    def test_default(self):
        self.assertEqual(self.output(None, "hello", 1), "hello 1\n")

    def test_silenced(self):
        self.assertEqual(self.output("true", "hello"), "")
        self.assertEqual(self.output("", "hello"), "")
        self.assertEqual(self.output("false", "hello"), "hello\n")

    def test_kinds(self):
        self.assertEqual(self.output("skip_line", "dropped",
            kind=LogType.SkipLine), "")
        self.assertEqual(self.output("skip_line", "loading",
            kind=LogType.Stage), "")
        self.assertEqual(self.output("!stage", "loading",
            kind=LogType.Stage), "loading\n")
        self.assertEqual(self.output("*,!stage", "loading",
            kind=LogType.Stage), "loading\n")
        self.assertEqual(self.output("*,!stage", "hello"), "")


class TestReadLines(unittest.TestCase):
    def test_trim_comments(self):
        self.assertEqual(trim_comments("add r rv32i # base"), "add r rv32i ")
        self.assertEqual(trim_comments("# comment"), "")
        self.assertEqual(trim_comments("lui u"), "lui u")

    def test_read_lines(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir, "codecs")
            path.write_text("# codecs\n\nr r rd rs1 rs2 # three\nnone none\n",
                encoding="UTF-8")
            self.assertEqual(list(read_lines(path)),
                ["", "", "r r rd rs1 rs2 ", "none none"])

    def test_resource_error(self):
        cause = FileNotFoundError(2, "No such file or directory")
        error = ResourceError("opcodes", cause)
        self.assertIsInstance(error, OSError)
        self.assertEqual(error.resource, "opcodes")
        self.assertIs(error.cause, cause)
        self.assertIn("opcodes", str(error))


if __name__ == "__main__":
    unittest.main()
