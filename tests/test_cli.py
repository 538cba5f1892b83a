import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from life_core.cli import main


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.seed = os.path.join(self._tmp.name, "blinker.txt")
        with open(self.seed, "w", encoding="utf-8") as f:
            f.write(".....\n.....\n.###.\n.....\n.....\n")

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_given_seed_when_stepping_once_then_prints_next_generation(self):
        code, out, err = self._run(self.seed, "--steps", "1")
        self.assertEqual(code, 0)
        self.assertEqual(out, ".....\n..#..\n..#..\n..#..\n.....\n")
        self.assertIn("generation=1 delta=4", err)

    def test_given_svg_format_when_running_then_svg_on_stdout(self):
        code, out, _ = self._run(self.seed, "--format", "svg", "--steps", "2", "--cell-size", "4")
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("<svg"))
        self.assertEqual(out.count("<rect"), 3)
        self.assertIn("t = 2, Δ = 4", out)

    def test_given_output_path_when_running_then_file_written(self):
        target = os.path.join(self._tmp.name, "out.txt")
        code, out, _ = self._run(self.seed, "--output", target)
        self.assertEqual(code, 0)
        self.assertEqual(out, "")
        with open(target, encoding="utf-8") as f:
            self.assertEqual(f.read().splitlines()[2], ".###.")

    def test_given_custom_glyphs_when_running_then_seed_and_output_use_them(self):
        seed = os.path.join(self._tmp.name, "custom.txt")
        with open(seed, "w", encoding="utf-8") as f:
            f.write("o_o,_o_")
        code, out, _ = self._run(seed, "--alive", "o", "--dead", "_", "--separator", ",")
        self.assertEqual(code, 0)
        self.assertEqual(out, "o_o,_o_\n")

    def test_given_invalid_seed_when_running_then_exit_code_2(self):
        bad = os.path.join(self._tmp.name, "bad.txt")
        with open(bad, "w", encoding="utf-8") as f:
            f.write("##\n###\n")
        code, out, err = self._run(bad)
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("line 1", err)

    def test_given_multi_character_glyph_when_parsing_then_usage_error(self):
        with self.assertRaises(SystemExit) as ctx:
            self._run(self.seed, "--alive", "##")
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)
