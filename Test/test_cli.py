import io
import logging
import os
import tempfile
import unittest
from pathlib import Path

from pnsynth.cli import main, read_transition_system, render_net
from pnsynth.Petri.net import PetriNet


class TestReadTransitionSystem(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, text):
        path = self.dir / "ts.txt"
        path.write_text(text)
        return path

    def test_parse(self):
        path = self._write("# cycle\ninitial s0\ns0 a s1 left\ns1 b s0 right\n\n")
        ts = read_transition_system(path)
        self.assertEqual(ts.initial_state, "s0")
        self.assertEqual(ts.states, ["s0", "s1"])
        self.assertEqual([(a.label, a.location) for a in ts.arcs], [("a", "left"), ("b", "right")])

    def test_missing_initial(self):
        with self.assertRaises(ValueError):
            read_transition_system(self._write("s0 a s1\n"))

    def test_malformed_line(self):
        with self.assertRaises(ValueError):
            read_transition_system(self._write("initial s0\ns0 a\n"))


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()
        logger = logging.getLogger("pnsynth")
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)

    def _run(self, *argv):
        out = io.StringIO()
        code = main(list(argv), out=out)
        return code, out.getvalue()

    def test_word_success(self):
        code, text = self._run("word_synthesize", "a b a", "pure")
        self.assertEqual(code, 0)
        self.assertIn("success: True", text)
        self.assertIn("transitions: a, b", text)

    def test_word_failure(self):
        code, text = self._run("word_synthesize", "a,a", "safe")
        self.assertEqual(code, 1)
        self.assertIn("success: False", text)
        self.assertIn("failure points: a,a [a]", text)
        self.assertIn("event a not separable from state s2", text)

    def test_file(self):
        path = self.dir / "cycle.txt"
        path.write_text("initial s0\ns0 a s1\ns1 b s0\n")
        code, text = self._run("--workers", "2", "synthesize", str(path), "plain")
        self.assertEqual(code, 0)
        self.assertIn("place p0", text)

    def test_invalid_input(self):
        code, _ = self._run("word_synthesize", "a b", "glossy")
        self.assertEqual(code, 2)
        code, _ = self._run("synthesize", os.path.join(self.tmp.name, "missing.txt"))
        self.assertEqual(code, 2)

    def test_invalid_options(self):
        with self.assertRaises(SystemExit):
            main(["--log-level", "LOUD", "word_synthesize", "a"], out=io.StringIO())
        with self.assertRaises(SystemExit):
            main(["--workers", "0", "word_synthesize", "a"], out=io.StringIO())


class TestRenderNet(unittest.TestCase):
    def test_render(self):
        pn = PetriNet()
        p = pn.create_place("p", initial=1)
        pn.create_transition("a")
        pn.create_transition("b")
        pn.create_flow(p, "a", 2)
        pn.create_flow("b", p)
        self.assertEqual(render_net(pn), "transitions: a, b\nplace p [1]: in (b*1) out (a*2)")


if __name__ == "__main__":
    unittest.main()
