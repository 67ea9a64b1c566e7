import unittest

from pnsynth.TS.lts import Arc, TransitionSystem


class TestTransitionSystem(unittest.TestCase):
    def setUp(self):
        self.ts = TransitionSystem(name="demo")
        self.s0, self.s1, self.s2 = self.ts.create_states("s0", "s1", "s2")
        self.ts.initial_state = self.s0
        self.ts.create_arc(self.s0, self.s1, "b")
        self.ts.create_arc(self.s1, self.s2, "a")
        self.ts.create_arc(self.s0, self.s2, "a")

    def test_generated_state_names(self):
        ts = TransitionSystem()
        self.assertEqual(ts.create_state(), "s0")
        self.assertEqual(ts.create_state(), "s1")
        ts.create_state("s2")
        self.assertEqual(ts.create_state(), "s3")

    def test_duplicate_state_rejected(self):
        with self.assertRaises(ValueError):
            self.ts.create_state("s1")

    def test_arc_to_unknown_state(self):
        with self.assertRaises(KeyError):
            self.ts.create_arc(self.s0, "missing", "a")

    def test_duplicate_arc_is_noop(self):
        arc = self.ts.create_arc(self.s0, self.s1, "b")
        self.assertEqual(arc, Arc("s0", "b", "s1"))
        self.assertEqual(len(self.ts.arcs), 3)

    def test_alphabet_sorted(self):
        self.assertEqual(self.ts.alphabet, ["a", "b"])

    def test_post_events_and_successors(self):
        self.assertEqual(self.ts.post_events(self.s0), ["a", "b"])
        self.assertEqual(self.ts.successors(self.s0, "a"), ["s2"])
        self.assertEqual(self.ts.successors(self.s2, "a"), [])

    def test_initial_state_must_exist(self):
        with self.assertRaises(KeyError):
            self.ts.initial_state = "nowhere"
        self.assertIsNone(TransitionSystem().initial_state)

    def test_from_arcs_state_order(self):
        ts = TransitionSystem.from_arcs(
            [("x", "a", "y"), ("y", "b", "z")], initial="y", states=["iso"]
        )
        self.assertEqual(ts.states, ["y", "iso", "x", "z"])
        self.assertEqual(ts.initial_state, "y")
        self.assertIn("iso", ts)
        self.assertEqual(len(ts), 4)

    def test_location_kept(self):
        ts = TransitionSystem()
        s, t = ts.create_states("s", "t")
        ts.create_arc(s, t, "a", location="left")
        self.assertEqual(ts.arcs, [Arc("s", "a", "t", "left")])


if __name__ == "__main__":
    unittest.main()
