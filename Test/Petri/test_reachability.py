import unittest

from pnsynth.Petri.net import PetriNet
from pnsynth.Petri.reachability import UnboundedNetError, reachability_graph


class TestReachabilityGraph(unittest.TestCase):
    def test_cycle(self):
        pn = PetriNet()
        p = pn.create_place("p", initial=1)
        q = pn.create_place("q")
        pn.create_transition("a")
        pn.create_transition("b")
        pn.create_flow(p, "a")
        pn.create_flow("a", q)
        pn.create_flow(q, "b")
        pn.create_flow("b", p)

        rg = reachability_graph(pn)
        self.assertEqual(rg.states, ["m0", "m1"])
        self.assertEqual(rg.initial_state, "m0")
        self.assertEqual(
            sorted((a.source, a.label, a.target) for a in rg.arcs),
            [("m0", "a", "m1"), ("m1", "b", "m0")],
        )
        self.assertEqual(rg.markings["m1"], {"p": 0, "q": 1})

    def test_empty_net(self):
        rg = reachability_graph(PetriNet())
        self.assertEqual(rg.states, ["m0"])
        self.assertEqual(rg.arcs, [])

    def test_transition_labels(self):
        pn = PetriNet()
        p = pn.create_place("p", initial=1)
        pn.create_transition("t1", label="a")
        pn.create_flow(p, "t1")
        rg = reachability_graph(pn)
        self.assertEqual([a.label for a in rg.arcs], ["a"])

    def test_unbounded(self):
        pn = PetriNet()
        p = pn.create_place("p")
        pn.create_transition("a")
        pn.create_flow("a", p)
        with self.assertRaises(UnboundedNetError):
            reachability_graph(pn)

    def test_state_limit(self):
        pn = PetriNet()
        p = pn.create_place("p", initial=3)
        pn.create_transition("a")
        pn.create_flow(p, "a")
        self.assertEqual(len(reachability_graph(pn)), 4)
        with self.assertRaises(UnboundedNetError):
            reachability_graph(pn, max_states=2)


if __name__ == "__main__":
    unittest.main()
