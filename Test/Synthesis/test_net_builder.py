import unittest

from pnsynth.Synthesis.net_builder import synthesize_petri_net
from pnsynth.Synthesis.region import AbstractRegion, Region
from pnsynth.Synthesis.region_utility import RegionUtility
from pnsynth.TS.lts import TransitionSystem
from ts_collection import cycle_ts


class StubRegion(AbstractRegion):
    """Region double with fixed weights."""

    def __init__(self, utility, backward, forward, marking):
        self._utility = utility
        self._backward = backward
        self._forward = forward
        self._marking = marking

    @property
    def utility(self):
        return self._utility

    def get_backward_weight(self, event):
        return self._backward[self._utility.get_event_index(event)]

    def get_forward_weight(self, event):
        return self._forward[self._utility.get_event_index(event)]

    @property
    def normal_marking(self):
        return self._marking


class TestNetBuilder(unittest.TestCase):
    def setUp(self):
        ts = TransitionSystem.from_arcs([("s0", "a", "s1"), ("s1", "b", "s2")], initial="s0")
        self.u = RegionUtility(ts)

    def test_stub_region(self):
        region = StubRegion(self.u, [1, 1], [0, 0], 1)
        pn = synthesize_petri_net([region])
        self.assertEqual(pn.transitions, ["a", "b"])
        self.assertEqual(pn.places, ["p0"])
        self.assertEqual(pn.initial_marking, {"p0": 1})
        self.assertEqual(sorted(pn.edges), [("p0", "a", 1), ("p0", "b", 1)])

    def test_weights_and_order(self):
        u = RegionUtility(cycle_ts())
        r1 = Region(u, [0, 1], [1, 0], 0)
        r2 = Region(u, [2, 0], [0, 2], 2)
        pn = synthesize_petri_net([r1, r2])
        self.assertEqual(pn.places, ["p0", "p1"])
        self.assertEqual(pn.initial_marking, {"p0": 0, "p1": 2})
        self.assertEqual(pn.weight("a", "p0"), 1)
        self.assertEqual(pn.weight("p0", "b"), 1)
        self.assertEqual(pn.weight("p1", "a"), 2)
        self.assertEqual(pn.weight("b", "p1"), 2)
        self.assertEqual(pn.weight("p0", "a"), 0)

    def test_empty(self):
        pn = synthesize_petri_net([])
        self.assertEqual(pn.places, [])
        self.assertEqual(pn.transitions, [])
        pn = synthesize_petri_net([], events=["a", "b"])
        self.assertEqual(pn.transitions, ["a", "b"])
        self.assertEqual(pn.places, [])

    def test_place_name_collision(self):
        ts = TransitionSystem.from_arcs([("s0", "p0", "s1")], initial="s0")
        u = RegionUtility(ts)
        pn = synthesize_petri_net([Region(u, [1], [0], 1)])
        self.assertEqual(pn.places, ["_p0"])
        self.assertEqual(pn.edges, [("_p0", "p0", 1)])


if __name__ == "__main__":
    unittest.main()
