import unittest

import numpy as np

from pnsynth.Synthesis.exceptions import NotCombinableError, RegionInvariantError
from pnsynth.Synthesis.properties import PNProperties
from pnsynth.Synthesis.region import Region
from pnsynth.Synthesis.region_utility import RegionUtility
from pnsynth.TS.word import make_ts
from ts_collection import cycle_ts


class TestRegion(unittest.TestCase):
    def setUp(self):
        self.u = RegionUtility(cycle_ts())
        # a produces, b consumes: markings s0=0, s1=1
        self.r1 = Region(self.u, [0, 1], [1, 0], 0)
        # a consumes, b produces: markings s0=1, s1=0
        self.r2 = Region(self.u, [1, 0], [0, 1], 1)

    def test_weights_and_markings(self):
        r = self.r1
        self.assertEqual(r.get_weight("a"), 1)
        self.assertEqual(r.get_weight(1), -1)
        np.testing.assert_array_equal(r.weight_vector(), [1, -1])
        self.assertEqual(r.get_marking("s0"), 0)
        self.assertEqual(r.get_marking("s1"), 1)
        np.testing.assert_array_equal(r.markings(), [0, 1])
        self.assertEqual(r.evaluate_parikh_vector([2, 1]), 1)
        with self.assertRaises(ValueError):
            r.evaluate_parikh_vector([1])

    def test_pre_and_postset(self):
        self.assertEqual(self.r1.preset_events, ["a"])
        self.assertEqual(self.r1.postset_events, ["b"])

    def test_validity(self):
        self.assertTrue(self.r1.is_valid())
        self.assertTrue(self.r2.is_valid())
        self.r1.check_axiom()

    def test_inconsistent_region(self):
        r = Region(self.u, [0, 0], [1, 0], 0)
        self.assertFalse(r.is_valid())
        with self.assertRaises(RegionInvariantError):
            r.check_axiom()

    def test_negative_marking(self):
        r = Region(self.u, [1, 0], [0, 1], 0)
        self.assertTrue(any("negative marking" in v for v in r.violations()))

    def test_separation(self):
        self.assertTrue(self.r1.solves_ssp("s0", "s1"))
        self.assertTrue(self.r1.solves_essp("b", "s0"))
        self.assertFalse(self.r1.solves_essp("a", "s1"))
        self.assertTrue(self.r2.solves_essp("a", "s1"))

    def test_constructor_validation(self):
        with self.assertRaises(ValueError):
            Region(self.u, [0], [1, 0], 0)
        with self.assertRaises(ValueError):
            Region(self.u, [-1, 0], [0, 0], 0)
        with self.assertRaises(ValueError):
            Region(self.u, [0, 0], [0, 0], -1)

    def test_equality_and_hash(self):
        same = Region(self.u, [0, 1], [1, 0], 0)
        self.assertEqual(self.r1, same)
        self.assertEqual(len({self.r1, same, self.r2}), 2)
        other_ts = Region(RegionUtility(cycle_ts()), [0, 1], [1, 0], 0)
        self.assertNotEqual(self.r1, other_ts)

    def test_arithmetic(self):
        self.assertEqual(self.r1 + self.r1, Region(self.u, [0, 2], [2, 0], 0))
        self.assertEqual(self.r2.scale(3), Region(self.u, [3, 0], [0, 3], 3))
        self.assertEqual(2 * self.r2, self.r2 * 2)
        with self.assertRaises(NotCombinableError):
            self.r1.scale(-1)
        with self.assertRaises(NotCombinableError):
            self.r1 + Region(RegionUtility(cycle_ts()), [0, 1], [1, 0], 0)

    def test_combine(self):
        mixed = Region.combine([self.r1, self.r2], [1, 1])
        self.assertEqual(mixed, Region(self.u, [1, 1], [1, 1], 1))
        self.assertTrue(mixed.is_valid())

        plain = Region.combine([self.r1, self.r2], [1, 1], PNProperties("plain"))
        self.assertEqual(plain, mixed)
        doubled = Region.combine([self.r1], [2], PNProperties("pure"))
        self.assertEqual(doubled, Region(self.u, [0, 2], [2, 0], 0))

    def test_combine_rejected(self):
        with self.assertRaises(NotCombinableError):
            Region.combine([self.r1, self.r2], [1, 1], PNProperties("pure"))
        with self.assertRaises(NotCombinableError):
            Region.combine([self.r1, self.r2], [1, 1], PNProperties("t-net"))
        with self.assertRaises(NotCombinableError):
            Region.combine([], [])
        with self.assertRaises(NotCombinableError):
            Region.combine([self.r1], [1, 2])

    def test_properties(self):
        self.assertTrue(self.r1.is_pure())
        self.assertTrue(self.r1.is_plain())
        self.assertTrue(self.r1.satisfies(PNProperties.safe()))
        self.assertFalse(self.r1.scale(2).satisfies(PNProperties.safe()))
        self.assertFalse(Region(self.u, [1, 1], [1, 1], 1).is_pure())

    def test_from_weights(self):
        r = Region.from_weights(self.u, [1, -1], 0)
        self.assertEqual(r, self.r1)

    def test_counting_region(self):
        u = RegionUtility(make_ts(["a", "b", "a"]))
        r = Region.counting_region(u, "a")
        self.assertEqual(r.normal_marking, 2)
        np.testing.assert_array_equal(r.markings(), [2, 1, 1, 0])
        self.assertTrue(r.is_valid())

    def test_repr(self):
        self.assertEqual(repr(self.r1), "{m0=0, a:0>1, b:1>0}")


if __name__ == "__main__":
    unittest.main()
