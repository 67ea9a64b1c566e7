import dataclasses
import unittest

from pnsynth.Synthesis.exceptions import ConfigurationError, PropertyError
from pnsynth.Synthesis.properties import PNProperties
from pnsynth.Synthesis.region import Region
from pnsynth.Synthesis.region_utility import RegionUtility
from ts_collection import cycle_ts, located_cycle_ts


class TestPNProperties(unittest.TestCase):
    def test_defaults(self):
        props = PNProperties()
        self.assertFalse(props.pure)
        self.assertIsNone(props.kbounded)
        self.assertEqual(props.flags, [])
        self.assertEqual(str(props), "[]")

    def test_flags_and_aliases(self):
        props = PNProperties("pure", "on", "tnet")
        self.assertTrue(props.pure)
        self.assertTrue(props.output_nonbranching)
        self.assertTrue(props.tnet)
        self.assertTrue(props.single_consumer)
        self.assertEqual(props.flags, ["pure", "t-net", "output-nonbranching"])

    def test_safe(self):
        self.assertEqual(PNProperties("safe").kbounded, 1)
        self.assertTrue(PNProperties.safe().is_safe)
        self.assertEqual(PNProperties("safe", kbounded=3).kbounded, 1)
        self.assertEqual(str(PNProperties("pure", "safe")), "[pure, safe]")

    def test_invalid(self):
        with self.assertRaises(PropertyError):
            PNProperties("shiny")
        with self.assertRaises(PropertyError):
            PNProperties(kbounded=0)
        with self.assertRaises(PropertyError):
            PNProperties.marking(-2)
        self.assertTrue(issubclass(PropertyError, ValueError))
        self.assertTrue(issubclass(PropertyError, ConfigurationError))

    def test_requires(self):
        props = PNProperties("plain", kmarking=2)
        self.assertTrue(props.requires("plain"))
        self.assertFalse(props.requires("pure"))
        self.assertTrue(props.requires("k-marking"))
        self.assertFalse(props.requires("safe"))
        with self.assertRaises(PropertyError):
            props.requires("shiny")

    def test_combine(self):
        a = PNProperties("pure", kbounded=3, kmarking=2)
        b = PNProperties("plain", kbounded=2, kmarking=3)
        c = a & b
        self.assertTrue(c.pure and c.plain)
        self.assertEqual(c.kbounded, 2)
        self.assertEqual(c.kmarking, 6)
        self.assertEqual(a.combine(PNProperties()), a)

    def test_immutable_value(self):
        props = PNProperties("pure")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            props.pure = False
        self.assertEqual(props, PNProperties("pure"))
        self.assertEqual(len({props, PNProperties("pure")}), 1)

    def test_from_strings(self):
        props = PNProperties.from_strings(["pure plain", "k-bounded=3", "k-marking:2"])
        self.assertEqual(props, PNProperties("pure", "plain", kbounded=3, kmarking=2))
        self.assertEqual(PNProperties.from_strings(["none"]), PNProperties())
        self.assertEqual(PNProperties.from_strings(["safe, k-bounded=4"]).kbounded, 1)
        self.assertEqual(PNProperties.from_strings([]), PNProperties())

    def test_from_strings_errors(self):
        for bad in (["k-bounded"], ["k-marking=x"], ["pure=2"], ["glossy"]):
            with self.assertRaises(PropertyError):
                PNProperties.from_strings(bad)


class TestCheckRegion(unittest.TestCase):
    def setUp(self):
        self.u = RegionUtility(cycle_ts())
        self.r1 = Region(self.u, [0, 1], [1, 0], 0)
        self.r2 = Region(self.u, [1, 0], [0, 1], 1)

    def test_structural(self):
        self.assertTrue(PNProperties("t-net").check_region(self.r1))
        self.assertTrue(PNProperties("pure", "plain").check_region(self.r2))
        loop = Region(self.u, [1, 1], [1, 1], 1)
        self.assertFalse(PNProperties("pure").check_region(loop))
        self.assertFalse(PNProperties("output-nonbranching").check_region(loop))
        self.assertFalse(PNProperties("plain").check_region(self.r1.scale(2)))

    def test_markings(self):
        self.assertTrue(PNProperties.marking(2).check_region(self.r1))
        self.assertFalse(PNProperties.marking(2).check_region(self.r2))
        self.assertTrue(PNProperties.safe().check_region(self.r2))
        self.assertFalse(PNProperties.bounded(1).check_region(self.r2.scale(2)))

    def test_distributed(self):
        u = RegionUtility(located_cycle_ts())
        both = Region(u, [1, 1], [1, 1], 1)
        one = Region(u, [0, 1], [1, 0], 0)
        self.assertFalse(PNProperties("distributed").check_region(both))
        self.assertTrue(PNProperties("distributed").check_region(one))


if __name__ == "__main__":
    unittest.main()
