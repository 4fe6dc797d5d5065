"""
Unit tests for the Centroid position type.
"""

import unittest

from streaming_quantiles.core.centroid import Centroid


class TestCentroid(unittest.TestCase):
    """Test cases for Centroid ordering and validation."""

    def test_init(self):
        c = Centroid(3)
        self.assertEqual(c.value, 3.0)
        self.assertIsInstance(c.value, float)

    def test_rejects_nan(self):
        with self.assertRaises(ValueError):
            Centroid(float("nan"))

    def test_rejects_infinity(self):
        with self.assertRaises(ValueError):
            Centroid(float("inf"))
        with self.assertRaises(ValueError):
            Centroid(float("-inf"))
        with self.assertRaises(ValueError):
            Centroid(10**400)

    def test_rejects_non_numbers(self):
        with self.assertRaises(TypeError):
            Centroid("1.0")
        with self.assertRaises(TypeError):
            Centroid(None)
        with self.assertRaises(TypeError):
            Centroid(True)

    def test_total_order(self):
        a, b, c = Centroid(-2.5), Centroid(0.0), Centroid(7.0)
        self.assertTrue(a < b < c)
        self.assertTrue(c > a)
        self.assertTrue(a <= Centroid(-2.5))
        self.assertTrue(c >= Centroid(7.0))
        self.assertFalse(b < b)
        self.assertEqual(sorted([c, a, b]), [a, b, c])

    def test_equality_and_hash(self):
        self.assertEqual(Centroid(1.5), Centroid(1.5))
        self.assertNotEqual(Centroid(1.5), Centroid(1.6))
        # Signed zeros are the same position
        self.assertEqual(Centroid(0.0), Centroid(-0.0))
        self.assertEqual(hash(Centroid(0.0)), hash(Centroid(-0.0)))
        self.assertEqual(len({Centroid(2.0), Centroid(2), Centroid(3.0)}), 2)

    def test_not_equal_to_plain_float(self):
        self.assertNotEqual(Centroid(1.0), 1.0)

    def test_subtraction_gives_gap(self):
        self.assertEqual(Centroid(5.0) - Centroid(2.0), 3.0)
        self.assertEqual(Centroid(2.0) - Centroid(5.0), -3.0)
        self.assertIsInstance(Centroid(5.0) - Centroid(2.0), float)

    def test_float_and_repr(self):
        self.assertEqual(float(Centroid(1.5)), 1.5)
        self.assertEqual(repr(Centroid(1.5)), "Centroid(1.5)")


if __name__ == "__main__":
    unittest.main()
