"""
Tests for the binned tabular function approximation.
"""

import unittest

import numpy as np

from rl_approx.discretize import VectorBinner, OutOfRangeHigh
from rl_approx.function_approx import BinnedTabular, FunctionApprox


class TestBinnedTabular(unittest.TestCase):
    """Test cases for BinnedTabular."""

    def setUp(self):
        # Four bins: (0, 0), (0, 1), (1, 0), (1, 1)
        self.binner = VectorBinner([2, 2], [0, 0], [10, 10], dtype="float64")
        self.table = BinnedTabular(self.binner)

    def test_is_function_approx(self):
        self.assertIsInstance(self.table, FunctionApprox)

    def test_unseen_bins_use_default(self):
        np.testing.assert_array_equal(self.table.evaluate([[1, 1], [9, 9]]), [0.0, 0.0])
        table = BinnedTabular(self.binner, default=-1.0)
        self.assertEqual(table([3, 3]), -1.0)

    def test_update_averages_within_bin(self):
        table = self.table.update([([1, 1], 2.0), ([2, 2], 4.0)])
        self.assertEqual(table([4, 4]), 3.0)
        self.assertEqual(table.counts_map[(0, 0)], 2)

        table = table.update([([0, 0], 9.0)])
        self.assertAlmostEqual(table([4.9, 0]), 5.0)

    def test_bins_are_independent(self):
        table = self.table.update([([1, 1], 1.0), ([6, 6], 5.0)])
        self.assertEqual(table([1, 1]), 1.0)
        self.assertEqual(table([6, 6]), 5.0)
        self.assertEqual(table([1, 6]), 0.0)
        self.assertEqual(table([6, 1]), 0.0)

    def test_update_returns_new_instance(self):
        table = self.table.update([([1, 1], 2.0)])
        self.assertIsNot(table, self.table)
        self.assertEqual(len(self.table.values_map), 0)
        self.assertEqual(self.table([1, 1]), 0.0)

    def test_custom_weights(self):
        table = BinnedTabular(self.binner, count_to_weight_func=lambda n: 0.5)
        table = table.update([([1, 1], 4.0)])
        self.assertEqual(table([1, 1]), 2.0)
        table = table.update([([1, 1], 4.0)])
        self.assertEqual(table([1, 1]), 3.0)

    def test_solve(self):
        data = [([1, 1], 1.0), ([2, 3], 3.0), ([7, 1], 10.0)]
        table = self.table.update([([1, 1], 100.0)]).solve(data)
        self.assertEqual(table([0, 0]), 2.0)
        self.assertEqual(table([5, 0]), 10.0)
        self.assertEqual(table([5, 5]), 0.0)
        self.assertEqual(table.counts_map, {(0, 0): 2, (1, 0): 1})

    def test_within(self):
        a = self.table.solve([([1, 1], 1.0)])
        b = self.table.solve([([1, 1], 1.05)])
        self.assertTrue(a.within(b, 0.1))
        self.assertFalse(a.within(b, 0.01))
        c = self.table.solve([([6, 6], 1.0)])
        self.assertFalse(a.within(c, 0.5))

    def test_arithmetic(self):
        a = self.table.solve([([1, 1], 1.0), ([6, 6], 2.0)])
        b = self.table.solve([([1, 1], 3.0)])
        total = a + b
        self.assertEqual(total([1, 1]), 4.0)
        self.assertEqual(total([6, 6]), 2.0)
        scaled = a * 2
        self.assertEqual(scaled([6, 6]), 4.0)
        self.assertEqual(scaled([1, 6]), 0.0)

    def test_mismatched_bins(self):
        a = self.table.solve([([1, 1], 1.0)])
        finer = BinnedTabular(VectorBinner([4, 4], [0, 0], [10, 10], dtype="float64"))
        with self.assertRaises(ValueError):
            a + finer
        with self.assertRaises(ValueError):
            a.within(finer, 1.0)

        # An equal but separately built binner is compatible
        same = BinnedTabular(VectorBinner([2, 2], [0, 0], [10, 10], dtype="float64"))
        self.assertTrue(a.within(same.solve([([1, 1], 1.0)]), 0.0))
        self.assertEqual((a + same)([1, 1]), 1.0)

    def test_out_of_range_observation(self):
        with self.assertRaises(OutOfRangeHigh):
            self.table.evaluate([[10, 0]])
        with self.assertRaises(OutOfRangeHigh):
            self.table.update([([0, 10], 1.0)])

    def test_repr(self):
        table = self.table.solve([([1, 1], 1.0)])
        self.assertIn("1/4", repr(table))


if __name__ == '__main__':
    unittest.main()
