"""
Tests for numeric coercion.
"""

import unittest
from unittest import mock

import numpy as np

from rl_approx.config import Settings
from rl_approx.discretize import (
    BinnerConfigError,
    BinningError,
    TypeCoercionFailure,
    resolve_dtype,
    to_float,
    to_float_array
)


class TestCoerce(unittest.TestCase):
    """Test cases for to_float_array and friends."""

    def test_integers(self):
        result = to_float_array([1, 2, 3], "float64")
        self.assertEqual(result.dtype, np.float64)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

        result = to_float_array(np.array([7, -8], dtype=np.int32), "float64")
        np.testing.assert_array_equal(result, [7.0, -8.0])

    def test_large_integer_is_lossy(self):
        with self.assertRaises(TypeCoercionFailure) as ctx:
            to_float_array(np.array([2 ** 53 + 1], dtype=np.int64), "float64")
        self.assertEqual(ctx.exception.source, "int64")
        self.assertEqual(ctx.exception.target, "float64")

        # 2**53 itself is exact
        to_float_array(np.array([2 ** 53], dtype=np.int64), "float64")

    def test_python_int_beyond_int64(self):
        with self.assertRaises(TypeCoercionFailure):
            to_float_array([1, 2 ** 70], "float64")

    def test_narrowing_floats(self):
        with self.assertRaises(TypeCoercionFailure):
            to_float_array(np.array([0.1]), "float32")
        with self.assertRaises(TypeCoercionFailure):
            to_float_array(np.array([1e300]), "float32")

        result = to_float_array(np.array([0.5, -2.25, 1024.0]), "float32")
        self.assertEqual(result.dtype, np.float32)
        np.testing.assert_array_equal(result, [0.5, -2.25, 1024.0])

    def test_widening_floats(self):
        result = to_float_array(np.array([0.1], dtype=np.float32), "float64")
        self.assertEqual(result[0], np.float64(np.float32(0.1)))

    def test_special_values(self):
        result = to_float_array([np.nan, np.inf, -np.inf], "float32")
        self.assertTrue(np.isnan(result[0]))
        self.assertEqual(result[1], np.inf)
        self.assertEqual(result[2], -np.inf)

    def test_booleans(self):
        np.testing.assert_array_equal(to_float_array([True, False], "float64"), [1.0, 0.0])

    def test_rejected_kinds(self):
        for values in (["a", "b"], [1 + 2j], [None, 1], [[1, 2], [3]]):
            with self.assertRaises(TypeCoercionFailure):
                to_float_array(values, "float64")

    def test_result_is_a_copy(self):
        source = np.array([1.0, 2.0])
        result = to_float_array(source, "float64")
        result[0] = 5.0
        self.assertEqual(source[0], 1.0)

    def test_shape_is_kept(self):
        self.assertEqual(to_float_array(np.zeros((2, 3), dtype=int), "float64").shape, (2, 3))
        self.assertEqual(to_float_array(4, "float64").shape, ())

    def test_to_float(self):
        self.assertEqual(to_float(np.float32(1.5), "float64"), 1.5)
        self.assertIsInstance(to_float(3, "float64"), float)
        self.assertEqual(to_float([2], "float64"), 2.0)
        with self.assertRaises(TypeCoercionFailure):
            to_float([1, 2], "float64")

    def test_failure_is_type_error(self):
        with self.assertRaises(TypeError):
            to_float_array(["x"], "float64")
        self.assertTrue(issubclass(TypeCoercionFailure, BinningError))

    def test_resolve_dtype(self):
        self.assertEqual(resolve_dtype("float32"), np.float32)
        self.assertEqual(resolve_dtype(np.float64), np.float64)
        with self.assertRaises(BinnerConfigError):
            resolve_dtype("int32")
        with self.assertRaises(BinnerConfigError):
            resolve_dtype("float16")

    def test_default_dtype_comes_from_settings(self):
        with mock.patch("rl_approx.discretize.coerce.get_settings",
                        return_value=Settings(float_dtype="float32")):
            self.assertEqual(resolve_dtype(), np.float32)
            self.assertEqual(to_float_array([1, 2]).dtype, np.float32)


if __name__ == '__main__':
    unittest.main()
