from __future__ import annotations

from decimal import Decimal
import math
import unittest

import numpy as np

from barchart import BarChartAttributes, Datum, FALLBACK_AXIS_RANGE, compute_axis_range, make_y_axis_range


def _data(*values: float) -> list[Datum]:
    return [Datum(v, f"d{i + 1}") for i, v in enumerate(values)]


def _finer_interval(interval: float) -> float:
    exponent = math.floor(math.log10(interval) + 1e-12)
    factor = round(interval / 10.0**exponent)
    if factor == 1:
        return 5.0 * 10.0 ** (exponent - 1)
    if factor == 2:
        return 1.0 * 10.0**exponent
    return 2.0 * 10.0**exponent


class AxisRangeFixtureTests(unittest.TestCase):
    def test_zero_to_ten_uses_step_two(self) -> None:
        axis = make_y_axis_range(_data(0, 10), BarChartAttributes())
        self.assertEqual(axis.min_value, 0.0)
        self.assertEqual(axis.max_value, 10.0)
        self.assertEqual(list(axis.grid_values), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])
        self.assertEqual(axis.interval, 2.0)

    def test_explicit_bounds_without_data(self) -> None:
        axis = make_y_axis_range([], BarChartAttributes(y_min=0.0, y_max=12.0))
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 12.0))
        self.assertEqual(list(axis.grid_values), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0, 12.0])

    def test_fourteen_jumps_to_step_five(self) -> None:
        axis = compute_axis_range(_data(0, 14))
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 14.0))
        self.assertEqual(list(axis.grid_values), [0.0, 5.0, 10.0])

    def test_gridlines_stay_inside_negative_minimum(self) -> None:
        axis = compute_axis_range(_data(-1, 9))
        self.assertEqual((axis.min_value, axis.max_value), (-1.0, 9.0))
        self.assertEqual(list(axis.grid_values), [0.0, 2.0, 4.0, 6.0, 8.0])

    def test_positive_data_is_anchored_at_zero(self) -> None:
        axis = compute_axis_range(_data(1, 9))
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 9.0))
        self.assertEqual(list(axis.grid_values), [0.0, 2.0, 4.0, 6.0, 8.0])

    def test_mixed_sign_data(self) -> None:
        axis = compute_axis_range(_data(-31, 47))
        self.assertEqual((axis.min_value, axis.max_value), (-31.0, 47.0))
        self.assertEqual(list(axis.grid_values), [-20.0, 0.0, 20.0, 40.0])

    def test_negative_data_is_anchored_at_zero(self) -> None:
        axis = compute_axis_range([Datum(-218, "d1"), Datum(-121, "d2")])
        self.assertEqual((axis.min_value, axis.max_value), (-218.0, 0.0))
        self.assertEqual(list(axis.grid_values), [-200.0, -150.0, -100.0, -50.0, 0.0])

    def test_small_fractional_values_get_exact_decimal_gridlines(self) -> None:
        axis = compute_axis_range(_data(-0.0235, 0.0958))
        self.assertEqual((axis.min_value, axis.max_value), (-0.0235, 0.0958))
        self.assertEqual(list(axis.grid_values), [-0.02, 0.0, 0.02, 0.04, 0.06, 0.08])
        self.assertEqual(axis.interval, 0.02)

    def test_inverted_explicit_bounds_fall_back(self) -> None:
        axis = make_y_axis_range([], BarChartAttributes(y_min=1.0, y_max=-1.0))
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 1.0))
        self.assertEqual(axis.grid_values, ())
        self.assertTrue(axis.is_fallback)

    def test_all_zero_data_falls_back(self) -> None:
        axis = compute_axis_range(_data(0, 0))
        self.assertEqual(axis, FALLBACK_AXIS_RANGE)

    def test_empty_data_falls_back(self) -> None:
        self.assertEqual(compute_axis_range([]), FALLBACK_AXIS_RANGE)


class AxisRangeBehaviourTests(unittest.TestCase):
    def test_explicit_bounds_override_data_independently(self) -> None:
        axis = compute_axis_range([3.0, 40.0], y_max=100.0)
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 100.0))
        axis = compute_axis_range([-3.0, 40.0], y_min=-50.0)
        self.assertEqual((axis.min_value, axis.max_value), (-50.0, 40.0))

    def test_explicit_bounds_may_clip_data(self) -> None:
        axis = compute_axis_range([5.0, 500.0], y_max=10.0)
        self.assertEqual(axis.max_value, 10.0)
        self.assertEqual(list(axis.grid_values), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])

    def test_accepts_plain_numbers_and_mixed_numeric_types(self) -> None:
        axis = compute_axis_range([np.float32(2.5), 7, Decimal("4.5")])
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 7.0))

    def test_single_point(self) -> None:
        axis = compute_axis_range([3.0])
        self.assertEqual((axis.min_value, axis.max_value), (0.0, 3.0))
        self.assertEqual(list(axis.grid_values), [0.0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0])

    def test_target_grid_count_controls_density(self) -> None:
        coarse = compute_axis_range([0.0, 10.0], target_grid_count=3)
        fine = compute_axis_range([0.0, 10.0], target_grid_count=11)
        self.assertEqual(list(coarse.grid_values), [0.0, 5.0, 10.0])
        self.assertEqual(fine.interval, 1.0)
        self.assertEqual(len(fine.grid_values), 11)

    def test_large_values(self) -> None:
        axis = compute_axis_range([1_000_000, -2_000_000, 3_000_000, -6_000_000])
        self.assertEqual(axis.interval, 2_000_000.0)
        self.assertEqual(list(axis.grid_values), [-6e6, -4e6, -2e6, 0.0, 2e6])

    def test_decimal_bounds_keep_their_gridlines(self) -> None:
        axis = compute_axis_range([0.0, 1.2])
        self.assertEqual(axis.interval, 0.2)
        self.assertEqual(list(axis.grid_values), [0.0, 0.2, 0.4, 0.6, 0.8, 1.0, 1.2])
        axis = compute_axis_range([-0.3, 0.0])
        self.assertEqual(axis.interval, 0.05)
        self.assertEqual(list(axis.grid_values), [-0.3, -0.25, -0.2, -0.15, -0.1, -0.05, 0.0])

    def test_decimal_data_scales_like_integer_data(self) -> None:
        for scale in (0.1, 0.01, 0.001):
            with self.subTest(scale=scale):
                axis = compute_axis_range([0.0, round(12 * scale, 10)])
                self.assertEqual(len(axis.grid_values), 7)
                self.assertAlmostEqual(axis.grid_values[-1], axis.max_value, places=12)

    def test_target_must_exceed_one(self) -> None:
        with self.assertRaises(ValueError):
            compute_axis_range([1.0, 2.0], target_grid_count=1)

    def test_non_finite_bounds_fall_back_instead_of_looping(self) -> None:
        self.assertEqual(compute_axis_range([1.0], y_max=float("inf")), FALLBACK_AXIS_RANGE)
        self.assertEqual(compute_axis_range([1.0], y_max=float("nan")), FALLBACK_AXIS_RANGE)

    def test_tiny_span_terminates(self) -> None:
        axis = compute_axis_range([1e-250])
        self.assertEqual(axis.max_value, 1e-250)
        self.assertGreater(len(axis.grid_values), 1)
        self.assertTrue(all(0.0 <= g <= 1e-250 * (1 + 1e-12) for g in axis.grid_values))

    def test_idempotent(self) -> None:
        data = _data(-3.3, 12.7, 8.1)
        self.assertEqual(compute_axis_range(data), compute_axis_range(data))


class AxisRangePropertyTests(unittest.TestCase):
    def test_random_datasets_satisfy_axis_invariants(self) -> None:
        rng = np.random.default_rng(20240611)
        targets = (2.0, 3.0, 5.0, 7.0, 10.0, 11.5)
        for trial in range(300):
            scale = 10.0 ** int(rng.integers(-4, 7))
            size = int(rng.integers(1, 12))
            values = (rng.uniform(-1.0, 1.0, size=size) * scale).tolist()
            target = targets[trial % len(targets)]
            axis = compute_axis_range(values, target_grid_count=target)
            with self.subTest(values=values, target=target):
                self.assertEqual(axis.min_value, min(0.0, min(values)))
                self.assertEqual(axis.max_value, max(0.0, max(values)))
                self.assertLessEqual(axis.min_value, 0.0)
                self.assertGreaterEqual(axis.max_value, 0.0)
                interval = axis.interval
                assert interval is not None
                exponent = math.floor(math.log10(interval) + 1e-12)
                mantissa = interval / 10.0**exponent
                self.assertTrue(any(math.isclose(mantissa, f, rel_tol=1e-9) for f in (1.0, 2.0, 5.0)))

                span = axis.max_value - axis.min_value
                self.assertLessEqual(span / interval + 1, target * (1 + 1e-9))
                self.assertGreater(span / _finer_interval(interval) + 1, target * (1 - 1e-12))
                self.assertLessEqual(len(axis.grid_values), target)

                tol = interval * 1e-9
                self.assertIn(0.0, axis.grid_values)
                self.assertEqual(list(axis.grid_values), sorted(set(axis.grid_values)))
                for g in axis.grid_values:
                    self.assertGreaterEqual(g, axis.min_value - tol)
                    self.assertLessEqual(g, axis.max_value + tol)
                    ratio = g / interval
                    self.assertAlmostEqual(ratio, round(ratio), places=6)
                # First and last gridlines are the outermost multiples that fit.
                self.assertLess(axis.grid_values[0] - interval, axis.min_value - tol)
                self.assertGreater(axis.grid_values[-1] + interval, axis.max_value + tol)
                diffs = np.diff(np.asarray(axis.grid_values))
                if diffs.size:
                    self.assertTrue(np.allclose(diffs, interval, rtol=1e-9, atol=0.0))


if __name__ == "__main__":
    unittest.main()
