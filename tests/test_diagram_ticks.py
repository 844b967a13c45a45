from __future__ import annotations

import math
import unittest

from diagram_plot import InvalidIntervalError, InvalidRangeError, PrecisionOverflowError, build_ticks
from diagram_plot.ticks import (
    MAX_TICKS,
    ceil_div,
    compute_decimal_scale,
    format_decimal_difference,
    format_tick_int,
)


class TickGeneratorTests(unittest.TestCase):
    def test_tenth_interval_has_no_drift(self) -> None:
        ticks = build_ticks(0, 1, 0.1)
        self.assertEqual(ticks.scale, 10)
        self.assertEqual(list(ticks.ints), list(range(11)))
        self.assertEqual(list(ticks.values), [i / 10 for i in range(11)])
        self.assertEqual(ticks.labels(), ["0", "0.1", "0.2", "0.3", "0.4", "0.5", "0.6", "0.7", "0.8", "0.9", "1"])

    def test_ticks_snap_to_interval_multiples(self) -> None:
        ticks = build_ticks(-5, 5, 2)
        self.assertEqual(ticks.scale, 1)
        self.assertEqual(list(ticks.values), [-4, -2, 0, 2, 4])
        self.assertEqual(ticks.step, 2)

    def test_ticks_stay_inside_domain_and_ascend(self) -> None:
        for vmin, vmax, interval in ((-3.7, 8.2, 0.5), (0.05, 0.95, 0.05), (-100, -1, 7), (1.5, 2.25, 0.25)):
            ticks = build_ticks(vmin, vmax, interval)
            self.assertGreater(len(ticks), 0)
            for value in ticks.values:
                self.assertGreaterEqual(value, vmin)
                self.assertLessEqual(value, vmax)
            steps = {b - a for a, b in zip(ticks.ints, ticks.ints[1:])}
            self.assertEqual(steps, {round(interval * ticks.scale)})
            self.assertEqual(ticks.step, round(interval * ticks.scale))
            for value, scaled in zip(ticks.values, ticks.ints):
                self.assertEqual(round(value * ticks.scale), scaled)

    def test_three_tenths_labels_are_exact(self) -> None:
        self.assertEqual(build_ticks(0, 0.3, 0.1).labels(), ["0", "0.1", "0.2", "0.3"])

    def test_interval_wider_than_range_yields_no_ticks(self) -> None:
        ticks = build_ticks(0.5, 0.9, 1)
        self.assertEqual(len(ticks), 0)
        self.assertIsNone(ticks.step)

    def test_degenerate_range_yields_single_tick(self) -> None:
        self.assertEqual(list(build_ticks(2, 2, 1).values), [2])

    def test_invalid_range_raises(self) -> None:
        with self.assertRaises(InvalidRangeError):
            build_ticks(5, -5, 1)
        with self.assertRaises(InvalidRangeError):
            build_ticks(-math.inf, 5, 1)

    def test_invalid_interval_raises(self) -> None:
        for interval in (0, -1, math.nan, math.inf):
            with self.subTest(interval=interval):
                with self.assertRaises(InvalidIntervalError):
                    build_ticks(0, 10, interval)

    def test_too_many_ticks_raises_interval_error(self) -> None:
        with self.assertRaises(InvalidIntervalError):
            build_ticks(0, MAX_TICKS, 0.5)

    def test_unsafe_scaled_bound_raises_precision_overflow(self) -> None:
        with self.assertRaises(PrecisionOverflowError):
            build_ticks(0, 1e16, 1)

    def test_errors_share_value_error_base(self) -> None:
        with self.assertRaises(ValueError):
            build_ticks(1, 0, 1)

    def test_custom_formatter_receives_domain_values(self) -> None:
        ticks = build_ticks(0, 1, 0.5)
        self.assertEqual(ticks.labels(lambda v: f"{v:.2f}"), ["0.00", "0.50", "1.00"])


class DecimalScaleTests(unittest.TestCase):
    def test_compute_decimal_scale(self) -> None:
        self.assertEqual(compute_decimal_scale(1, 2, 3), 1)
        self.assertEqual(compute_decimal_scale(0.25, 1), 100)
        self.assertEqual(compute_decimal_scale(0.1, 0.05), 100)
        self.assertEqual(compute_decimal_scale(1e-7), 10**7)

    def test_ceil_div_rounds_toward_positive_infinity(self) -> None:
        self.assertEqual(ceil_div(-5, 2), -2)
        self.assertEqual(ceil_div(5, 2), 3)
        self.assertEqual(ceil_div(4, 2), 2)

    def test_format_tick_int(self) -> None:
        self.assertEqual(format_tick_int(-5, 10), "-0.5")
        self.assertEqual(format_tick_int(0, 100), "0")
        self.assertEqual(format_tick_int(150, 100), "1.5")
        self.assertEqual(format_tick_int(7, 1000), "0.007")
        self.assertEqual(format_tick_int(-12, 1), "-12")
        with self.assertRaises(ValueError):
            format_tick_int(1, 0)

    def test_decimal_difference_avoids_float_error(self) -> None:
        self.assertEqual(format_decimal_difference(0.1, 0.3), "0.2")
        self.assertEqual(format_decimal_difference(5, 2), "3")
        self.assertEqual(format_decimal_difference(-1.5, 1.25), "2.75")


if __name__ == "__main__":
    unittest.main()
