from __future__ import annotations

import unittest

from diagram_plot.labels import (
    abbreviate_month,
    compute_equally_spaced_indices,
    compute_label_selection,
    select_tick_labels,
)
from diagram_plot.text import estimate_wrapped_text_dimensions, text_size, wrap_text


class LabelSelectorTests(unittest.TestCase):
    def test_equally_spaced_indices(self) -> None:
        self.assertEqual(compute_equally_spaced_indices(11, 6), [0, 2, 4, 6, 8, 10])
        self.assertEqual(compute_equally_spaced_indices(10, 4), [0, 3, 6, 9])
        self.assertEqual(compute_equally_spaced_indices(5, 1), [0])
        self.assertEqual(compute_equally_spaced_indices(3, 10), [0, 1, 2])
        self.assertEqual(compute_equally_spaced_indices(0, 3), [])
        self.assertEqual(compute_equally_spaced_indices(3, 0), [])

    def test_selection_respects_width_budget(self) -> None:
        chosen = compute_label_selection(11, range(11), 100, 20)
        self.assertEqual(chosen, {0, 3, 5, 8, 10})

    def test_selection_never_picks_excluded_index(self) -> None:
        candidates = [i for i in range(11) if i != 5]
        for width in (1000, 120, 60):
            with self.subTest(width=width):
                chosen = compute_label_selection(11, candidates, width, 10)
                self.assertNotIn(5, chosen)
                self.assertTrue(chosen.issubset(candidates))
                self.assertLessEqual(len(chosen), width // 10)

    def test_single_slot_picks_candidate_nearest_start(self) -> None:
        self.assertEqual(compute_label_selection(5, [2, 3], 10, 20), {2})

    def test_empty_inputs(self) -> None:
        self.assertEqual(compute_label_selection(0, [0], 100, 10), set())
        self.assertEqual(compute_label_selection(5, [], 100, 10), set())
        self.assertEqual(compute_label_selection(5, [7, -1], 100, 10), set())

    def test_select_tick_labels_skips_excluded_and_blank(self) -> None:
        labels = ["-4", "-2", "0", "2", "4", ""]
        chosen = select_tick_labels(
            labels,
            extent_px=1000,
            font_px=12,
            char_width_ratio=0.6,
            min_gap_px=8,
            excluded=[2],
        )
        self.assertEqual(chosen, {0, 1, 3, 4})

    def test_vertical_selection_spaces_by_font_height(self) -> None:
        chosen = select_tick_labels(
            ["a"] * 11,
            extent_px=40,
            font_px=12,
            char_width_ratio=0.6,
            min_gap_px=8,
            horizontal=False,
        )
        self.assertEqual(chosen, {0, 10})

    def test_abbreviate_month(self) -> None:
        self.assertEqual(abbreviate_month("September"), "Sep")
        self.assertEqual(abbreviate_month("  march "), "mar")
        self.assertEqual(abbreviate_month("Mayday"), "Mayday")
        self.assertEqual(abbreviate_month("Revenue"), "Revenue")
        self.assertEqual(abbreviate_month(None), "")
        self.assertEqual(abbreviate_month(""), "")


class TextEstimateTests(unittest.TestCase):
    def test_rotated_text_size_swaps_dimensions(self) -> None:
        w0, h0 = text_size("value", font_px=10)
        w1, h1 = text_size("value", font_px=10, rotate_deg=270)
        self.assertEqual((w0, h0), (h1, w1))
        with self.assertRaises(ValueError):
            text_size("value", font_px=10, rotate_deg=45)

    def test_wrap_text_is_greedy(self) -> None:
        self.assertEqual(wrap_text("one two three four", 60, 10), ["one two", "three four"])
        self.assertEqual(wrap_text("", 60, 10), [])
        self.assertEqual(wrap_text("extraordinarily", 10, 10), ["extraordinarily"])

    def test_wrapped_dimensions(self) -> None:
        w, h = estimate_wrapped_text_dimensions("one two three four", 60, 10)
        self.assertAlmostEqual(w, 60.0)
        self.assertAlmostEqual(h, 24.0)


if __name__ == "__main__":
    unittest.main()
