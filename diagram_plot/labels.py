from __future__ import annotations

from typing import Iterable, Sequence

from diagram_plot.text import estimate_text_width

_MONTHS = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


def compute_equally_spaced_indices(total_count: int, max_count: int) -> list[int]:
    """Pick up to ``max_count`` indices spread evenly over ``[0, total_count - 1]``."""
    if total_count <= 0 or max_count <= 0:
        return []
    if max_count == 1:
        return [0]
    if max_count >= total_count:
        return list(range(total_count))
    span = total_count - 1
    slots = max_count - 1
    out: list[int] = []
    seen: set[int] = set()
    for i in range(max_count):
        # round-half-up of i * span / slots, in integer arithmetic
        idx = (2 * i * span + slots) // (2 * slots)
        if idx not in seen:
            seen.add(idx)
            out.append(idx)
    return out


def compute_label_selection(
    total_count: int,
    candidates: Iterable[int],
    chart_width_px: float,
    min_label_spacing_px: float,
) -> set[int]:
    """Thin labels to an evenly spaced subset of the eligible ``candidates``.

    At most ``floor(chart_width_px / min_label_spacing_px)`` indices are
    returned, and only indices from ``candidates`` are ever chosen.
    """
    if total_count <= 0:
        return set()
    pool = sorted({int(c) for c in candidates if 0 <= int(c) < total_count})
    if not pool:
        return set()
    if min_label_spacing_px > 0:
        max_labels = int(chart_width_px // min_label_spacing_px)
    else:
        max_labels = total_count
    if max_labels <= 1:
        return {_nearest_unused(pool, 0, set())}

    target = min(max_labels, len(pool))
    chosen: set[int] = set()
    for ideal in compute_equally_spaced_indices(total_count, target):
        if len(chosen) >= target:
            break
        chosen.add(_nearest_unused(pool, ideal, chosen))
    for idx in pool:
        if len(chosen) >= target:
            break
        chosen.add(idx)
    return chosen


def select_tick_labels(
    labels: Sequence[str],
    *,
    extent_px: float,
    font_px: float,
    char_width_ratio: float,
    min_gap_px: float,
    excluded: Iterable[int] = (),
    horizontal: bool = True,
) -> set[int]:
    """Label-thin a row (``horizontal``) or column of tick labels.

    Spacing along a horizontal axis is driven by the widest estimated label;
    along a vertical axis by the font height. Indices in ``excluded`` (e.g. a
    tick under the perpendicular axis) are never eligible.
    """
    skip = set(excluded)
    candidates = [i for i, text in enumerate(labels) if text and i not in skip]
    if horizontal:
        widest = max((estimate_text_width(labels[i], font_px, char_width_ratio) for i in candidates), default=0.0)
        spacing = widest + min_gap_px
    else:
        spacing = font_px + min_gap_px
    return compute_label_selection(len(labels), candidates, extent_px, spacing)


def abbreviate_month(text: str | None) -> str:
    if not text:
        return ""
    stripped = text.strip()
    if stripped.lower() in _MONTHS:
        return stripped[:3]
    return text


def _nearest_unused(pool: Sequence[int], ideal: int, used: set[int]) -> int:
    best = -1
    best_dist = -1
    for idx in pool:
        if idx in used:
            continue
        dist = abs(idx - ideal)
        if best_dist < 0 or dist < best_dist:
            best = idx
            best_dist = dist
    return best
