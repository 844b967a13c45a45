from __future__ import annotations

DEFAULT_CHAR_WIDTH_RATIO = 0.6
DEFAULT_LINE_HEIGHT_RATIO = 1.2


def estimate_text_width(text: str, font_px: float, char_width_ratio: float = DEFAULT_CHAR_WIDTH_RATIO) -> float:
    if not text:
        return 0.0
    return len(text) * font_px * char_width_ratio


def text_size(
    text: str,
    *,
    font_px: float,
    char_width_ratio: float = DEFAULT_CHAR_WIDTH_RATIO,
    line_height_ratio: float = DEFAULT_LINE_HEIGHT_RATIO,
    rotate_deg: int = 0,
) -> tuple[float, float]:
    """Estimated single-line box; quarter-turn rotations swap the dimensions."""
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    w = estimate_text_width(text, font_px, char_width_ratio)
    h = font_px * line_height_ratio
    if (rotate_deg // 90) % 2 == 1:
        return (h, w)
    return (w, h)


def wrap_text(
    text: str,
    max_width_px: float,
    font_px: float,
    char_width_ratio: float = DEFAULT_CHAR_WIDTH_RATIO,
) -> list[str]:
    """Greedy word wrap against an estimated width; an over-long word keeps its own line."""
    words = text.split() if text else []
    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        if current and estimate_text_width(candidate, font_px, char_width_ratio) > max_width_px:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def estimate_wrapped_text_dimensions(
    text: str,
    max_width_px: float,
    font_px: float,
    char_width_ratio: float = DEFAULT_CHAR_WIDTH_RATIO,
    line_height_ratio: float = DEFAULT_LINE_HEIGHT_RATIO,
) -> tuple[float, float]:
    lines = wrap_text(text, max_width_px, font_px, char_width_ratio)
    if not lines:
        return (0.0, 0.0)
    width = max(estimate_text_width(line, font_px, char_width_ratio) for line in lines)
    return (width, len(lines) * font_px * line_height_ratio)
