from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging
import math
from typing import Callable

import numpy as np

from diagram_plot.errors import InvalidIntervalError, InvalidRangeError, PrecisionOverflowError

LOGGER = logging.getLogger(__name__)

MAX_SAFE_INTEGER = 2**53 - 1
MAX_TICKS = 1000


@dataclass(frozen=True)
class TickSet:
    """Axis ticks held in integer space.

    ``ints`` are the ticks multiplied by ``scale`` (a power of ten) so that
    stepping never accumulates binary floating-point error; ``values`` are the
    matching domain values, ``ints[i] / scale``.
    """

    ints: tuple[int, ...]
    values: tuple[float, ...]
    scale: int

    def __len__(self) -> int:
        return len(self.ints)

    @property
    def step(self) -> int | None:
        if len(self.ints) < 2:
            return None
        return self.ints[1] - self.ints[0]

    def labels(self, formatter: Callable[[float], str] | None = None) -> list[str]:
        if formatter is not None:
            return [formatter(v) for v in self.values]
        return [format_tick_int(v, self.scale) for v in self.ints]


def compute_decimal_scale(*nums: float) -> int:
    """Smallest power of ten that turns every input into an integer."""
    digits = 0
    for num in nums:
        digits = max(digits, _fraction_digits(num))
    return 10**digits


def ceil_div(a: int, b: int) -> int:
    return -((-a) // b)


def build_ticks(vmin: float, vmax: float, interval: float) -> TickSet:
    if not math.isfinite(vmin) or not math.isfinite(vmax):
        LOGGER.error("non-finite tick bounds: min=%r max=%r", vmin, vmax)
        raise InvalidRangeError(f"tick bounds must be finite, got min={vmin!r} max={vmax!r}")
    if vmin > vmax:
        LOGGER.error("invalid tick range: min=%r max=%r", vmin, vmax)
        raise InvalidRangeError(f"tick min {vmin!r} must not exceed max {vmax!r}")
    if not math.isfinite(interval) or interval <= 0:
        LOGGER.error("invalid tick interval: %r", interval)
        raise InvalidIntervalError(f"tick interval must be a positive finite number, got {interval!r}")

    scale = compute_decimal_scale(vmin, vmax, interval)
    min_i = _to_scaled_int(vmin, scale)
    max_i = _to_scaled_int(vmax, scale)
    step_i = _to_scaled_int(interval, scale)
    if step_i <= 0:
        LOGGER.error("tick interval %r vanishes at scale %d", interval, scale)
        raise PrecisionOverflowError(f"tick interval {interval!r} rounds to {step_i} at scale {scale}")

    start = ceil_div(min_i, step_i) * step_i
    count = (max_i - start) // step_i + 1 if start <= max_i else 0
    if count > MAX_TICKS:
        LOGGER.error("tick interval %r yields %d ticks over [%r, %r]", interval, count, vmin, vmax)
        raise InvalidIntervalError(f"tick interval {interval!r} is too small for range [{vmin!r}, {vmax!r}] ({count} ticks)")

    ints = np.arange(start, max_i + 1, step_i, dtype=np.int64).tolist()
    return TickSet(ints=tuple(ints), values=tuple(v / scale for v in ints), scale=scale)


def format_tick_int(value_i: int, scale: int) -> str:
    """Render a scaled integer as a minimal decimal string (no trailing zeros, no ``-0``)."""
    if scale <= 0:
        raise ValueError("scale must be a positive power of ten")
    value_i = int(value_i)
    if scale == 1:
        return str(value_i)
    whole, frac = divmod(abs(value_i), scale)
    digits = len(str(scale)) - 1
    frac_text = str(frac).rjust(digits, "0").rstrip("0")
    out = f"{whole}.{frac_text}" if frac_text else str(whole)
    if value_i < 0 and out != "0":
        out = "-" + out
    return out


def format_decimal_difference(a: float, b: float) -> str:
    """``|b - a|`` as text, computed in integer space so ``0.3 - 0.1`` prints ``0.2``."""
    scale = compute_decimal_scale(a, b)
    delta = abs(_to_scaled_int(b, scale) - _to_scaled_int(a, scale))
    return format_tick_int(delta, scale)


def _fraction_digits(value: float) -> int:
    if isinstance(value, int):
        return 0
    if not math.isfinite(value):
        raise ValueError(f"cannot compute decimal scale of {value!r}")
    # repr gives the shortest round-trip text, including e-notation such as 1e-07.
    exp = Decimal(repr(float(value))).normalize().as_tuple().exponent
    return max(0, -int(exp))


def _to_scaled_int(value: float, scale: int) -> int:
    try:
        scaled = value * scale
    except OverflowError:
        scaled = math.inf
    if not math.isfinite(scaled) or abs(scaled) > MAX_SAFE_INTEGER:
        LOGGER.error("value %r exceeds the safe integer range at scale %d", value, scale)
        raise PrecisionOverflowError(f"value {value!r} at scale {scale} exceeds the safe integer range")
    return math.floor(scaled + 0.5)
