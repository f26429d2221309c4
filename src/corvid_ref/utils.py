from __future__ import annotations

import math
import os
import struct

from .types import CvString, Value

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

_F32_MAX = 3.4028234663852886e38


def wrap_i32(n: int) -> int:
    """Reduce an arbitrary Python int to two's-complement 32-bit."""
    return ((n - INT_MIN) % (2 ** 32)) + INT_MIN


def fits_i32(n: int) -> bool:
    return INT_MIN <= n <= INT_MAX


def to_f32(x: float) -> float:
    """Round a double to the nearest binary32 value."""
    if math.isnan(x) or math.isinf(x):
        return x

    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        # beyond the largest finite binary32 after rounding
        return math.copysign(math.inf, x)


def format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    if value == 0.0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"

    # shortest scientific form that round-trips through binary32
    text = f"{value:.8e}"
    for precision in range(9):
        candidate = f"{value:.{precision}e}"
        if abs(float(candidate)) <= _F32_MAX and to_f32(float(candidate)) == value:
            text = candidate
            break

    mantissa, exponent = text.split("e")
    exp = int(exponent)
    digits = mantissa.lstrip("-").replace(".", "").rstrip("0") or "0"
    sign = "-" if value < 0 else ""

    if 1e-3 <= abs(value) < 1e7:
        if exp >= 0:
            whole = digits[:exp + 1].ljust(exp + 1, "0")
            frac = digits[exp + 1:] or "0"
        else:
            whole = "0"
            frac = "0" * (-exp - 1) + digits
        return f"{sign}{whole}.{frac}"

    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{exp}"


def render(value: Value) -> str:
    """Top-level printing rule: strings are written raw."""
    return str(value)


def render_nested(value: Value) -> str:
    """Printing rule for collection members: strings are quoted."""
    if isinstance(value, CvString):
        return f'"{value.value}"'

    return str(value)


def debug_py_trace_enabled() -> bool:
    return os.environ.get("CORVID_DEBUG_PY_TRACE", "").lower() in {"1", "true", "yes", "on"}


def debug_logging_enabled() -> bool:
    return os.environ.get("CORVID_DEBUG", "").lower() in {"1", "true", "yes", "on"}
