import math
import time


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, like the browser client does."""
    return int(math.floor(value + 0.5))


def now_ms() -> int:
    return int(time.time() * 1000)
