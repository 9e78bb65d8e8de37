import math
from typing import List
from ..domain.models import Window


def plan_windows(total_duration: float, max_window: float) -> List[Window]:
    """
    Splits [0, total_duration) into contiguous windows of at most max_window seconds.

    Media that fits in one window yields a single [0, total_duration) window.
    Otherwise ceil(total / max_window) windows are produced and the last one is
    truncated to the remainder. A zero-length tail is never emitted.
    """
    if total_duration <= 0:
        raise ValueError(f"Total duration must be positive, got {total_duration}")
    if max_window <= 0:
        raise ValueError(f"Window size must be positive, got {max_window}")

    if total_duration <= max_window:
        return [Window(index=0, start=0.0, end=float(total_duration))]

    count = math.ceil(total_duration / max_window)
    windows = []
    start = 0.0
    for index in range(count):
        # Each window starts exactly where the previous one ended
        end = min((index + 1) * max_window, total_duration)
        if end <= start:
            break
        windows.append(Window(index=index, start=float(start), end=float(end)))
        start = end
    return windows
