from __future__ import annotations

import math
import time
from datetime import datetime, timezone


def now_millis() -> int:
    return int(time.time() * 1000)


def millis_to_utc_iso(value: int) -> str:
    return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc).isoformat()


def clamp_threshold(value: float) -> float:
    value = float(value)
    if math.isnan(value):
        raise ValueError("confidence threshold must be a number")
    return min(1.0, max(0.0, value))
