from __future__ import annotations

import random
from typing import Iterable, Sequence

from vehicle_sim.common.schemas import Detection, Stats, detections_by_type

HISTORY_CAPACITY = 100
PROCESSING_TIME_MIN_MS = 12.0
PROCESSING_TIME_SPAN_MS = 28.0


def update_stats(previous: Stats, batch: Sequence[Detection], rng: random.Random) -> Stats:
    counts = detections_by_type(batch)
    return Stats(
        total_cars=previous.total_cars + counts.get("car", 0),
        total_bikes=previous.total_bikes + counts.get("bike", 0),
        # Latest batch only, not a running mean.
        avg_confidence=mean_confidence(batch),
        processing_time=synthetic_processing_time(rng),
        current_detections=len(batch),
    )


def mean_confidence(batch: Sequence[Detection]) -> float:
    if not batch:
        return 0.0
    return sum(detection.confidence for detection in batch) / len(batch)


def synthetic_processing_time(rng: random.Random) -> float:
    return PROCESSING_TIME_MIN_MS + rng.random() * PROCESSING_TIME_SPAN_MS


def append_history(
    buffer: Iterable[Detection], batch: Iterable[Detection]
) -> tuple[Detection, ...]:
    combined = tuple(buffer) + tuple(batch)
    return combined[-HISTORY_CAPACITY:]
