from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

VEHICLE_TYPES: tuple[str, ...] = ("car", "bike")


@dataclass(frozen=True)
class Detection:
    id: str
    type: str
    confidence: float
    x: float
    y: float
    width: float
    height: float
    timestamp: int


@dataclass(frozen=True)
class Stats:
    total_cars: int = 0
    total_bikes: int = 0
    avg_confidence: float = 0.0
    processing_time: float = 0.0
    current_detections: int = 0


@dataclass(frozen=True)
class EngineSnapshot:
    active: bool
    confidence_threshold: float
    detections: tuple[Detection, ...]
    stats: Stats
    history: tuple[Detection, ...]


def detection_id(vehicle_type: str, timestamp: int, index: int) -> str:
    return f"{vehicle_type}-{timestamp}-{index}"


def detections_by_type(detections: Iterable[Detection]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for detection in detections:
        counts[detection.type] = counts.get(detection.type, 0) + 1
    return counts
