from __future__ import annotations

from typing import Iterable

from vehicle_sim.common.schemas import Detection


def filter_by_confidence(detections: Iterable[Detection], threshold: float) -> list[Detection]:
    return [detection for detection in detections if detection.confidence >= threshold]
