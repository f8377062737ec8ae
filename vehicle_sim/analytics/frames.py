from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

import pandas as pd

from vehicle_sim.common.schemas import VEHICLE_TYPES, Detection, detections_by_type
from vehicle_sim.common.utils import millis_to_utc_iso

DETECTION_COLUMNS = ["id", "type", "confidence", "x", "y", "width", "height", "timestamp"]


def detections_frame(detections: Iterable[Detection]) -> pd.DataFrame:
    rows = [asdict(detection) for detection in detections]
    frame = pd.DataFrame(rows, columns=DETECTION_COLUMNS)
    frame["detected_at"] = [millis_to_utc_iso(int(value)) for value in frame["timestamp"]]
    return frame


def live_detections_table(detections: Iterable[Detection]) -> pd.DataFrame:
    frame = detections_frame(detections)
    return pd.DataFrame(
        {
            "Type": frame["type"].str.capitalize(),
            "Position": [f"{x:.0f}%, {y:.0f}%" for x, y in zip(frame["x"], frame["y"])],
            "Confidence": [f"{value * 100:.1f}%" for value in frame["confidence"]],
        }
    )


def history_breakdown(history: Iterable[Detection]) -> pd.DataFrame:
    counts = detections_by_type(history)
    return pd.DataFrame(
        {
            "vehicle_type": list(VEHICLE_TYPES),
            "count": [counts.get(vehicle_type, 0) for vehicle_type in VEHICLE_TYPES],
        }
    )


def export_history_csv(history: Iterable[Detection], path: str) -> int:
    frame = detections_frame(history)
    frame.to_csv(path, index=False)
    return len(frame)
