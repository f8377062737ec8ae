from __future__ import annotations

from typing import Iterable

import cv2
import numpy as np

from vehicle_sim.common.schemas import Detection

# BGR
TYPE_COLORS: dict[str, tuple[int, int, int]] = {
    "car": (250, 165, 96),
    "bike": (113, 113, 248),
}
DEFAULT_COLOR = (0, 255, 0)
BACKGROUND_COLOR = (48, 32, 24)


def blank_frame(width: int, height: int) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("frame size must be > 0")
    frame = np.empty((height, width, 3), dtype=np.uint8)
    frame[:] = BACKGROUND_COLOR
    return frame


def format_label(detection: Detection) -> str:
    return f"{detection.type.upper()} {detection.confidence * 100:.1f}%"


def to_pixel_box(
    detection: Detection, frame_size: tuple[int, int]
) -> tuple[int, int, int, int]:
    width, height = frame_size
    x1 = int(round(detection.x / 100.0 * width))
    y1 = int(round(detection.y / 100.0 * height))
    x2 = int(round((detection.x + detection.width) / 100.0 * width))
    y2 = int(round((detection.y + detection.height) / 100.0 * height))
    x1, x2 = (min(max(value, 0), width - 1) for value in (x1, x2))
    y1, y2 = (min(max(value, 0), height - 1) for value in (y1, y2))
    return x1, y1, x2, y2


def draw_detections(frame: np.ndarray, detections: Iterable[Detection]) -> np.ndarray:
    annotated_frame = frame.copy()
    height, width = annotated_frame.shape[:2]
    for detection in detections:
        x1, y1, x2, y2 = to_pixel_box(detection, (width, height))
        color = TYPE_COLORS.get(detection.type, DEFAULT_COLOR)
        cv2.rectangle(annotated_frame, (x1, y1), (x2, y2), color, 2)
        y_text = max(12, y1 - 6)
        cv2.putText(
            annotated_frame,
            format_label(detection),
            (x1, y_text),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            color,
            1,
            cv2.LINE_AA,
        )
    return annotated_frame
