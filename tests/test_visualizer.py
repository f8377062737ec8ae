import numpy as np
import pytest

from vehicle_sim.common.schemas import Detection
from vehicle_sim.detection.visualizer import (
    BACKGROUND_COLOR,
    TYPE_COLORS,
    blank_frame,
    draw_detections,
    format_label,
    to_pixel_box,
)


def _detection(vehicle_type: str, x: float = 10.0, y: float = 20.0) -> Detection:
    return Detection(
        id=f"{vehicle_type}-0-0",
        type=vehicle_type,
        confidence=0.931,
        x=x,
        y=y,
        width=20.0,
        height=10.0,
        timestamp=0,
    )


def test_blank_frame_shape_and_color() -> None:
    frame = blank_frame(320, 180)
    assert frame.shape == (180, 320, 3)
    assert tuple(frame[0, 0]) == BACKGROUND_COLOR


def test_blank_frame_rejects_empty_size() -> None:
    with pytest.raises(ValueError):
        blank_frame(0, 10)


def test_to_pixel_box_scales_percentages() -> None:
    assert to_pixel_box(_detection("car"), (200, 100)) == (20, 20, 60, 30)


def test_to_pixel_box_clips_to_frame() -> None:
    x1, y1, x2, y2 = to_pixel_box(_detection("car", x=90.0, y=95.0), (200, 100))
    assert (x1, y1) == (180, 95)
    assert x2 == 199
    assert y2 == 99


def test_format_label() -> None:
    assert format_label(_detection("car")) == "CAR 93.1%"
    assert format_label(_detection("bike")) == "BIKE 93.1%"


def test_draw_detections_uses_type_colors() -> None:
    frame = blank_frame(200, 100)
    annotated = draw_detections(frame, [_detection("car")])
    assert annotated is not frame
    assert np.array_equal(frame, blank_frame(200, 100))
    assert tuple(annotated[25, 20]) == TYPE_COLORS["car"]
    bike_frame = draw_detections(frame, [_detection("bike", x=50.0, y=50.0)])
    assert tuple(bike_frame[55, 100]) == TYPE_COLORS["bike"]
