from vehicle_sim.common.schemas import Detection
from vehicle_sim.detection.filtering import filter_by_confidence


def _detection(index: int, confidence: float, vehicle_type: str = "car") -> Detection:
    return Detection(
        id=f"{vehicle_type}-0-{index}",
        type=vehicle_type,
        confidence=confidence,
        x=10.0,
        y=20.0,
        width=15.0,
        height=10.0,
        timestamp=0,
    )


def test_filter_keeps_threshold_boundary_and_order() -> None:
    detections = [_detection(0, 0.9), _detection(1, 0.5), _detection(2, 0.49), _detection(3, 0.7, "bike")]
    kept = filter_by_confidence(detections, 0.5)
    assert [d.id for d in kept] == ["car-0-0", "car-0-1", "bike-0-3"]


def test_filter_extremes() -> None:
    detections = [_detection(0, 0.0), _detection(1, 0.99)]
    assert filter_by_confidence(detections, 0.0) == detections
    assert filter_by_confidence(detections, 1.0) == []
    assert filter_by_confidence([], 0.5) == []
