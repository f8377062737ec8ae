from __future__ import annotations

import random

from vehicle_sim.common.schemas import VEHICLE_TYPES, Detection, detection_id
from vehicle_sim.detection.base import DetectionSource
from vehicle_sim.detection.scenarios import Scenario, VehicleProfile, profile_for


class SyntheticDetector(DetectionSource):
    def __init__(self, rng: random.Random | None = None, seed: int | None = None) -> None:
        self.random = rng if rng is not None else random.Random(seed)

    def generate(self, scenario: Scenario, now_millis: int) -> list[Detection]:
        profile = profile_for(scenario)
        detections: list[Detection] = []
        for vehicle_type in VEHICLE_TYPES:
            detections.extend(
                self._generate_type(vehicle_type, profile.for_type(vehicle_type), now_millis)
            )
        return detections

    def _generate_type(
        self, vehicle_type: str, profile: VehicleProfile, now_millis: int
    ) -> list[Detection]:
        count = profile.count.draw(self.random)
        detections: list[Detection] = []
        for index in range(count):
            detections.append(
                Detection(
                    id=detection_id(vehicle_type, now_millis, index),
                    type=vehicle_type,
                    confidence=profile.confidence.draw(self.random),
                    x=profile.x.draw(self.random),
                    y=profile.y.draw(self.random),
                    width=profile.width.draw(self.random),
                    height=profile.height.draw(self.random),
                    timestamp=now_millis,
                )
            )
        return detections
