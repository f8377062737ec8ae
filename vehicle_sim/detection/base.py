from __future__ import annotations

from abc import ABC, abstractmethod

from vehicle_sim.common.schemas import Detection
from vehicle_sim.detection.scenarios import Scenario


class DetectionSource(ABC):
    @abstractmethod
    def generate(self, scenario: Scenario, now_millis: int) -> list[Detection]:
        raise NotImplementedError
