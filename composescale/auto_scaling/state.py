from dataclasses import dataclass
from typing import Optional

@dataclass
class ServiceScaleState:
    """Last known-good replica count of a monitored service. Owned by the coordinator."""

    service: str
    current_scale: int

@dataclass(frozen=True)
class UtilizationSample:
    """Resource usage of a service at one instant, in percent."""

    cpu_percent: float
    mem_percent: float

@dataclass
class ScalingDecision:
    """Outcome of evaluating one service during one tick."""

    service: str
    previous_scale: int
    target_scale: int
    applied: bool = False
    cpu_percent: Optional[float] = None
    mem_percent: Optional[float] = None
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.target_scale != self.previous_scale

    def as_row(self):
        return [self.service, self.previous_scale, self.target_scale, self.applied,
                self.cpu_percent, self.mem_percent, self.error]
