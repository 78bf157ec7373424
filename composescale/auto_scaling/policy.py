import math

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Union

from composescale.constants import (
    DEFAULT_CPU_THRESHOLD, DEFAULT_INTERVAL, DEFAULT_MAX_REPLICAS,
    DEFAULT_MEM_THRESHOLD, DEFAULT_MIN_REPLICAS, DEFAULT_STRATEGY,
)
from composescale.errors import ConfigurationError

class StrategyName(str, Enum):
    """Names of the available scaling strategies."""

    BALANCED = "balanced"
    PERFORMANCE = "performance"
    EFFICIENCY = "efficiency"

    @classmethod
    def parse(cls, value: Union[str, "StrategyName"]) -> "StrategyName":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ConfigurationError(f"unknown strategy '{value}' (choose from: {choices})") from None

@dataclass(frozen=True)
class ScalingPolicy:
    """
    Thresholds and bounds for one control-loop run.
    Thresholds are percentages, `interval` is the number of seconds between ticks.
    """

    strategy: StrategyName = StrategyName(DEFAULT_STRATEGY)
    cpu_threshold: float = DEFAULT_CPU_THRESHOLD
    mem_threshold: float = DEFAULT_MEM_THRESHOLD
    min_replicas: int = DEFAULT_MIN_REPLICAS
    max_replicas: int = DEFAULT_MAX_REPLICAS
    interval: float = DEFAULT_INTERVAL

    def __post_init__(self):
        # Frozen, so coercion goes through object.__setattr__.
        object.__setattr__(self, "strategy", StrategyName.parse(self.strategy))
        self.validate()

    def validate(self) -> "ScalingPolicy":
        """Raises ConfigurationError when the policy cannot drive a loop."""

        if self.min_replicas < 0:
            raise ConfigurationError(f"min replicas must be >= 0, got {self.min_replicas}")
        if self.min_replicas > self.max_replicas:
            raise ConfigurationError(
                f"min replicas ({self.min_replicas}) is greater than max replicas ({self.max_replicas})"
            )
        for name, value in (("cpu threshold", self.cpu_threshold), ("mem threshold", self.mem_threshold)):
            # NaN compares False both ways and would leave every strategy idle.
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a finite, non-negative percentage, got {value}")
        if not math.isfinite(self.interval) or self.interval <= 0:
            raise ConfigurationError(f"interval must be positive, got {self.interval}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["strategy"] = self.strategy.value
        return data
