import math

from .base import ScalingStrategy
from composescale.auto_scaling.policy import ScalingPolicy, StrategyName

SCALE_UP_FACTOR = 1.5
SCALE_DOWN_RATIO = 0.5

class PerformanceStrategy(ScalingStrategy):
    """Grows by half on any pressure, shrinks one replica only when usage is very low."""

    name = StrategyName.PERFORMANCE

    def decide(self, current_scale: int, cpu: float, mem: float, policy: ScalingPolicy) -> int:
        if cpu > policy.cpu_threshold or mem > policy.mem_threshold:
            # floor(1 * 1.5) == 1, so a single replica never grows under this strategy.
            return math.floor(current_scale * SCALE_UP_FACTOR)
        if (cpu < policy.cpu_threshold * SCALE_DOWN_RATIO
                and mem < policy.mem_threshold * SCALE_DOWN_RATIO
                and current_scale > policy.min_replicas):
            return current_scale - 1
        return current_scale
