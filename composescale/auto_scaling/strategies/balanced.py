from .base import ScalingStrategy
from composescale.auto_scaling.policy import ScalingPolicy, StrategyName

# Both resources must fall below this share of their threshold before scaling in.
SCALE_DOWN_RATIO = 0.7

class BalancedStrategy(ScalingStrategy):
    """Moves one replica at a time in either direction."""

    name = StrategyName.BALANCED

    def decide(self, current_scale: int, cpu: float, mem: float, policy: ScalingPolicy) -> int:
        if cpu > policy.cpu_threshold or mem > policy.mem_threshold:
            return current_scale + 1
        if (cpu < policy.cpu_threshold * SCALE_DOWN_RATIO
                and mem < policy.mem_threshold * SCALE_DOWN_RATIO
                and current_scale > policy.min_replicas):
            return current_scale - 1
        return current_scale
