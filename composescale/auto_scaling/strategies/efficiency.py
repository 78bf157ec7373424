import math

from .base import ScalingStrategy
from composescale.auto_scaling.policy import ScalingPolicy, StrategyName

SCALE_UP_RATIO = 1.2
SCALE_DOWN_FACTOR = 0.75

class EfficiencyStrategy(ScalingStrategy):
    """Adds one replica only under heavy pressure, sheds a quarter whenever usage dips."""

    name = StrategyName.EFFICIENCY

    def decide(self, current_scale: int, cpu: float, mem: float, policy: ScalingPolicy) -> int:
        if cpu > policy.cpu_threshold * SCALE_UP_RATIO or mem > policy.mem_threshold * SCALE_UP_RATIO:
            return current_scale + 1
        # NOTE: `and` binds tighter than `or`. CPU under threshold scales in on its own,
        # only the memory half is guarded by min replicas. Kept as shipped; see DESIGN.md.
        if cpu < policy.cpu_threshold or (mem < policy.mem_threshold and current_scale > policy.min_replicas):
            return math.floor(current_scale * SCALE_DOWN_FACTOR)
        return current_scale
