from typing import Optional

from .policy import ScalingPolicy
from .state import UtilizationSample
from .strategies import ScalingStrategy, get_strategy

def clamp(desired: int, policy: ScalingPolicy) -> int:
    """Bounds a desired replica count to [min_replicas, max_replicas]."""
    return max(policy.min_replicas, min(policy.max_replicas, desired))

class AutoScaler:
    """Turns a utilization sample into a bounded target replica count."""

    def __init__(self, policy: ScalingPolicy, strategy: Optional[ScalingStrategy] = None):
        self.policy = policy.validate()
        self.strategy = strategy or get_strategy(policy.strategy)

    def evaluate(self, current_replicas: int, sample: UtilizationSample) -> int:
        """
        Asks the strategy for a direction, then clamps it. The clamp also runs when the strategy
        leaves the count alone, so replicas changed outside the loop are pulled back into range.
        """
        desired = self.strategy.decide(current_replicas, sample.cpu_percent, sample.mem_percent, self.policy)
        return clamp(desired, self.policy)
