from abc import ABC, abstractmethod

from composescale.auto_scaling.policy import ScalingPolicy, StrategyName

class ScalingStrategy(ABC):
    """
    Decides which way a service should move. Implementations are pure: the same inputs
    always give the same answer, and the result is not yet bounded by min/max replicas.
    """

    name: StrategyName

    @abstractmethod
    def decide(self, current_scale: int, cpu: float, mem: float, policy: ScalingPolicy) -> int:
        """Returns the desired replica count for the given utilization."""
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}()"
