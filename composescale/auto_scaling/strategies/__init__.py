from typing import Dict, Type, Union

from .base import ScalingStrategy
from .balanced import BalancedStrategy
from .efficiency import EfficiencyStrategy
from .performance import PerformanceStrategy
from composescale.auto_scaling.policy import StrategyName

# Every StrategyName must have exactly one entry here.
STRATEGIES: Dict[StrategyName, Type[ScalingStrategy]] = {
    StrategyName.BALANCED: BalancedStrategy,
    StrategyName.PERFORMANCE: PerformanceStrategy,
    StrategyName.EFFICIENCY: EfficiencyStrategy,
}

def get_strategy(name: Union[str, StrategyName]) -> ScalingStrategy:
    """Instantiates the strategy registered for `name`. Raises ConfigurationError for unknown names."""
    return STRATEGIES[StrategyName.parse(name)]()

__all__ = [
    "STRATEGIES",
    "ScalingStrategy",
    "BalancedStrategy",
    "PerformanceStrategy",
    "EfficiencyStrategy",
    "get_strategy",
]
