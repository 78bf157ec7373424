from .coordinator import AutoScaleCoordinator
from .policy import ScalingPolicy, StrategyName
from .scaler import AutoScaler, clamp
from .state import ScalingDecision, ServiceScaleState, UtilizationSample
from .strategies import STRATEGIES, ScalingStrategy, get_strategy

__all__ = [
    "AutoScaleCoordinator",
    "AutoScaler",
    "ScalingDecision",
    "ScalingPolicy",
    "ScalingStrategy",
    "ServiceScaleState",
    "StrategyName",
    "STRATEGIES",
    "UtilizationSample",
    "clamp",
    "get_strategy",
]
