from .base import Actuator, MetricsSampler, ServiceDiscovery
from .actuator import ComposeActuator
from .compose import ComposeProject
from .discovery import ComposeServiceDiscovery
from .sampler import DockerStatsSampler

__all__ = [
    "Actuator",
    "MetricsSampler",
    "ServiceDiscovery",
    "ComposeActuator",
    "ComposeProject",
    "ComposeServiceDiscovery",
    "DockerStatsSampler",
]
