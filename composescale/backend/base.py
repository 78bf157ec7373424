from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from composescale.auto_scaling.state import UtilizationSample

class MetricsSampler(ABC):
    """Reads current resource utilization of a service."""

    @abstractmethod
    async def sample(self, service: str) -> "UtilizationSample":
        """
        Returns a fresh sample for `service`.
        Raises SamplingError when the service is unknown, the backend is unreachable,
        or the read does not finish within the sampler's timeout.
        """
        pass

class Actuator(ABC):
    """Applies a replica count to a service through the orchestration backend."""

    @abstractmethod
    async def apply_scale(self, service: str, target_scale: int) -> None:
        """Raises ActuationError when the backend does not accept the new count."""
        pass

class ServiceDiscovery(ABC):
    """Lists the services of a project with their observed replica counts."""

    @abstractmethod
    async def discover(self) -> Dict[str, int]:
        """Raises DiscoveryError when the project cannot be inspected."""
        pass
