import asyncio

from .base import Actuator
from .compose import ComposeProject, run_compose
from composescale.errors import ActuationError

class ComposeActuator(Actuator):
    """Sets a service's replica count with `docker compose up --scale`."""

    def __init__(self, project: ComposeProject, timeout=None):
        self.project = project
        self.timeout = timeout

    def scale_args(self, service, target_scale):
        # --no-deps: only the scaled service is touched. --no-recreate: running replicas survive.
        return ["up", "-d", "--no-deps", "--no-recreate", "--scale", f"{service}={target_scale}", service]

    async def apply_scale(self, service: str, target_scale: int) -> None:
        if target_scale < 0:
            raise ActuationError(service, target_scale, "replica count cannot be negative")

        try:
            code, _, stderr = await run_compose(self.project, *self.scale_args(service, target_scale), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ActuationError(service, target_scale, f"docker compose did not finish within {self.timeout}s") from e
        except OSError as e:
            raise ActuationError(service, target_scale, f"cannot run docker compose: {e}") from e

        if code != 0:
            raise ActuationError(service, target_scale, stderr or f"docker compose exited with {code}")
