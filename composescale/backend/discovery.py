import asyncio

import docker
import requests

from collections import Counter
from docker.errors import DockerException
from typing import Dict, List

from .base import ServiceDiscovery
from .compose import ComposeProject, run_compose
from composescale.constants import LABEL_ONEOFF, LABEL_PROJECT, LABEL_SERVICE
from composescale.errors import DiscoveryError

class ComposeServiceDiscovery(ServiceDiscovery):
    """
    Declared services come from `docker compose config --services`; the observed scale of each
    is the number of its running (non one-off) containers. Services with no compose file
    in reach are taken from container labels alone.
    """

    def __init__(self, project: ComposeProject, client=None):
        self.project = project
        self.client = client or docker.from_env()

    async def discover(self) -> Dict[str, int]:
        declared = await self.declared_services()
        running = await asyncio.get_running_loop().run_in_executor(None, self.running_replicas)

        services = declared or sorted(running)
        if not services:
            raise DiscoveryError(f"project '{self.project.name}' has no services")
        return {name: running.get(name, 0) for name in services}

    async def declared_services(self) -> List[str]:
        try:
            code, stdout, stderr = await run_compose(self.project, "config", "--services")
        except OSError as e:
            raise DiscoveryError(f"cannot run docker compose: {e}") from e

        if code != 0:
            # No compose file here: fall back to what is running under the project label.
            if not self.project.files and "no configuration file" in stderr.lower():
                return []
            raise DiscoveryError(stderr or f"docker compose config exited with {code}")
        return [line.strip() for line in stdout.splitlines() if line.strip()]

    def running_replicas(self) -> Dict[str, int]:
        try:
            containers = self.client.containers.list(
                filters={"label": f"{LABEL_PROJECT}={self.project.name}", "status": "running"}
            )
        except (DockerException, requests.exceptions.RequestException) as e:
            raise DiscoveryError(f"cannot list containers: {e}") from e

        return dict(Counter(
            c.labels[LABEL_SERVICE] for c in containers
            if LABEL_SERVICE in c.labels and c.labels.get(LABEL_ONEOFF, "False") != "True"
        ))
