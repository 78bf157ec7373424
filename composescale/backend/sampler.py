import asyncio

import async_timeout
import docker
import requests

from docker.errors import DockerException
from typing import Any, Dict, Optional

from .base import MetricsSampler
from .compose import ComposeProject
from composescale.auto_scaling.state import UtilizationSample
from composescale.constants import DEFAULT_SAMPLE_TIMEOUT, LABEL_PROJECT, LABEL_SERVICE
from composescale.errors import SamplingError

def cpu_percent(stats: Dict[str, Any]) -> float:
    """CPU usage of one container from a `docker stats` snapshot, computed as the Docker CLI does."""

    cpu = stats.get("cpu_stats") or {}
    pre = stats.get("precpu_stats") or {}

    cpu_delta = (cpu.get("cpu_usage") or {}).get("total_usage", 0) - (pre.get("cpu_usage") or {}).get("total_usage", 0)
    system_delta = cpu.get("system_cpu_usage", 0) - pre.get("system_cpu_usage", 0)
    if cpu_delta <= 0 or system_delta <= 0:
        return 0.0

    online = cpu.get("online_cpus") or len((cpu.get("cpu_usage") or {}).get("percpu_usage") or []) or 1
    return cpu_delta / system_delta * online * 100.0

def mem_percent(stats: Dict[str, Any]) -> float:
    """Memory usage of one container as a share of its limit, page cache excluded."""

    mem = stats.get("memory_stats") or {}
    limit = mem.get("limit") or 0
    if limit <= 0:
        return 0.0

    details = mem.get("stats") or {}
    # cgroup v2 reports inactive_file, v1 reports total_inactive_file.
    cache = details.get("inactive_file", details.get("total_inactive_file", 0))
    used = max(mem.get("usage", 0) - cache, 0)
    return used / limit * 100.0

def _consume_result(future: asyncio.Future):
    # Abandoned reads still finish; their errors were already reported as a timeout.
    if not future.cancelled():
        future.exception()

class DockerStatsSampler(MetricsSampler):
    """
    Averages CPU and memory usage over the running containers of a Compose service.
    Containers that fail to report are left out of the average; the service is only
    skipped when none of them report.
    """

    def __init__(self, project: ComposeProject, client=None, timeout=DEFAULT_SAMPLE_TIMEOUT):
        self.project = project
        self.client = client or docker.from_env(timeout=timeout)
        self.timeout = timeout
        self._pending: Optional[asyncio.Future] = None

    async def sample(self, service: str) -> UtilizationSample:
        # A timed-out read keeps its worker thread; never stack a second call on the backend.
        if self._pending is not None and not self._pending.done():
            raise SamplingError(service, "previous stats call still pending")

        loop = asyncio.get_running_loop()
        # The Docker SDK blocks; keep it off the event loop.
        self._pending = loop.run_in_executor(None, self._read, service)
        self._pending.add_done_callback(_consume_result)
        try:
            async with async_timeout.timeout(self.timeout):
                # Shielded so the future tracks the thread, not the await.
                return await asyncio.shield(self._pending)
        except asyncio.TimeoutError:
            raise SamplingError(service, f"no stats within {self.timeout:g}s") from None

    def _read(self, service: str) -> UtilizationSample:
        labels = [f"{LABEL_PROJECT}={self.project.name}", f"{LABEL_SERVICE}={service}"]
        try:
            containers = self.client.containers.list(filters={"label": labels, "status": "running"})
        except (DockerException, requests.exceptions.RequestException) as e:
            raise SamplingError(service, f"backend unavailable: {e}") from e

        if not containers:
            raise SamplingError(service, "no running containers")

        cpu, mem, failures = [], [], []
        for container in containers:
            try:
                stats = container.stats(stream=False)
            except (DockerException, requests.exceptions.RequestException) as e:
                failures.append(f"{container.name}: {e}")
                continue
            cpu.append(cpu_percent(stats))
            mem.append(mem_percent(stats))

        if not cpu:
            raise SamplingError(service, "; ".join(failures))

        return UtilizationSample(sum(cpu) / len(cpu), sum(mem) / len(mem))
