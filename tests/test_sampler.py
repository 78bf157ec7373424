import asyncio
import threading
import time

from unittest.mock import MagicMock

import pytest

from docker.errors import APIError

from composescale.backend.compose import ComposeProject
from composescale.backend.sampler import DockerStatsSampler, cpu_percent, mem_percent
from composescale.errors import SamplingError


def stats(total, pre_total, system, pre_system, cpus=2, usage=0, limit=0, inactive=0):
    return {
        "cpu_stats": {"cpu_usage": {"total_usage": total}, "system_cpu_usage": system, "online_cpus": cpus},
        "precpu_stats": {"cpu_usage": {"total_usage": pre_total}, "system_cpu_usage": pre_system},
        "memory_stats": {"usage": usage, "limit": limit, "stats": {"inactive_file": inactive}},
    }


def container(name, payload=None, error=None):
    c = MagicMock()
    c.name = name
    if error is not None:
        c.stats.side_effect = error
    else:
        c.stats.return_value = payload
    return c


def test_cpu_percent_follows_docker_cli_formula():
    # 100 of 1000 system ticks across 2 CPUs.
    assert cpu_percent(stats(300, 200, 2000, 1000, cpus=2)) == pytest.approx(20.0)


def test_cpu_percent_falls_back_to_percpu_count():
    payload = stats(300, 200, 2000, 1000)
    payload["cpu_stats"].pop("online_cpus")
    payload["cpu_stats"]["cpu_usage"]["percpu_usage"] = [1, 1, 1, 1]
    assert cpu_percent(payload) == pytest.approx(40.0)


def test_cpu_percent_is_zero_without_progress():
    assert cpu_percent(stats(300, 300, 2000, 1000)) == 0.0
    assert cpu_percent({"cpu_stats": {}, "precpu_stats": {}}) == 0.0


def test_mem_percent_excludes_page_cache():
    assert mem_percent(stats(0, 0, 0, 0, usage=600, limit=1000, inactive=100)) == pytest.approx(50.0)


def test_mem_percent_without_limit():
    assert mem_percent({"memory_stats": {}}) == 0.0


@pytest.fixture
def project():
    return ComposeProject("shop")


@pytest.mark.asyncio
async def test_sample_averages_running_containers(project):
    client = MagicMock()
    client.containers.list.return_value = [
        container("shop-web-1", stats(300, 200, 2000, 1000, usage=200, limit=1000)),
        container("shop-web-2", stats(500, 200, 2000, 1000, usage=400, limit=1000)),
    ]

    sample = await DockerStatsSampler(project, client=client).sample("web")

    assert sample.cpu_percent == pytest.approx(40.0)
    assert sample.mem_percent == pytest.approx(30.0)
    filters = client.containers.list.call_args.kwargs["filters"]
    assert filters["label"] == ["com.docker.compose.project=shop", "com.docker.compose.service=web"]


@pytest.mark.asyncio
async def test_partial_failure_uses_reporting_containers(project):
    client = MagicMock()
    client.containers.list.return_value = [
        container("shop-web-1", stats(300, 200, 2000, 1000, usage=200, limit=1000)),
        container("shop-web-2", error=APIError("gone")),
    ]

    sample = await DockerStatsSampler(project, client=client).sample("web")

    assert sample.cpu_percent == pytest.approx(20.0)


@pytest.mark.asyncio
async def test_no_reporting_container_is_a_sampling_error(project):
    client = MagicMock()
    client.containers.list.return_value = [container("shop-web-1", error=APIError("gone"))]

    with pytest.raises(SamplingError, match="shop-web-1"):
        await DockerStatsSampler(project, client=client).sample("web")


@pytest.mark.asyncio
async def test_service_without_containers_is_a_sampling_error(project):
    client = MagicMock()
    client.containers.list.return_value = []

    with pytest.raises(SamplingError) as exc:
        await DockerStatsSampler(project, client=client).sample("web")
    assert exc.value.service == "web"
    assert exc.value.reason == "no running containers"


@pytest.mark.asyncio
async def test_unreachable_backend_is_a_sampling_error(project):
    client = MagicMock()
    client.containers.list.side_effect = APIError("daemon down")

    with pytest.raises(SamplingError, match="backend unavailable"):
        await DockerStatsSampler(project, client=client).sample("web")


@pytest.mark.asyncio
async def test_slow_stats_time_out(project):
    client = MagicMock()

    def slow_list(**_):
        time.sleep(0.5)
        return []

    client.containers.list.side_effect = slow_list

    with pytest.raises(SamplingError, match="no stats within"):
        await DockerStatsSampler(project, client=client, timeout=0.05).sample("web")


@pytest.mark.asyncio
async def test_timed_out_read_blocks_the_next_backend_call(project):
    client = MagicMock()
    release = threading.Event()

    def stuck_list(**_):
        release.wait(2)
        return []

    client.containers.list.side_effect = stuck_list
    sampler = DockerStatsSampler(project, client=client, timeout=0.05)

    with pytest.raises(SamplingError, match="no stats within"):
        await sampler.sample("web")
    with pytest.raises(SamplingError, match="previous stats call still pending"):
        await sampler.sample("worker")
    assert client.containers.list.call_count == 1

    release.set()
    await asyncio.sleep(0.2)

    with pytest.raises(SamplingError, match="no running containers"):
        await sampler.sample("worker")
    assert client.containers.list.call_count == 2
