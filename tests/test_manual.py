import pytest

from composescale.errors import ActuationError, ConfigurationError
from composescale.manual import parse_service_replicas, scale_services

from conftest import FakeActuator, FakeDiscovery


def test_parse_service_replicas():
    assert parse_service_replicas(["web=3", "worker=0", "web=5"]) == {"web": 5, "worker": 0}


@pytest.mark.parametrize("arg", ["web", "=3", "web=", "web=three", "web=-1"])
def test_invalid_specifiers(arg):
    with pytest.raises(ConfigurationError, match="invalid scale specifier"):
        parse_service_replicas([arg])


@pytest.mark.asyncio
async def test_scale_services_applies_each_count(logger):
    actuator = FakeActuator()

    result = await scale_services({"worker": 2, "web": 4}, actuator, FakeDiscovery({"web": 1, "worker": 1}), logger)

    assert actuator.calls == [("web", 4), ("worker", 2)]
    assert result == {"web": 4, "worker": 2}


@pytest.mark.asyncio
async def test_unknown_service_changes_nothing(logger):
    actuator = FakeActuator()

    with pytest.raises(ConfigurationError, match="ghost"):
        await scale_services({"web": 2, "ghost": 1}, actuator, FakeDiscovery({"web": 1}), logger)
    assert actuator.calls == []


@pytest.mark.asyncio
async def test_actuation_error_propagates(logger):
    with pytest.raises(ActuationError):
        await scale_services({"web": 2}, FakeActuator({"web"}), FakeDiscovery({"web": 1}), logger)
