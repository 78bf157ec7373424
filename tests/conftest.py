"""
Shared fixtures and in-memory collaborators for the composescale tests.
"""

import io
import itertools

import pytest

from composescale.auto_scaling import ScalingPolicy, UtilizationSample
from composescale.backend.base import Actuator, MetricsSampler, ServiceDiscovery
from composescale.errors import ActuationError, SamplingError
from composescale.logger import ScaleLogger

_logger_ids = itertools.count()


class FakeSampler(MetricsSampler):
    """Returns canned samples; a service mapped to an exception raises it instead."""

    def __init__(self, samples):
        self.samples = dict(samples)
        self.calls = []

    async def sample(self, service):
        self.calls.append(service)
        value = self.samples.get(service)
        if value is None:
            raise SamplingError(service, "service not found")
        if isinstance(value, Exception):
            raise value
        return UtilizationSample(*value)


class FakeActuator(Actuator):
    """Records every call; services listed in `failing` raise ActuationError."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def apply_scale(self, service, target_scale):
        self.calls.append((service, target_scale))
        if service in self.failing:
            raise ActuationError(service, target_scale, "backend refused")


class FakeDiscovery(ServiceDiscovery):
    def __init__(self, services):
        self.services = dict(services)

    async def discover(self):
        return dict(self.services)


@pytest.fixture
def policy():
    """Default thresholds (70/70), bounds 1..10, balanced."""
    return ScalingPolicy(interval=0.01)


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def logger(log_stream):
    """Console-only logger writing into `log_stream`."""
    return ScaleLogger(name=f"test_{next(_logger_ids)}", stream=log_stream)
