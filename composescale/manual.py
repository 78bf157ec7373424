"""One-shot scaling to explicit replica counts (`composescale scale web=3 worker=2`)."""

from typing import Dict, List, Optional

from composescale.backend.base import Actuator, ServiceDiscovery
from composescale.errors import ConfigurationError
from composescale.logger import ScaleLogger

def parse_service_replicas(args: List[str]) -> Dict[str, int]:
    """Parses `SERVICE=REPLICAS` arguments. A later argument for the same service wins."""

    replicas = {}
    for arg in args:
        service, sep, value = arg.partition("=")
        if not sep or not service or not value:
            raise ConfigurationError(f"invalid scale specifier: {arg}")
        try:
            count = int(value)
        except ValueError:
            raise ConfigurationError(f"invalid scale specifier: can't parse replica value as int: {arg}") from None
        if count < 0:
            raise ConfigurationError(f"invalid scale specifier: replicas cannot be negative: {arg}")
        replicas[service] = count
    return replicas

async def scale_services(replicas: Dict[str, int], actuator: Actuator, discovery: ServiceDiscovery,
                         logger: Optional[ScaleLogger] = None) -> Dict[str, int]:
    """
    Applies each requested count, services in name order. Unknown services are rejected
    before anything is changed; an actuation failure stops the command.
    """

    logger = logger or ScaleLogger()
    discovered = await discovery.discover()

    unknown = sorted(set(replicas) - set(discovered))
    if unknown:
        raise ConfigurationError(f"no such service: {', '.join(unknown)}")

    for service in sorted(replicas):
        logger.std_log("Scaling %s from %d to %d replicas", service, discovered[service], replicas[service])
        await actuator.apply_scale(service, replicas[service])

    return {service: replicas[service] for service in sorted(replicas)}
