import asyncio

from typing import Dict, Iterable, List, Optional

from .policy import ScalingPolicy
from .scaler import AutoScaler
from .state import ScalingDecision, ServiceScaleState
from composescale.backend.base import Actuator, MetricsSampler, ServiceDiscovery
from composescale.errors import ActuationError, ConfigurationError, SamplingError
from composescale.logger import ScaleLogger

class AutoScaleCoordinator:
    """
    Drives the autoscaling loop for a Compose project.

    Every tick walks the target services one after another: sample usage, ask the strategy
    for a target, clamp it, and actuate only when the target differs from the last known-good
    scale. A failing service is skipped with a warning and never stops the rest of the tick.
    The replica states are owned by this instance and only ever touched from `tick()`.
    """

    def __init__(self, sampler: MetricsSampler, actuator: Actuator, discovery: ServiceDiscovery, logger: Optional[ScaleLogger] = None):
        self.sampler = sampler
        self.actuator = actuator
        self.discovery = discovery
        self.logger = logger or ScaleLogger()

        self.states: Dict[str, ServiceScaleState] = {}
        self.scaler: Optional[AutoScaler] = None
        self.running = False
        self.ticks = 0

    async def resolve_services(self, services: Optional[Iterable[str]] = None) -> Dict[str, ServiceScaleState]:
        """
        Builds the state map from the services discovered at loop start. Explicitly named
        services that the project does not have are reported and dropped.
        """

        discovered = await self.discovery.discover()
        names = list(dict.fromkeys(services or ()))

        if names:
            for missing in [n for n in names if n not in discovered]:
                self.logger.warn_log("Warning: service %s not found in project, ignoring it", missing)
            names = [n for n in names if n in discovered]
        else:
            names = sorted(discovered)

        if not names:
            raise ConfigurationError("no services to auto-scale")

        return {name: ServiceScaleState(name, discovered[name]) for name in names}

    async def evaluate(self, state: ServiceScaleState) -> ScalingDecision:
        """Runs sample, decide, clamp and actuate for one service."""

        decision = ScalingDecision(state.service, state.current_scale, state.current_scale)

        try:
            sample = await self.sampler.sample(state.service)
        except SamplingError as e:
            decision.error = e.reason
            self.logger.warn_log("Warning: Failed to get resource usage for %s: %s", state.service, e.reason)
            return decision

        decision.cpu_percent, decision.mem_percent = sample.cpu_percent, sample.mem_percent
        self.logger.std_log("Service: %s, Current replicas: %d, CPU: %.1f%%, Memory: %.1f%%",
                            state.service, state.current_scale, sample.cpu_percent, sample.mem_percent)

        decision.target_scale = self.scaler.evaluate(state.current_scale, sample)
        if not decision.changed:
            return decision

        self.logger.std_log("Scaling %s from %d to %d replicas", state.service, state.current_scale, decision.target_scale)
        try:
            await self.actuator.apply_scale(state.service, decision.target_scale)
        except ActuationError as e:
            # Keep the last known-good scale so the next tick starts from it, not from the failed target.
            decision.error = e.reason
            self.logger.warn_log("Warning: Failed to scale %s: %s", state.service, e.reason)
            return decision

        state.current_scale = decision.target_scale
        decision.applied = True
        self.logger.std_log("Successfully scaled %s to %d replicas", state.service, decision.target_scale)
        return decision

    async def tick(self) -> List[ScalingDecision]:
        """Evaluates every target service once, sequentially."""

        decisions = []
        for state in self.states.values():
            decision = await self.evaluate(state)
            self.logger.csv_log(decision.as_row())
            decisions.append(decision)

        self.ticks += 1
        return decisions

    async def _wait(self, stop_event: asyncio.Event, interval: float) -> bool:
        """Sleeps for `interval` or until stopped. Returns True when the loop should stop."""

        if stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return False
        return True

    async def run(self, policy: ScalingPolicy, services: Optional[Iterable[str]] = None,
                  stop_event: Optional[asyncio.Event] = None, max_ticks: Optional[int] = None):
        """
        Runs ticks until `stop_event` is set or `max_ticks` ticks have completed.

        Configuration problems (bad policy, no services to watch) raise ConfigurationError before
        the first tick. Setting the event never interrupts a service evaluation: it is honoured
        before the inter-tick sleep, during it, and at the top of the next tick.
        """

        self.scaler = AutoScaler(policy)
        self.states = await self.resolve_services(services)
        self.ticks = 0
        stop_event = stop_event or asyncio.Event()

        self.logger.file_log("Policy: %s", policy.to_dict())
        self.logger.std_log("Starting auto-scaling with strategy: %s", policy.strategy.value)
        self.logger.std_log("Thresholds: CPU %.1f%%, Memory %.1f%%", policy.cpu_threshold, policy.mem_threshold)
        self.logger.std_log("Replica range: %d - %d", policy.min_replicas, policy.max_replicas)
        self.logger.std_log("Check interval: %g seconds", policy.interval)
        self.logger.std_log("Auto-scaling services: %s", ", ".join(self.states))

        self.running = True
        try:
            while not stop_event.is_set():
                await self.tick()

                if max_ticks is not None and self.ticks >= max_ticks:
                    break
                if await self._wait(stop_event, policy.interval):
                    break
        finally:
            self.running = False
            self.logger.std_log("Auto-scaling stopped.")

        return self.states
