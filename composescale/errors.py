class ComposeScaleError(Exception):
    """Base class for every error raised by composescale."""


class ConfigurationError(ComposeScaleError):
    """Invalid startup configuration. The control loop never starts."""


class DiscoveryError(ComposeScaleError):
    """The project's services could not be listed from the backend."""


class SamplingError(ComposeScaleError):
    """Utilization of a service could not be read this tick."""

    def __init__(self, service, reason):
        super().__init__(f"{service}: {reason}")
        self.service = service
        self.reason = reason


class ActuationError(ComposeScaleError):
    """The backend refused or failed to apply a replica count."""

    def __init__(self, service, target, reason):
        super().__init__(f"{service} -> {target}: {reason}")
        self.service = service
        self.target = target
        self.reason = reason
