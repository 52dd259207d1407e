"""Exception hierarchy for mcp-sentinel."""


class SentinelError(Exception):
    """Base class for all mcp-sentinel errors."""


class FatalScanError(SentinelError):
    """The run cannot proceed at all; no partial result is produced."""


class TargetNotFoundError(FatalScanError):
    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Target path does not exist: '{target}'")


class DiscoveryError(FatalScanError):
    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to discover files under '{target}': {reason}")


class ConfigError(SentinelError):
    """An option value was rejected before scanning began."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Invalid configuration for '{field}': {message}")
