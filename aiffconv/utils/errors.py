"""Custom exceptions."""


class AiffconvError(Exception):
    """Base exception for aiffconv."""

    pass


class ConfigError(AiffconvError):
    """Invalid conversion request (bad option value, missing source)."""

    pass


class DependencyError(ConfigError):
    """Required external tool is not installed."""

    def __init__(self, message: str, hints: list[str] | None = None):
        super().__init__(message)
        self.hints = hints or []


class CoverArtError(AiffconvError):
    """Cover art could not be installed."""

    pass
