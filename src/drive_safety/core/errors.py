"""Exception types raised by Drive Safety."""


class DriveSafetyError(Exception):
    """Base class for all Drive Safety errors."""


class ProviderUnavailableError(DriveSafetyError):
    """Routing, geocoding or weather provider could not be reached or answered badly."""

    def __init__(self, provider: str, reason):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider} unavailable: {reason}")


class LocationUnsupportedError(DriveSafetyError):
    """Tracking was requested without a position-sample source."""


class LocationError(DriveSafetyError):
    """Terminal error reported by a position-sample source."""
