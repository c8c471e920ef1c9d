class RocketGateError(Exception):
    """Base exception for all rocketgate_dispatch errors."""

    pass


class GatewayConfigurationError(ValueError, RocketGateError):
    """Exception raised when the gateway configuration is invalid or incomplete."""

    pass


class InvalidReferenceGuidError(ValueError, RocketGateError):
    """Exception raised when a reference GUID cannot be routed to a site."""

    # Matches ErrorClass.INVALID_REFERENCE_GUID
    error_class = 410

    def __init__(self, detail: str, reference_guid: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.reference_guid = reference_guid
