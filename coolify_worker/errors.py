"""
Coolify Worker Exceptions
=========================

Failure taxonomy shared by the client, the services and the command
boundary.
"""

from typing import Any, Optional


class CoolifyError(Exception):
    """Base exception for worker errors."""
    pass


class ConfigurationError(CoolifyError):
    """Required configuration (URL, token, server identity) is missing."""
    pass


class PayloadValidationError(CoolifyError):
    """Command payload is missing required fields."""

    def __init__(self, fields: list):
        self.fields = list(fields)
        verb = "is" if len(self.fields) == 1 else "are"
        super().__init__(f"{', '.join(self.fields)} {verb} required")


class CoolifyAPIError(CoolifyError):
    """Control plane answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        method: str = "GET",
        path: str = "",
        payload: Optional[Any] = None,
    ):
        self.status_code = status_code
        self.method = method
        self.path = path
        self.payload = payload
        super().__init__(f"coolify_api_{status_code}")


class ResponseShapeError(CoolifyError):
    """Successful response lacks an expected field or has the wrong shape."""
    pass


class ProvisioningError(CoolifyError):
    """A site provisioning step failed; the application may be left half-configured."""

    def __init__(self, step: str, cause: BaseException, app_uuid: Optional[str] = None):
        self.step = step
        self.cause = cause
        self.app_uuid = app_uuid
        super().__init__(str(cause) or type(cause).__name__)
