"""Exceptions raised by the intric-deploy library modules.

Commands catch ``DeployError`` at the top of ``main()``, print it and exit 1.
"""

from typing import Optional


class DeployError(Exception):
    """Base class for every fatal error in this package."""


class ConfigError(DeployError):
    """A required input is missing or the override file cannot be read."""


class ExtractionError(DeployError):
    """A field could not be extracted from the override file."""


class ApiError(DeployError):
    """An HTTP call failed or returned a non-2xx status."""

    def __init__(self, action: str, status_code: Optional[int] = None, body: str = ""):
        self.action = action
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Failed to {action}: {body}"
        else:
            message = f"Failed to {action} (HTTP {status_code}). Response: {body}"
        super().__init__(message)


class MissingFieldError(DeployError):
    """A JSON response did not carry an expected field."""
