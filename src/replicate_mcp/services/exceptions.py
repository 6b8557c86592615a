"""Service error hierarchy for image generation tool calls.

This module defines the exception hierarchy for service-level errors:
- ServiceError: Base for all errors surfaced to the tool caller
- InvalidInputError: Tool arguments rejected before any remote call
- RemoteError: Non-success response or transport failure from the Replicate API
- GenerationError: Prediction reached a failed state or reported an error
- GenerationTimeoutError: Polling exhausted its attempt budget
- UnknownToolError: Tool call named a tool that is not registered

None of these are retried. The tool handler converts each into an error envelope.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service errors."""

    pass


class InvalidInputError(ServiceError):
    """Required argument missing or of the wrong type."""

    pass


class RemoteError(ServiceError):
    """Replicate API returned a non-success status or could not be reached.

    Attributes:
        status_code: HTTP status code, or None for transport-level failures
        body: Response body text (empty for transport-level failures)
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GenerationError(ServiceError):
    """Prediction failed remotely."""

    pass


class GenerationTimeoutError(ServiceError, TimeoutError):
    """Prediction did not reach a terminal state within the polling budget."""

    pass


class UnknownToolError(ServiceError):
    """Tool call named a tool other than the registered one."""

    pass
