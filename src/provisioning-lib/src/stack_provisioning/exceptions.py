"""
stack_provisioning.exceptions — Errors raised while handling a lifecycle event.

InvocationError and NotificationError are caught once by the handler and turned
into a FAILED callback. Anything raised by the second callback attempt escapes
to the Lambda runtime.
"""

from __future__ import annotations


class LifecycleError(Exception):
    """Base class for every error raised by stack_provisioning."""


class LifecycleEventError(LifecycleError, ValueError):
    """
    Raised when a CloudFormation event cannot be turned into an InvocationContext.

    Attributes:
        missing: Names of the required fields that were absent or empty,
                 e.g. ("ResponseURL", "ResourceProperties").
    """

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        self.missing = missing
        super().__init__(message)


class InvocationError(LifecycleError):
    """
    Raised when the Restart function could not be invoked or reported a failure.

    Attributes:
        function_name: Name of the Lambda that was invoked.
        status_code:   StatusCode from the invoke response, None on client/transport error.
    """

    def __init__(self, function_name: str, *, status_code: int | None = None) -> None:
        self.function_name = function_name
        self.status_code = status_code
        if status_code is None:
            message = f"Invocation of {function_name!r} failed"
        else:
            message = f"Invocation of {function_name!r} failed with status {status_code}"
        super().__init__(message)


class NotificationError(LifecycleError):
    """
    Raised when the CloudFormation callback PUT failed or was rejected.

    Attributes:
        url:         The pre-signed ResponseURL the status was sent to.
        status_code: HTTP status from the callback endpoint, None on transport error.
    """

    def __init__(self, url: str, *, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        if status_code is None:
            message = "Callback request failed before a response was received"
        else:
            message = f"Callback request rejected with HTTP {status_code}"
        super().__init__(message)
