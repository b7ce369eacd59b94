"""Canned service errors for rehearsing failure paths.

:class:`ServiceError` mirrors the shape of errors raised by real service
clients: a machine readable ``code``, an HTTP-like ``status_code`` and a
``retryable`` flag callers can base retry decisions on.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Structured error returned by a (simulated) remote service."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int | None = None,
        *,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.retryable = retryable

    def __repr__(self) -> str:
        """Return a debug representation."""
        return (
            f"ServiceError(code={self.code!r}, status_code={self.status_code!r}, "
            f"retryable={self.retryable!r}, message={self.message!r})"
        )


def no_such_key_error(key: str | None = None) -> ServiceError:
    """Return the error raised for a missing object key."""
    message = "The specified key does not exist."
    if key:
        message = f"{message} Key: {key}"
    return ServiceError(message, "NoSuchKey", 404)


def no_such_bucket_error(bucket: str | None = None) -> ServiceError:
    """Return the error raised for a missing bucket."""
    message = "The specified bucket does not exist."
    if bucket:
        message = f"{message} Bucket: {bucket}"
    return ServiceError(message, "NoSuchBucket", 404)


def access_denied_error(resource: str | None = None) -> ServiceError:
    """Return an authorisation failure."""
    message = f"Access Denied for resource: {resource}" if resource else "Access Denied"
    return ServiceError(message, "AccessDenied", 403)


def resource_not_found_error(resource: str | None = None) -> ServiceError:
    """Return the error raised for a missing table or index."""
    message = "Requested resource not found"
    if resource:
        message = f"{message}: {resource}"
    return ServiceError(message, "ResourceNotFoundException", 400)


def conditional_check_failed_error() -> ServiceError:
    """Return the error raised when a conditional write is rejected."""
    return ServiceError(
        "The conditional request failed", "ConditionalCheckFailedException", 400
    )


def throttling_error() -> ServiceError:
    """Return a retryable rate-limit error."""
    return ServiceError("Rate exceeded", "Throttling", 400, retryable=True)


def internal_server_error() -> ServiceError:
    """Return a retryable server-side failure."""
    return ServiceError(
        "We encountered an internal error. Please try again.",
        "InternalServerError",
        500,
        retryable=True,
    )


__all__ = [
    "ServiceError",
    "access_denied_error",
    "conditional_check_failed_error",
    "internal_server_error",
    "no_such_bucket_error",
    "no_such_key_error",
    "resource_not_found_error",
    "throttling_error",
]
