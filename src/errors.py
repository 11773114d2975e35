"""
Error types raised by the upstream-facing components.

Transport failures from httpx are not wrapped here; they propagate as-is
and the request handlers turn them into generic server errors.
"""


class ProxyError(Exception):
    """Base class for errors the proxy reports with details to its clients."""


class ConfigurationError(ProxyError):
    """A required credential is missing. Not retryable."""


class UpstreamError(ProxyError):
    """An upstream service answered with a non-2xx status."""

    def __init__(self, service: str, status: int, body: str):
        self.service = service
        self.status = status
        self.body = body
        super().__init__(f"{service} {status}: {body}")
