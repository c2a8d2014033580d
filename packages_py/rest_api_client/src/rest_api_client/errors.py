from typing import Optional

from .types import TRANSPORT_ERROR_CODE


class ApiClientError(Exception):
    """Base exception for rest-api-client errors."""

    def __init__(self, message: str, code: int = TRANSPORT_ERROR_CODE):
        super().__init__(message)
        self.code = code


class InvalidCharsetError(ApiClientError, ValueError):
    def __init__(self, charset: str):
        super().__init__(f"Unknown charset '{charset}'")
        self.charset = charset


class MalformedEndpointError(ApiClientError):
    def __init__(self, endpoint: Optional[str], reason: str):
        super().__init__(f"Malformed endpoint '{endpoint}': {reason}")
        self.endpoint = endpoint
        self.reason = reason


class TransportError(ApiClientError):
    def __init__(self, method: str, url: str, cause: Exception):
        msg = f"{method} {url} failed before a status was received: {cause}"
        super().__init__(msg)
        self.method = method
        self.url = url
        self.cause = cause


class ClientClosedError(ApiClientError):
    pass


class QueueFullError(ApiClientError):
    def __init__(self, max_size: int):
        super().__init__(f"Request queue is full ({max_size} pending)")
        self.max_size = max_size
