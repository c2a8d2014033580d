"""
Rest API Client - callback-based HTTP client running on a background worker
"""

__version__ = "0.1.0"

from .types import (
    RequestMethod,
    ApiResult,
    SuccessResult,
    ErrorResult,
    FailureResult,
    TRANSPORT_ERROR_CODE,
)
from .errors import (
    ApiClientError,
    InvalidCharsetError,
    MalformedEndpointError,
    TransportError,
    ClientClosedError,
    QueueFullError,
)
from .options import RequestOptions, RequestOptionsBuilder
from .callback import ResultCallback, FunctionCallback, FutureCallback
from .config import ClientConfig
from .logger import get_log_level, set_log_level
from .client import ApiClient

__all__ = [
    "ApiClient",
    "ClientConfig",
    "RequestOptions", "RequestOptionsBuilder",
    "RequestMethod",
    "ResultCallback", "FunctionCallback", "FutureCallback",
    "ApiResult", "SuccessResult", "ErrorResult", "FailureResult",
    "TRANSPORT_ERROR_CODE",
    "ApiClientError", "InvalidCharsetError", "MalformedEndpointError",
    "TransportError", "ClientClosedError", "QueueFullError",
    "get_log_level", "set_log_level",
]
