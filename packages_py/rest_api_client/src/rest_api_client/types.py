"""
Core type definitions for rest-api-client.
"""
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .errors import ApiClientError

# Status reported when no HTTP status could be obtained
TRANSPORT_ERROR_CODE = -1

HTTP_OK = 200
HTTP_NO_CONTENT = 204


class RequestMethod(str, Enum):
    """Supported request methods, valued by their wire verb."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        """POST and PUT carry a form-encoded body."""
        return self in (RequestMethod.POST, RequestMethod.PUT)

    @classmethod
    def parse(cls, value: Union["RequestMethod", str]) -> "RequestMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unsupported request method '{value}'. "
                f"Expected one of: {', '.join(m.value for m in cls)}"
            ) from None


@dataclass(frozen=True)
class SuccessResult:
    """Status 200 or 204."""
    body: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ErrorResult:
    """Any other status, including the transport sentinel."""
    code: int
    body: str

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class FailureResult:
    """The request never produced a usable exchange."""
    error: "ApiClientError"

    @property
    def code(self) -> int:
        return self.error.code

    @property
    def ok(self) -> bool:
        return False


ApiResult = Union[SuccessResult, ErrorResult, FailureResult]
