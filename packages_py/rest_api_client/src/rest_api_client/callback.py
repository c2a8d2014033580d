"""
Result callback contract.

Callbacks are invoked on the client's worker thread. Callers that need the
result on another thread or event loop must hand it over themselves
(``FutureCallback`` does this for ``concurrent.futures``).
"""
from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Callable, Optional

from .errors import ApiClientError
from .types import ApiResult, ErrorResult, FailureResult, SuccessResult


class ResultCallback(ABC):
    """
    Receives the outcome of a request. Exactly one method is called, once.

    The body is the raw response text (JSON, XML or anything else); parsing
    it is up to the implementation.
    """

    @abstractmethod
    def on_success(self, body: str) -> None:
        ...

    @abstractmethod
    def on_error(self, code: int, body: str) -> None:
        ...

    def on_failure(self, error: ApiClientError) -> None:
        """
        Called when the request never produced an HTTP status (bad endpoint,
        connection failure, client closed). Defaults to
        ``on_error(error.code, "")``.
        """
        self.on_error(error.code, "")


class FunctionCallback(ResultCallback):
    """Adapts plain functions to the ResultCallback contract."""

    def __init__(
        self,
        on_success: Callable[[str], None],
        on_error: Callable[[int, str], None],
        on_failure: Optional[Callable[[ApiClientError], None]] = None,
    ):
        self._on_success = on_success
        self._on_error = on_error
        self._on_failure = on_failure

    def on_success(self, body: str) -> None:
        self._on_success(body)

    def on_error(self, code: int, body: str) -> None:
        self._on_error(code, body)

    def on_failure(self, error: ApiClientError) -> None:
        if self._on_failure is None:
            super().on_failure(error)
        else:
            self._on_failure(error)


class FutureCallback(ResultCallback):
    """Resolves a Future with the ApiResult of the request."""

    def __init__(self, future: Optional["Future[ApiResult]"] = None):
        self.future: "Future[ApiResult]" = future if future is not None else Future()

    def _resolve(self, result: ApiResult) -> None:
        # Caller may have cancelled while the request was queued
        if not self.future.done():
            self.future.set_result(result)

    def on_success(self, body: str) -> None:
        self._resolve(SuccessResult(body))

    def on_error(self, code: int, body: str) -> None:
        self._resolve(ErrorResult(code, body))

    def on_failure(self, error: ApiClientError) -> None:
        self._resolve(FailureResult(error))
