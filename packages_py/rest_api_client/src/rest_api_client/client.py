"""
ApiClient: runs HTTP exchanges on a single background worker and reports
each outcome through a ResultCallback.
"""
import asyncio
import logging
import queue
import re
import threading
from concurrent.futures import Future
from typing import Any, Callable, Optional

import httpx

from .callback import FutureCallback, ResultCallback
from .config import ClientConfig
from .encoding import wire_charset
from .errors import (
    ClientClosedError,
    MalformedEndpointError,
    QueueFullError,
    TransportError,
)
from .logger import format_body, set_log_level
from .options import RequestOptions
from .types import HTTP_NO_CONTENT, HTTP_OK, TRANSPORT_ERROR_CODE, ApiResult

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[ApiClient]"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_STOP = object()


def join_lines(text: str) -> str:
    """Concatenate the lines of ``text`` without reinserting line breaks."""
    return _LINE_BREAK.sub("", text)


def parse_endpoint(endpoint: Optional[str]) -> httpx.URL:
    """Parse an absolute http(s) URL or raise MalformedEndpointError."""
    if not endpoint:
        raise MalformedEndpointError(endpoint, "no endpoint set")
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as e:
        raise MalformedEndpointError(endpoint, str(e)) from e

    if url.scheme not in ("http", "https"):
        reason = f"unsupported scheme '{url.scheme}'" if url.scheme else "missing scheme"
        raise MalformedEndpointError(endpoint, reason)
    if not url.host:
        raise MalformedEndpointError(endpoint, "missing host")
    return url


class ApiClient:
    """
    Consumes web APIs off the caller's thread.

    All requests submitted to one client run one at a time, in submission
    order, on a dedicated daemon thread. Callbacks are invoked on that
    thread.
    """

    def __init__(
        self,
        charset: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        if config is None:
            config = ClientConfig.from_env(charset=charset)
        elif charset is not None:
            config = ClientConfig(**{**config.model_dump(), "charset": charset})

        self._config = config
        if config.log_level:
            set_log_level(config.log_level)

        self._client: httpx.Client = http_client or httpx.Client(
            follow_redirects=config.follow_redirects
        )
        # Flag to track if we own the client (created it)
        self._own_client = http_client is None

        # Unbounded internally so the stop marker can always be enqueued;
        # max_queue_size is enforced in request()
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._closed = False
        # Requests only; the stop marker is not counted
        self._pending = 0

    @property
    def charset(self) -> str:
        return self._config.charset

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Requests accepted but not yet completed."""
        return self._pending

    def request(self, options: RequestOptions, callback: ResultCallback) -> None:
        """
        Queue a request and return immediately.

        ``callback`` is invoked on the worker thread once a response (or a
        failure) is available.

        Raises:
            ClientClosedError: the client has been closed.
            QueueFullError: ``max_queue_size`` requests are already waiting.
        """
        with self._lock:
            if self._closed:
                raise ClientClosedError("ApiClient is closed")

            max_size = self._config.max_queue_size
            if max_size and self._queue.qsize() >= max_size:
                raise QueueFullError(max_size)

            self._ensure_worker()
            self._queue.put_nowait((options, callback))
            self._pending += 1

    def submit(self, options: RequestOptions) -> "Future[ApiResult]":
        """Queue a request and return a Future resolved with its ApiResult."""
        callback = FutureCallback()
        self.request(options, callback)
        return callback.future

    async def fetch(self, options: RequestOptions) -> ApiResult:
        """Await the ApiResult of a request from asyncio code."""
        return await asyncio.wrap_future(self.submit(options))

    def drain(self) -> None:
        """Block until every queued request has completed."""
        self._queue.join()

    def close(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """
        Stop accepting requests and shut the worker down.

        Queued requests still run unless ``cancel_pending`` is set, in which
        case each one receives ``on_failure(ClientClosedError)`` on the
        calling thread. With ``wait`` the call blocks until the worker exits.
        """
        with self._lock:
            already_closed = self._closed
            self._closed = True
            worker = self._worker

        if not already_closed:
            if cancel_pending:
                self._cancel_pending()

            if worker is None:
                self._close_http_client()
            else:
                self._queue.put(_STOP)

        if wait and worker is not None and worker is not threading.current_thread():
            worker.join()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _ensure_worker(self) -> None:
        if self._worker is None:
            self._worker = threading.Thread(
                target=self._run, name=self._config.worker_name, daemon=True
            )
            self._worker.start()

    def _run(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    self._close_http_client()
                    return
                options, callback = job
                try:
                    self._execute(options, callback)
                finally:
                    self._request_done()
            except Exception:
                logger.exception(f"{LOG_PREFIX} Unexpected error in worker")
            finally:
                self._queue.task_done()

    def _cancel_pending(self) -> None:
        while True:
            try:
                job = self._queue.get_nowait()
            except queue.Empty:
                return
            try:
                if job is not _STOP:
                    _, callback = job
                    error = ClientClosedError("ApiClient closed before the request was sent")
                    self._request_done()
                    self._notify(callback.on_failure, error)
            finally:
                self._queue.task_done()

    def _request_done(self) -> None:
        with self._lock:
            self._pending -= 1

    def _close_http_client(self) -> None:
        if self._own_client:
            self._client.close()

    def _execute(self, options: RequestOptions, callback: ResultCallback) -> None:
        try:
            url = parse_endpoint(options.endpoint)
        except MalformedEndpointError as e:
            logger.error(f"{LOG_PREFIX} {e}")
            self._notify(callback.on_failure, e)
            return

        method = options.method
        logger.debug(f"{LOG_PREFIX} {method.value} {url}")

        try:
            request = self._build_request(options, url)
            response = self._client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = TransportError(method.value, str(url), e)
            logger.error(f"{LOG_PREFIX} {error}")
            self._notify(callback.on_failure, error)
            logger.debug(f"{LOG_PREFIX} ErrorResponse: [{TRANSPORT_ERROR_CODE}]")
            return

        try:
            self._dispatch(response, callback)
        finally:
            response.close()

    def _build_request(self, options: RequestOptions, url: httpx.URL) -> httpx.Request:
        method = options.method
        if not method.has_body:
            return self._client.build_request(method.value, url)

        headers = {}
        if self._config.send_content_type:
            headers["Content-Type"] = f"{FORM_CONTENT_TYPE}; charset={wire_charset(self.charset)}"
        return self._client.build_request(
            method.value,
            url,
            headers=headers,
            content=options.encode_body(self.charset),
        )

    def _dispatch(self, response: httpx.Response, callback: ResultCallback) -> None:
        code = response.status_code
        log_title = "Success"

        if code == HTTP_OK:
            body = self._drain(response)
            self._notify(callback.on_success, body)
        elif code == HTTP_NO_CONTENT:
            body = ""
            self._notify(callback.on_success, body)
        else:
            log_title = "Error"
            body = self._drain(response)
            self._notify(callback.on_error, code, body)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"{LOG_PREFIX} {log_title}Response: [{code}]")
            logger.debug(f"{LOG_PREFIX} {format_body(body)}")

    def _drain(self, response: httpx.Response) -> str:
        try:
            raw = response.read()
        except (httpx.HTTPError, httpx.StreamError) as e:
            logger.error(f"{LOG_PREFIX} Failed to read response body: {e}")
            return ""
        return join_lines(raw.decode(self.charset, errors="replace"))

    def _notify(self, handler: Callable[..., None], *args: Any) -> None:
        try:
            handler(*args)
        except Exception:
            logger.exception(f"{LOG_PREFIX} Result callback raised")
