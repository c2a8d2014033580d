"""
Request options and their fluent builder.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .encoding import DEFAULT_CHARSET, encode_pairs, normalize_charset
from .types import RequestMethod


def _freeze(params: Optional[Dict[str, Any]]) -> Optional[Mapping[str, Any]]:
    if params is None:
        return None
    return MappingProxyType(dict(params))


@dataclass(frozen=True)
class RequestOptions:
    """
    Settings for a single call: endpoint, method, query and body parameters
    and the charset used to percent-encode them.

    Use ``RequestOptions.Builder`` to create an instance.
    """
    charset: str
    base_endpoint: Optional[str] = None
    request_method: Optional[RequestMethod] = None
    query_params: Optional[Mapping[str, Any]] = None
    request_params: Optional[Mapping[str, Any]] = None

    @property
    def method(self) -> RequestMethod:
        """Request method, GET when none was set."""
        return self.request_method or RequestMethod.GET

    @property
    def endpoint(self) -> Optional[str]:
        """Base endpoint followed by the encoded query string, if any.

        Parameters with an empty key are skipped.
        """
        if self.base_endpoint is None or not self.query_params:
            return self.base_endpoint

        pairs = encode_pairs(self.query_params, self.charset, skip_empty_keys=True)
        if not pairs:
            return self.base_endpoint
        return f"{self.base_endpoint}?{'&'.join(pairs)}"

    @property
    def request_params_string(self) -> str:
        """Body parameters as ``k1=v1&k2=v2``, or ``""`` when there are none."""
        if not self.request_params:
            return ""
        return "&".join(encode_pairs(self.request_params, self.charset))

    def encode_body(self, charset: Optional[str] = None) -> bytes:
        return self.request_params_string.encode(charset or self.charset)

    class Builder:
        """Fluent builder for RequestOptions."""

        def __init__(self, charset: str = DEFAULT_CHARSET):
            self._charset = normalize_charset(charset)
            self._endpoint: Optional[str] = None
            self._method: Optional[RequestMethod] = None
            self._query_params: Optional[Dict[str, Any]] = None
            self._request_params: Optional[Dict[str, Any]] = None

        def set_endpoint(self, endpoint: Optional[str]) -> "RequestOptions.Builder":
            self._endpoint = endpoint
            return self

        def set_request_method(
            self, method: Optional[Union[RequestMethod, str]]
        ) -> "RequestOptions.Builder":
            self._method = None if method is None else RequestMethod.parse(method)
            return self

        def with_query_params(
            self, params: Optional[Mapping[str, Any]]
        ) -> "RequestOptions.Builder":
            self._query_params = None if params is None else dict(params)
            return self

        def query_param(self, key: str, value: Any) -> "RequestOptions.Builder":
            if self._query_params is None:
                self._query_params = {}
            self._query_params[key] = value
            return self

        def with_request_params(
            self, params: Optional[Mapping[str, Any]]
        ) -> "RequestOptions.Builder":
            self._request_params = None if params is None else dict(params)
            return self

        def request_param(self, key: str, value: Any) -> "RequestOptions.Builder":
            if self._request_params is None:
                self._request_params = {}
            self._request_params[key] = value
            return self

        def build(self) -> "RequestOptions":
            """Snapshot the current state into an immutable RequestOptions."""
            return RequestOptions(
                charset=self._charset,
                base_endpoint=self._endpoint,
                request_method=self._method,
                query_params=_freeze(self._query_params),
                request_params=_freeze(self._request_params),
            )


RequestOptionsBuilder = RequestOptions.Builder
