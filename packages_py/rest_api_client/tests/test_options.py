"""
Tests for RequestOptions and its builder.
"""
import dataclasses

import pytest
from rest_api_client import RequestMethod, RequestOptions, RequestOptionsBuilder
from rest_api_client.errors import InvalidCharsetError


def test_builder_alias():
    assert RequestOptionsBuilder is RequestOptions.Builder


def test_request_builder():
    opts = (
        RequestOptions.Builder("utf-8")
        .set_endpoint("https://example.com/api")
        .set_request_method(RequestMethod.POST)
        .with_query_params({"q": "search"})
        .with_request_params({"foo": "bar"})
        .build()
    )

    assert opts.charset == "utf-8"
    assert opts.base_endpoint == "https://example.com/api"
    assert opts.method == RequestMethod.POST
    assert opts.endpoint == "https://example.com/api?q=search"
    assert opts.request_params_string == "foo=bar"


def test_builder_rejects_unknown_charset():
    with pytest.raises(InvalidCharsetError):
        RequestOptions.Builder("klingon")


def test_default_method_is_get():
    opts = RequestOptions.Builder().set_endpoint("http://x.test").build()
    assert opts.request_method is None
    assert opts.method == RequestMethod.GET


def test_method_from_string():
    opts = RequestOptions.Builder().set_request_method("delete").build()
    assert opts.method is RequestMethod.DELETE


def test_method_invalid_string():
    with pytest.raises(ValueError, match="Unsupported request method"):
        RequestOptions.Builder().set_request_method("PATCH")


def test_endpoint_without_query_params():
    opts = RequestOptions.Builder().set_endpoint("http://x.test/items").build()
    assert opts.endpoint == "http://x.test/items"


def test_endpoint_with_empty_query_params():
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test/items")
        .with_query_params({})
        .build()
    )
    assert opts.endpoint == "http://x.test/items"


def test_endpoint_only_empty_keys():
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test/items")
        .with_query_params({"": "a"})
        .build()
    )
    assert opts.endpoint == "http://x.test/items"


def test_endpoint_skips_empty_keys_but_keeps_empty_values():
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test/items")
        .with_query_params({"q": "shoes", "": "dropped", "page": ""})
        .build()
    )
    assert opts.endpoint == "http://x.test/items?q=shoes&page="


def test_endpoint_encodes_in_insertion_order():
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test/search")
        .with_query_params({"name": "John Doe", "city": "São Paulo", "a": "1"})
        .build()
    )
    assert opts.endpoint == "http://x.test/search?name=John+Doe&city=S%C3%A3o+Paulo&a=1"


def test_endpoint_drops_unencodable_pairs():
    opts = (
        RequestOptions.Builder("ascii")
        .set_endpoint("http://x.test/search")
        .with_query_params({"a": "1", "b": "ü", "c": "3"})
        .build()
    )
    assert opts.endpoint == "http://x.test/search?a=1&c=3"


def test_endpoint_none_when_unset():
    opts = RequestOptions.Builder().with_query_params({"q": "x"}).build()
    assert opts.endpoint is None


def test_request_params_string():
    opts = (
        RequestOptions.Builder()
        .with_request_params({"user": "ana maria", "pass": "p&ss", "": "v"})
        .build()
    )
    assert opts.request_params_string == "user=ana+maria&pass=p%26ss&=v"
    assert not opts.request_params_string.endswith("&")


def test_request_params_string_empty():
    assert RequestOptions.Builder().build().request_params_string == ""
    assert RequestOptions.Builder().with_request_params({}).build().request_params_string == ""


def test_single_pair_helpers():
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test")
        .query_param("a", "1")
        .query_param("b", "2")
        .request_param("x", "y")
        .build()
    )
    assert opts.endpoint == "http://x.test?a=1&b=2"
    assert opts.request_params_string == "x=y"


def test_with_params_replaces_previous_mapping():
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test")
        .query_param("a", "1")
        .with_query_params({"b": "2"})
        .build()
    )
    assert opts.endpoint == "http://x.test?b=2"


def test_encode_body():
    opts = RequestOptions.Builder().with_request_params({"name": "é"}).build()
    assert opts.encode_body() == b"name=%C3%A9"
    assert opts.encode_body("iso8859-1") == b"name=%C3%A9"


def test_options_are_immutable():
    params = {"q": "shoes"}
    opts = (
        RequestOptions.Builder()
        .set_endpoint("http://x.test")
        .with_query_params(params)
        .build()
    )

    # Caller mutation after build does not leak in
    params["q"] = "boots"
    assert opts.endpoint == "http://x.test?q=shoes"

    with pytest.raises(TypeError):
        opts.query_params["q"] = "boots"

    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.base_endpoint = "http://other.test"


def test_builder_snapshots_on_build():
    builder = RequestOptions.Builder().set_endpoint("http://x.test").query_param("a", "1")
    first = builder.build()
    second = builder.query_param("b", "2").set_request_method("PUT").build()

    assert first.endpoint == "http://x.test?a=1"
    assert first.method == RequestMethod.GET
    assert second.endpoint == "http://x.test?a=1&b=2"
    assert second.method == RequestMethod.PUT


def test_request_method_values():
    assert [m.value for m in RequestMethod] == ["GET", "POST", "PUT", "DELETE"]
    assert RequestMethod.POST.has_body
    assert RequestMethod.PUT.has_body
    assert not RequestMethod.GET.has_body
    assert not RequestMethod.DELETE.has_body
