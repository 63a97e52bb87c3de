from __future__ import annotations

import asyncio
import json
from typing import Callable, List

import httpx

from htmlgo_workbench.conversion import (
    BuilderToMarkupRequest,
    ConversionErr,
    ConversionOk,
    HttpConversionClient,
    MarkupToBuilderRequest,
)

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler, seen: List[httpx.Request] | None = None) -> HttpConversionClient:
    def record(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return HttpConversionClient(
        "http://converter.test/", transport=httpx.MockTransport(record)
    )


def test_markup_request_payload_and_result() -> None:
    seen: List[httpx.Request] = []
    client = make_client(
        lambda request: httpx.Response(200, json={"code": "var n = h.Div()"}), seen
    )

    result = asyncio.run(
        client.convert(MarkupToBuilderRequest("<div></div>", "h", strip_declaration=True))
    )

    assert result == ConversionOk("var n = h.Div()")
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://converter.test/convert"
    assert json.loads(seen[0].content) == {
        "html": "<div></div>",
        "packagePrefix": "h",
        "removePackage": True,
        "direction": "html2go",
    }


def test_remove_package_flag_is_always_sent() -> None:
    payload = MarkupToBuilderRequest("<p></p>", "x", strip_declaration=False).to_payload()

    assert payload["removePackage"] is False


def test_builder_request_payload_and_result() -> None:
    seen: List[httpx.Request] = []
    client = make_client(
        lambda request: httpx.Response(200, json={"html": "<div></div>"}), seen
    )

    result = asyncio.run(client.convert(BuilderToMarkupRequest("var n = h.Div()")))

    assert result == ConversionOk("<div></div>")
    assert json.loads(seen[0].content) == {
        "goCode": "var n = h.Div()",
        "direction": "go2html",
    }


def test_missing_output_field_is_empty_success() -> None:
    client = make_client(lambda request: httpx.Response(200, json={}))

    result = asyncio.run(client.convert(BuilderToMarkupRequest("var n = h.Div()")))

    assert result == ConversionOk("")


def test_error_status_uses_json_error_field() -> None:
    client = make_client(
        lambda request: httpx.Response(400, json={"error": "undefined: Foo"})
    )

    result = asyncio.run(client.convert(BuilderToMarkupRequest("var n = Foo()")))

    assert result == ConversionErr("undefined: Foo")


def test_error_status_falls_back_to_plain_text() -> None:
    client = make_client(
        lambda request: httpx.Response(500, text="internal failure\n")
    )

    result = asyncio.run(client.convert(MarkupToBuilderRequest("<a>", "h")))

    assert result == ConversionErr("internal failure")


def test_error_status_without_body_reports_status_code() -> None:
    client = make_client(lambda request: httpx.Response(502))

    result = asyncio.run(client.convert(MarkupToBuilderRequest("<a>", "h")))

    assert result == ConversionErr("converter returned HTTP 502")


def test_success_status_with_error_field_is_a_failure() -> None:
    client = make_client(
        lambda request: httpx.Response(200, json={"html": "", "error": "parse failed"})
    )

    result = asyncio.run(client.convert(BuilderToMarkupRequest("var n = h.Div(")))

    assert result == ConversionErr("parse failed")


def test_non_json_success_body_is_a_failure() -> None:
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    result = asyncio.run(client.convert(MarkupToBuilderRequest("<a></a>", "h")))

    assert isinstance(result, ConversionErr)
    assert result.message.startswith("converter returned a non-JSON body")


def test_transport_failure_becomes_error_result() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(refuse)

    result = asyncio.run(client.convert(MarkupToBuilderRequest("<a></a>", "h")))

    assert result == ConversionErr("converter request failed: connection refused")
