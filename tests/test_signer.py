import base64

import pytest

from ossauth._signer import (
    OssSignatureV1Signer,
    build_query_string,
    canonicalize,
    canonicalized_oss_headers,
    canonicalized_resource,
    http_date,
    public_parameters,
    sign,
    validate_header_value,
)
from ossauth.error import EncodingException, ReservedParameterException
from ossauth.models import RequestBuilder


FIXED_TIMESTAMP = 1700000000
FIXED_DATE = "Tue, 14 Nov 2023 22:13:20 GMT"


def test_http_date_is_rfc1123_gmt():
    assert http_date(FIXED_TIMESTAMP) == FIXED_DATE


def test_canonical_string_known_answer():
    canonical = canonicalize("GET", "/hello.txt", "b", FIXED_DATE)

    assert canonical == "GET\n\n\nTue, 14 Nov 2023 22:13:20 GMT\n/b/hello.txt"
    assert base64.b64encode(sign("SK", canonical)).decode() == "mPnbDuKag6ABxPgTh6KBaMR4DVg="


def test_expiration_fills_date_slot():
    canonical = canonicalize("get", "/hello.txt", "b", str(FIXED_TIMESTAMP))

    assert canonical == "GET\n\n\n1700000000\n/b/hello.txt"
    assert base64.b64encode(sign("SK", canonical)).decode() == "i7WeAiBwNHGGtE3yE/NguiX04ac="


def test_canonical_string_with_content_type_and_oss_headers():
    headers = {
        "x-oss-meta-b": "2",
        "X-OSS-Meta-A": "  1 ",
        "Cache-Control": "no-cache",
    }
    canonical = canonicalize("PUT", "/hello.txt", "b", FIXED_DATE, headers, content_type="text/plain")

    assert canonical == (
        "PUT\n\ntext/plain\nTue, 14 Nov 2023 22:13:20 GMT\n"
        "x-oss-meta-a:1\nx-oss-meta-b:2\n/b/hello.txt"
    )
    assert base64.b64encode(sign("SK", canonical)).decode() == "xKQeizNtxknua/KYhWhUuNUuvGw="


def test_content_headers_fall_back_to_header_map():
    headers = {"content-type": "image/png", "Content-MD5": "abc=="}
    canonical = canonicalize("PUT", "/x", "b", FIXED_DATE, headers)

    assert canonical.split("\n")[:4] == ["PUT", "abc==", "image/png", FIXED_DATE]


def test_query_parameters_are_not_signed():
    assert canonicalize("GET", "/x", "b", FIXED_DATE) == canonicalize("GET", "/x", "b", FIXED_DATE, {})


def test_canonicalized_resource():
    assert canonicalized_resource("b", "/a/b c.txt") == "/b/a/b c.txt"
    assert canonicalized_resource("b", "hello.txt") == "/b/hello.txt"


def test_canonicalized_resource_with_empty_bucket():
    assert canonicalized_resource("", "/hello.txt") == "/"


def test_oss_headers_sorted_and_filtered():
    result = canonicalized_oss_headers({
        "x-oss-z": "last",
        "x-oss-a": "first",
        "x-oss-ab": "second",
        "Date": "ignored",
        "Content-Type": "ignored",
    })

    assert result == "x-oss-a:first\nx-oss-ab:second\nx-oss-z:last\n"


def test_oss_headers_empty():
    assert canonicalized_oss_headers({"Date": "x"}) == ""


def test_sign_is_deterministic():
    assert sign("SK", "payload") == sign("SK", "payload")
    assert sign("SK", "payload") != sign("SK2", "payload")
    assert len(sign("SK", "payload")) == 20


def test_public_parameters_drop_source_ip():
    params = public_parameters({
        "x-oss-ac-source-ip": "10.0.0.1",
        "response-content-disposition": "attachment; filename=a b.txt",
    })

    assert params == {"response-content-disposition": "attachment; filename=a b.txt"}
    assert build_query_string(params) == "response-content-disposition=attachment%3B%20filename%3Da%20b.txt"


def test_build_query_string_sorts_by_name():
    assert build_query_string({"b": "2", "a": "1", "C": "3"}) == "C=3&a=1&b=2"
    assert build_query_string({}) == ""


def test_build_query_string_sorts_raw_names_before_encoding():
    query = build_query_string({"a.b": "1", "a/b": "2", "a b": "3", "a-b": "4"})

    assert query == "a%20b=3&a-b=4&a.b=1&a%2Fb=2"


def test_validate_header_value():
    assert validate_header_value("Date", FIXED_DATE) == FIXED_DATE
    with pytest.raises(EncodingException):
        validate_header_value("x-oss-meta-a", "line\r\nbreak")
    with pytest.raises(EncodingException):
        validate_header_value("Content-Type", "text/☃")


def test_sign_request_headers():
    signer = OssSignatureV1Signer("AK", "SK")

    headers = signer.sign_request("b", "/hello.txt", RequestBuilder(), FIXED_TIMESTAMP)

    assert headers == {
        "Date": FIXED_DATE,
        "Authorization": "OSS AK:mPnbDuKag6ABxPgTh6KBaMR4DVg=",
    }


def test_sign_request_forwards_signed_headers():
    signer = OssSignatureV1Signer("AK", "SK")
    build = (
        RequestBuilder(method="PUT")
        .with_content_type("text/plain")
        .with_headers({"x-oss-meta-b": "2", "x-oss-meta-a": "1", "Date": "stale"})
    )

    headers = signer.sign_request("b", "/hello.txt", build, FIXED_TIMESTAMP)

    assert headers["Date"] == FIXED_DATE
    assert headers["Content-Type"] == "text/plain"
    assert headers["x-oss-meta-a"] == "1"
    assert headers["x-oss-meta-b"] == "2"
    assert headers["Authorization"] == "OSS AK:xKQeizNtxknua/KYhWhUuNUuvGw="


def test_sign_request_rejects_bad_header_value():
    signer = OssSignatureV1Signer("AK", "SK")
    build = RequestBuilder().with_header("x-oss-meta-name", "café☃")

    with pytest.raises(EncodingException):
        signer.sign_request("b", "/hello.txt", build, FIXED_TIMESTAMP)


def test_presigned_query_known_answer():
    signer = OssSignatureV1Signer("AK", "SK")

    query, expiration = signer.presigned_query("b", "/hello.txt", RequestBuilder().with_expire(60), FIXED_TIMESTAMP)

    assert expiration == 1700000060
    assert query == "Expires=1700000060&OSSAccessKeyId=AK&Signature=d4cMgMbOpf0DqgXWnERrG7BN0QU%3D"


def test_presigned_query_requires_expiry():
    signer = OssSignatureV1Signer("AK", "SK")

    with pytest.raises(ValueError):
        signer.presigned_query("b", "/hello.txt", RequestBuilder(), FIXED_TIMESTAMP)


@pytest.mark.parametrize("name", ["Signature", "Expires", "OSSAccessKeyId"])
def test_presigned_query_rejects_reserved_parameters(name):
    signer = OssSignatureV1Signer("AK", "SK")
    build = RequestBuilder().with_expire(60).with_parameter(name, "x")

    with pytest.raises(ReservedParameterException) as exc_info:
        signer.presigned_query("b", "/hello.txt", build, FIXED_TIMESTAMP)

    assert exc_info.value.name == name


def test_oss_headers_differing_only_in_case_are_rejected():
    with pytest.raises(ValueError, match="x-oss-meta-a"):
        canonicalized_oss_headers({"x-oss-meta-a": "1", "X-OSS-Meta-A": "2"})


def test_sign_request_rejects_case_duplicate_oss_headers():
    signer = OssSignatureV1Signer("AK", "SK")
    build = RequestBuilder().with_headers({"x-oss-meta-a": "1", "X-OSS-Meta-A": "2"})

    with pytest.raises(ValueError):
        signer.sign_request("b", "/hello.txt", build, FIXED_TIMESTAMP)


def test_header_values_are_sent_as_strings():
    signer = OssSignatureV1Signer("AK", "SK")
    build = RequestBuilder().with_header("x-oss-meta-count", 3)

    headers = signer.sign_request("b", "/hello.txt", build, FIXED_TIMESTAMP)

    assert build.headers == {"x-oss-meta-count": "3"}
    assert headers["x-oss-meta-count"] == "3"


def test_constructor_header_values_are_sent_as_strings():
    signer = OssSignatureV1Signer("AK", "SK")
    build = RequestBuilder(headers={"x-oss-meta-count": 3})

    headers = signer.sign_request("b", "/hello.txt", build, FIXED_TIMESTAMP)

    assert headers["x-oss-meta-count"] == "3"
