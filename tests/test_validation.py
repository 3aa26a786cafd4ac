from __future__ import annotations

import pytest

from gemini_proxy.errors import InvalidPathSegmentError, InvalidRequestBodyError
from gemini_proxy.validation import parse_json_body, validate_path_segment


@pytest.mark.parametrize("value", ["gemini-2.0-flash", "generateContent", "a", "tuned_model.v2", "x" * 128])
def test_accepts_allow_listed_segments(value: str) -> None:
    assert validate_path_segment(value, "modelId") == value


@pytest.mark.parametrize(
    "value",
    ["", None, "a/b", "a?b", "a#b", "a:b", "a b", "a%2F", "tab\there", ".hidden", "x" * 129],
)
def test_rejects_everything_else(value) -> None:
    with pytest.raises(InvalidPathSegmentError) as exc:
        validate_path_segment(value, "modelId")
    assert exc.value.status_code == 400


def test_empty_body_is_empty_object() -> None:
    assert parse_json_body(b"") == {}
    assert parse_json_body(b"  \n") == {}


def test_object_and_array_bodies_decode() -> None:
    assert parse_json_body(b'{"contents": []}') == {"contents": []}
    assert parse_json_body(b"[1, 2]") == [1, 2]


@pytest.mark.parametrize("raw", [b"{oops", b"\xff\xfe", b'"just a string"', b"42", b"null"])
def test_rejects_non_json_or_scalar_bodies(raw: bytes) -> None:
    with pytest.raises(InvalidRequestBodyError):
        parse_json_body(raw)
