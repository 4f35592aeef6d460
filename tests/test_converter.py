"""Tests for the XML to JSON converter."""

from __future__ import annotations

import json

import pytest

from xmlrelay.errors import ConversionError, MalformedInputError
from xmlrelay.services.converter import convert, convert_file


def test_text_only_elements_become_strings() -> None:
    result = json.loads(convert(b"<root><name>Ada</name><age>36</age></root>"))

    assert result == {"root": {"name": "Ada", "age": "36"}}


def test_attributes_and_text_share_an_object() -> None:
    result = json.loads(convert(b'<item id="7" kind="a">hello</item>'))

    assert result == {"item": {"@id": "7", "@kind": "a", "#text": "hello"}}


def test_repeated_siblings_collapse_into_a_list() -> None:
    raw = b"<root><a>1</a><b>x</b><a>2</a><a>3</a></root>"

    result = json.loads(convert(raw))

    assert result == {"root": {"a": ["1", "2", "3"], "b": "x"}}
    assert list(result["root"]) == ["a", "b"]


def test_empty_elements_map_to_null_and_attributes_only_to_object() -> None:
    result = json.loads(convert(b'<root><empty/><flag on="yes"/></root>'))

    assert result == {"root": {"empty": None, "flag": {"@on": "yes"}}}


def test_leaf_values_are_never_coerced() -> None:
    result = json.loads(convert(b"<n><i>007</i><b>true</b><f>1.50</f></n>"))

    assert result == {"n": {"i": "007", "b": "true", "f": "1.50"}}


def test_mixed_content_keeps_text_runs() -> None:
    result = json.loads(convert(b"<p>one<b>bold</b>two</p>"))

    assert result == {"p": {"#text": ["one", "two"], "b": "bold"}}


def test_namespace_prefixes_are_preserved() -> None:
    raw = b'<x:doc xmlns:x="urn:test"><x:v>1</x:v></x:doc>'

    result = json.loads(convert(raw))

    assert result == {"x:doc": {"@xmlns:x": "urn:test", "x:v": "1"}}


def test_output_is_compact_and_keeps_unicode() -> None:
    raw = '<?xml version="1.0" encoding="utf-8"?><r><t>café</t></r>'.encode("utf-8")

    assert convert(raw) == '{"r":{"t":"café"}}'


def test_conversion_is_deterministic() -> None:
    raw = b'<root z="1" a="2"><b>x</b><a>y</a><b>z</b></root>'

    assert convert(raw) == convert(raw)


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"   \n",
        b"invalid xml",
        b"<root><unclosed></root>",
        b"<root>",
        b"<a/><b/>",
        b'<?xml version="1.0" encoding="utf-8"?><r>\xff\xfe</r>',
    ],
)
def test_malformed_input_is_rejected(raw: bytes) -> None:
    with pytest.raises(MalformedInputError):
        convert(raw)


def test_thousands_of_siblings(tmp_path) -> None:
    body = "".join(
        f"<element{i}>This is some large content with index {i}</element{i}>"
        for i in range(10000)
    )
    path = tmp_path / "large.xml"
    path.write_text(f"<root>{body}</root>", encoding="utf-8")

    result = json.loads(convert_file(path))

    assert len(result["root"]) == 10000
    assert result["root"]["element9999"] == "This is some large content with index 9999"


def test_many_repeated_siblings_form_one_list() -> None:
    raw = ("<root>" + "<row>v</row>" * 5000 + "</root>").encode("utf-8")

    result = json.loads(convert(raw))

    assert result["root"]["row"] == ["v"] * 5000


def test_convert_file_matches_convert(tmp_path) -> None:
    raw = b'<root><a k="v">1</a><a>2</a></root>'
    path = tmp_path / "doc.xml"
    path.write_bytes(raw)

    assert convert_file(path) == convert(raw)


def test_convert_file_rejects_empty_file(tmp_path) -> None:
    path = tmp_path / "empty.xml"
    path.write_bytes(b"")

    with pytest.raises(MalformedInputError):
        convert_file(path)


def test_deeply_nested_document_is_a_conversion_error() -> None:
    raw = b"<a>" * 5000 + b"x" + b"</a>" * 5000

    with pytest.raises(ConversionError, match="nested too deeply"):
        convert(raw)
