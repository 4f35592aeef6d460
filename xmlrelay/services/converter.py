"""Structural conversion of XML documents into JSON text.

The mapping walks the markup in a single pass with expat:

* the root element becomes the only top-level key;
* attributes become ``"@name"`` keys, in document order;
* character data becomes ``"#text"`` (a list when split by child elements);
* repeated sibling names collapse into a list at the first occurrence;
* an element holding only text maps to that text, an empty one to ``null``.

Qualified names keep their prefixes and leaf values are never coerced.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from xml.parsers import expat

from ..errors import ConversionError, MalformedInputError

LOGGER = logging.getLogger(__name__)

ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"
READ_CHUNK_SIZE = 64 * 1024


class _Frame:
    """An element that is still open while parsing."""

    __slots__ = ("attribute_count", "members", "text")

    def __init__(self, attributes: Dict[str, str]) -> None:
        self.members: Dict[str, Any] = {
            f"{ATTRIBUTE_PREFIX}{name}": value for name, value in attributes.items()
        }
        self.attribute_count = len(self.members)
        self.text: List[str] = []

    def add(self, key: str, value: Any) -> None:
        if key not in self.members:
            self.members[key] = value
            return
        existing = self.members[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            self.members[key] = [existing, value]

    def flush_text(self) -> None:
        if not self.text:
            return
        joined = "".join(self.text)
        self.text.clear()
        if joined.strip():
            self.add(TEXT_KEY, joined)

    def value(self) -> Any:
        if not self.members:
            return None
        if self.attribute_count == 0 and len(self.members) == 1:
            text = self.members.get(TEXT_KEY)
            if isinstance(text, str):
                return text
        return self.members


class _TreeBuilder:
    def __init__(self) -> None:
        self._stack: List[_Frame] = []
        self.root: Optional[Tuple[str, Any]] = None

    def start(self, name: str, attributes: Dict[str, str]) -> None:
        if self._stack:
            self._stack[-1].flush_text()
        self._stack.append(_Frame(attributes))

    def end(self, name: str) -> None:
        frame = self._stack.pop()
        frame.flush_text()
        value = frame.value()
        if self._stack:
            self._stack[-1].add(name, value)
        else:
            self.root = (name, value)

    def data(self, text: str) -> None:
        if self._stack:
            self._stack[-1].text.append(text)


def _new_parser() -> Tuple[Any, _TreeBuilder]:
    builder = _TreeBuilder()
    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    return parser, builder


def _serialise(builder: _TreeBuilder) -> str:
    if builder.root is None:
        raise MalformedInputError("Document has no root element")
    name, value = builder.root
    try:
        return json.dumps({name: value}, ensure_ascii=False, separators=(",", ":"))
    except RecursionError as exc:
        raise ConversionError("Document is nested too deeply to convert") from exc


def convert(raw: bytes) -> str:
    """Convert well-formed XML bytes into compact JSON text.

    Raises:
        MalformedInputError: if the bytes are empty or not well-formed XML.
        ConversionError: if the document is nested too deeply to serialise.
    """

    if not raw or not raw.strip():
        raise MalformedInputError("Document is empty")

    parser, builder = _new_parser()
    try:
        parser.Parse(raw, True)
    except expat.ExpatError as exc:
        raise MalformedInputError(f"The XML is not valid: {exc}") from exc
    return _serialise(builder)


def convert_file(path: Path) -> str:
    """Convert the XML document stored at ``path``, reading it in chunks."""

    parser, builder = _new_parser()
    total = 0
    try:
        with Path(path).open("rb") as handle:
            while True:
                chunk = handle.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                parser.Parse(chunk, False)
            if total == 0:
                raise MalformedInputError("Document is empty")
            parser.Parse(b"", True)
    except expat.ExpatError as exc:
        raise MalformedInputError(f"The XML is not valid: {exc}") from exc

    LOGGER.debug("Converted %s bytes from %s", total, path)
    return _serialise(builder)


__all__ = ["ATTRIBUTE_PREFIX", "TEXT_KEY", "convert", "convert_file"]
