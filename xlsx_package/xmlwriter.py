from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Protocol, Sequence, TextIO, Tuple, Union

log = logging.getLogger(__name__)

Attributes = Sequence[Tuple[str, str]]

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'


class XMLEmitter(Protocol):
    """Tag-level XML output used by the package part writers."""

    def write_declaration(self) -> None: ...

    def start_tag(self, name: str, attributes: Attributes = ()) -> None: ...

    def empty_tag(self, name: str, attributes: Attributes = ()) -> None: ...

    def end_tag(self, name: str) -> None: ...

    def finalize(self) -> None: ...


def xml_escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def xml_escape_attribute(value: str) -> str:
    # Attribute-value normalization turns raw whitespace characters into spaces.
    return xml_escape(value).replace("\n", "&#10;").replace("\r", "&#13;").replace("\t", "&#9;")


def _format_attributes(attributes: Attributes) -> str:
    return "".join(f' {key}="{xml_escape_attribute(value)}"' for key, value in attributes)


class XMLWriter:
    """
    Write indented XML to a text stream.

    Each tag goes on its own line, indented two spaces per open element. The
    stream is only closed by `finalize()` when the writer owns it (see `open`).
    """

    def __init__(self, stream: TextIO, *, close_on_finalize: bool = False):
        self._stream = stream
        self._close_on_finalize = close_on_finalize
        self._open_tags: List[str] = []
        self._finalized = False

    @classmethod
    def open(cls, path: Union[str, Path]) -> "XMLWriter":
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        stream = path.open("w", encoding="utf-8", newline="\n")
        return cls(stream, close_on_finalize=True)

    def _write(self, text: str) -> None:
        if self._finalized:
            raise ValueError("XML output already finalized")
        self._stream.write(text)

    def _write_line(self, text: str) -> None:
        self._write("  " * len(self._open_tags) + text + "\n")

    def write_declaration(self) -> None:
        self._write(XML_DECLARATION + "\n")

    def start_tag(self, name: str, attributes: Attributes = ()) -> None:
        self._write_line(f"<{name}{_format_attributes(attributes)}>")
        self._open_tags.append(name)

    def empty_tag(self, name: str, attributes: Attributes = ()) -> None:
        self._write_line(f"<{name}{_format_attributes(attributes)}/>")

    def end_tag(self, name: str) -> None:
        if not self._open_tags or self._open_tags[-1] != name:
            current = self._open_tags[-1] if self._open_tags else None
            raise ValueError(f"Cannot close <{name}>: innermost open element is {current!r}")
        self._open_tags.pop()
        self._write_line(f"</{name}>")

    def finalize(self) -> None:
        if self._finalized:
            return
        self._finalized = True
        try:
            self._stream.flush()
        finally:
            if self._close_on_finalize:
                self._stream.close()
        if self._open_tags:
            raise ValueError(f"XML finalized with unclosed elements: {self._open_tags!r}")
        log.debug("finalized XML output (owned stream: %s)", self._close_on_finalize)
