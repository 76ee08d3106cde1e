"""Writer for the OPC `[Content_Types].xml` part of an XLSX package.

The manifest maps file extensions (`<Default>`) and exact part names
(`<Override>`) to content types. Element order in the output follows insertion
order, with every default emitted before every override, so the part is
byte-stable for a given sequence of calls.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .xmlwriter import XMLEmitter, XMLWriter

log = logging.getLogger(__name__)

CONTENT_TYPES_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/content-types"

APP_PACKAGE = "application/vnd.openxmlformats-package."
APP_DOCUMENT = "application/vnd.openxmlformats-officedocument."

WORKSHEET_CONTENT_TYPE = APP_DOCUMENT + "spreadsheetml.worksheet+xml"
SHARED_STRINGS_CONTENT_TYPE = APP_DOCUMENT + "spreadsheetml.sharedStrings+xml"
CALC_CHAIN_CONTENT_TYPE = APP_DOCUMENT + "spreadsheetml.calcChain+xml"

SHARED_STRINGS_PART = "/xl/sharedStrings.xml"
CALC_CHAIN_PART = "/xl/calcChain.xml"


@dataclass(frozen=True)
class DefaultEntry:
    """Content type applied to every part with the given extension (no leading dot)."""

    extension: str
    content_type: str


@dataclass(frozen=True)
class OverrideEntry:
    """Content type for one exact part name, e.g. `/xl/workbook.xml`."""

    part_name: str
    content_type: str


DEFAULT_ENTRIES: Tuple[DefaultEntry, ...] = (
    DefaultEntry("rels", APP_PACKAGE + "relationships+xml"),
    DefaultEntry("xml", "application/xml"),
)

# Parts present in every workbook package.
OVERRIDE_ENTRIES: Tuple[OverrideEntry, ...] = (
    OverrideEntry("/docProps/app.xml", APP_DOCUMENT + "extended-properties+xml"),
    OverrideEntry("/docProps/core.xml", APP_PACKAGE + "core-properties+xml"),
    OverrideEntry("/xl/styles.xml", APP_DOCUMENT + "spreadsheetml.styles+xml"),
    OverrideEntry("/xl/theme/theme1.xml", APP_DOCUMENT + "theme+xml"),
    OverrideEntry("/xl/workbook.xml", APP_DOCUMENT + "spreadsheetml.sheet.main+xml"),
)


def worksheet_part_name(sheet_file_name: str) -> str:
    return f"/xl/worksheets/{sheet_file_name}.xml"


class ContentTypesManifest:
    """
    Builder for the content-types manifest of a single package.

    The manifest is created with the fixed defaults/overrides every workbook
    needs; callers append entries as they add parts and call `serialize()` once
    at the end of the build.

    A manifest without an emitter is *unattached*: `serialize()` does nothing.
    This lets tests and callers build and inspect a manifest without an output
    target.

    Duplicate extensions or part names are not rejected. They are emitted as
    given (the resulting part is invalid for Excel) and a warning is logged.
    Use `has_default()` / `has_override()` to keep additions idempotent.
    """

    def __init__(self, writer: Optional[XMLEmitter] = None):
        self._writer = writer
        self._defaults: List[DefaultEntry] = list(DEFAULT_ENTRIES)
        self._overrides: List[OverrideEntry] = list(OVERRIDE_ENTRIES)

    @property
    def is_attached(self) -> bool:
        return self._writer is not None

    def attach(self, writer: XMLEmitter) -> None:
        self._writer = writer

    @property
    def defaults(self) -> Tuple[DefaultEntry, ...]:
        return tuple(self._defaults)

    @property
    def overrides(self) -> Tuple[OverrideEntry, ...]:
        return tuple(self._overrides)

    def has_default(self, extension: str) -> bool:
        return any(entry.extension == extension for entry in self._defaults)

    def has_override(self, part_name: str) -> bool:
        return any(entry.part_name == part_name for entry in self._overrides)

    def add_default(self, extension: str, content_type: str) -> None:
        if self.has_default(extension):
            log.warning("duplicate <Default> for extension %r in content types manifest", extension)
        self._defaults.append(DefaultEntry(extension, content_type))

    def add_override(self, part_name: str, content_type: str) -> None:
        if self.has_override(part_name):
            log.warning("duplicate <Override> for part %r in content types manifest", part_name)
        self._overrides.append(OverrideEntry(part_name, content_type))

    def add_worksheet(self, sheet_file_name: str) -> None:
        """Add the override for `/xl/worksheets/<sheet_file_name>.xml`.

        `sheet_file_name` is the file stem inside the package (`sheet1`), not
        the sheet name shown to the user.
        """

        self.add_override(worksheet_part_name(sheet_file_name), WORKSHEET_CONTENT_TYPE)

    def add_shared_strings(self) -> None:
        self.add_override(SHARED_STRINGS_PART, SHARED_STRINGS_CONTENT_TYPE)

    def add_calc_chain(self) -> None:
        self.add_override(CALC_CHAIN_PART, CALC_CHAIN_CONTENT_TYPE)

    def serialize(self, writer: Optional[XMLEmitter] = None) -> bool:
        """Write the manifest to `writer` (or the attached emitter).

        Returns False without emitting anything when no emitter is available.
        Once writing starts the emitter is finalized on every exit path; write
        errors propagate unchanged, even if finalizing the partial output fails.
        """

        writer = writer if writer is not None else self._writer
        if writer is None:
            log.debug("content types manifest is unattached; nothing to serialize")
            return False

        try:
            writer.write_declaration()
            writer.start_tag("Types", [("xmlns", CONTENT_TYPES_NAMESPACE)])
            for default in self._defaults:
                writer.empty_tag(
                    "Default",
                    [("Extension", default.extension), ("ContentType", default.content_type)],
                )
            for override in self._overrides:
                writer.empty_tag(
                    "Override",
                    [("PartName", override.part_name), ("ContentType", override.content_type)],
                )
            writer.end_tag("Types")
        except BaseException:
            # Release the sink, but report the write error rather than a cleanup error.
            try:
                writer.finalize()
            except Exception:  # noqa: BLE001
                log.debug("finalize failed after content types write error", exc_info=True)
            raise
        writer.finalize()

        log.debug(
            "serialized content types manifest: %d defaults, %d overrides",
            len(self._defaults),
            len(self._overrides),
        )
        return True

    def to_xml(self) -> str:
        buf = io.StringIO()
        self.serialize(XMLWriter(buf))
        return buf.getvalue()
