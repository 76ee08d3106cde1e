"""XLSX package part writers.

Currently provides the OPC content-types manifest (`[Content_Types].xml`) and
the tag-level XML emitter it writes through.
"""

from __future__ import annotations

from .content_types import ContentTypesManifest, DefaultEntry, OverrideEntry
from .package import CONTENT_TYPES_PART_NAME, manifest_for_workbook, write_content_types
from .xmlwriter import XMLEmitter, XMLWriter

__all__ = [
    "CONTENT_TYPES_PART_NAME",
    "ContentTypesManifest",
    "DefaultEntry",
    "OverrideEntry",
    "XMLEmitter",
    "XMLWriter",
    "manifest_for_workbook",
    "write_content_types",
]
