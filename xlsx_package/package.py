from __future__ import annotations

import zipfile
from typing import Iterable

from .content_types import ContentTypesManifest

CONTENT_TYPES_PART_NAME = "[Content_Types].xml"

# Fixed member timestamp so identical packages produce identical archive bytes.
EPOCH = (1980, 1, 1, 0, 0, 0)


def manifest_for_workbook(
    sheet_file_names: Iterable[str],
    *,
    shared_strings: bool = False,
    calc_chain: bool = False,
) -> ContentTypesManifest:
    """Build the manifest for a workbook with the given worksheet files (in workbook order)."""

    manifest = ContentTypesManifest()
    for name in sheet_file_names:
        manifest.add_worksheet(name)
    if shared_strings:
        manifest.add_shared_strings()
    if calc_chain:
        manifest.add_calc_chain()
    return manifest


def write_content_types(zf: zipfile.ZipFile, manifest: ContentTypesManifest) -> None:
    info = zipfile.ZipInfo(CONTENT_TYPES_PART_NAME, date_time=EPOCH)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.create_system = 0
    zf.writestr(info, manifest.to_xml().encode("utf-8"))
