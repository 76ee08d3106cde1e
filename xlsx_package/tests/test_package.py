from __future__ import annotations

import io
import tempfile
import unittest
import zipfile
from pathlib import Path
from xml.etree import ElementTree as ET

from xlsx_package.content_types import ContentTypesManifest
from xlsx_package.package import CONTENT_TYPES_PART_NAME, manifest_for_workbook, write_content_types
from xlsx_package.xmlwriter import XMLWriter

CT_NS = "{http://schemas.openxmlformats.org/package/2006/content-types}"


class ManifestForWorkbookTests(unittest.TestCase):
    def test_worksheets_then_shared_strings_then_calc_chain(self) -> None:
        manifest = manifest_for_workbook(["sheet1", "sheet2"], shared_strings=True, calc_chain=True)
        self.assertEqual(
            [o.part_name for o in manifest.overrides[5:]],
            [
                "/xl/worksheets/sheet1.xml",
                "/xl/worksheets/sheet2.xml",
                "/xl/sharedStrings.xml",
                "/xl/calcChain.xml",
            ],
        )

    def test_optional_parts_are_omitted_by_default(self) -> None:
        manifest = manifest_for_workbook(["sheet1"])
        self.assertFalse(manifest.has_override("/xl/sharedStrings.xml"))
        self.assertFalse(manifest.has_override("/xl/calcChain.xml"))
        self.assertEqual(len(manifest.overrides), 6)


class WriteContentTypesTests(unittest.TestCase):
    def test_part_is_stored_at_package_root(self) -> None:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            write_content_types(zf, manifest_for_workbook(["sheet1"], shared_strings=True))

        with zipfile.ZipFile(io.BytesIO(buf.getvalue())) as zf:
            self.assertEqual(zf.namelist(), [CONTENT_TYPES_PART_NAME])
            info = zf.getinfo(CONTENT_TYPES_PART_NAME)
            self.assertEqual(info.date_time, (1980, 1, 1, 0, 0, 0))
            self.assertEqual(info.compress_type, zipfile.ZIP_DEFLATED)
            root = ET.fromstring(zf.read(CONTENT_TYPES_PART_NAME))

        self.assertEqual(root.tag, f"{CT_NS}Types")
        overrides = {el.get("PartName"): el.get("ContentType") for el in root.findall(f"{CT_NS}Override")}
        self.assertEqual(
            overrides["/xl/worksheets/sheet1.xml"],
            "application/vnd.openxmlformats-officedocument.spreadsheetml.worksheet+xml",
        )
        self.assertIn("/xl/sharedStrings.xml", overrides)
        defaults = [el.get("Extension") for el in root.findall(f"{CT_NS}Default")]
        self.assertEqual(defaults, ["rels", "xml"])

    def test_archive_bytes_are_reproducible(self) -> None:
        def build() -> bytes:
            buf = io.BytesIO()
            with zipfile.ZipFile(buf, "w") as zf:
                write_content_types(zf, manifest_for_workbook(["sheet1", "sheet2"]))
            return buf.getvalue()

        self.assertEqual(build(), build())

    def test_serialize_to_file_matches_in_memory_render(self) -> None:
        manifest = manifest_for_workbook(["sheet1"], calc_chain=True)
        with tempfile.TemporaryDirectory(prefix="xlsx-content-types-") as td:
            path = Path(td) / CONTENT_TYPES_PART_NAME
            self.assertTrue(manifest.serialize(XMLWriter.open(path)))
            self.assertEqual(path.read_text(encoding="utf-8"), manifest.to_xml())

    def test_attached_file_writer(self) -> None:
        with tempfile.TemporaryDirectory(prefix="xlsx-content-types-") as td:
            path = Path(td) / CONTENT_TYPES_PART_NAME
            manifest = ContentTypesManifest(XMLWriter.open(path))
            manifest.serialize()
            self.assertTrue(path.read_text(encoding="utf-8").endswith("</Types>\n"))


if __name__ == "__main__":
    unittest.main()
