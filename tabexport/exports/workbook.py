"""
Workbook (xlsx) encoder built on openpyxl.

- One worksheet, bold header row
- Finite NUMBER cells keep their numeric value; absent values are empty cells
- Everything else is written as a plain string, never as a formula
- Package timestamps are fixed, so the same document always gives the same bytes
"""
from __future__ import annotations
from pathlib import Path
from typing import IO, Union
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo
import datetime
import io

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.writer.excel import ExcelWriter

from tabexport.cells.classifier import CellKind, TypedCell
from tabexport.document.builder import TabularDocument

HEADER_FONT = Font(bold=True)
PACKAGE_TIMESTAMP = datetime.datetime(2000, 1, 1)


class _StableArchive(ZipFile):
    """Zip members get PACKAGE_TIMESTAMP instead of the wall clock or a temp file's mtime."""

    def writestr(self, zinfo_or_arcname, data, compress_type=None, compresslevel=None):
        if not isinstance(zinfo_or_arcname, ZipInfo):
            zinfo_or_arcname = ZipInfo(zinfo_or_arcname, date_time=PACKAGE_TIMESTAMP.timetuple()[:6])
            zinfo_or_arcname.compress_type = self.compression
            zinfo_or_arcname.external_attr = 0o600 << 16
        super().writestr(zinfo_or_arcname, data, compress_type, compresslevel)

    def write(self, filename, arcname=None, compress_type=None, compresslevel=None):
        with open(filename, "rb") as fh:
            self.writestr(arcname or Path(filename).name, fh.read(), compress_type, compresslevel)


def _put(ws, row: int, col: int, cell: TypedCell, bold: bool = False) -> None:
    if cell.kind is CellKind.NULL and cell.value is None:
        return
    c = ws.cell(row=row, column=col)
    if cell.is_finite_number:
        c.value = cell.value
    else:
        # nan/inf land here too: they have no numeric form in a sheet
        c.value = cell.text
        c.data_type = "s"
    if bold:
        c.font = HEADER_FONT


def build_workbook(document: TabularDocument, sheet_name: str = "Sheet1") -> Workbook:
    wb = Workbook()
    wb.properties.created = PACKAGE_TIMESTAMP
    wb.properties.modified = PACKAGE_TIMESTAMP
    ws = wb.active
    ws.title = sheet_name
    r = 1
    if document.header is not None:
        for i, cell in enumerate(document.header, start=1):
            _put(ws, r, i, cell, bold=True)
        r += 1
    for row in document.body:
        for i, cell in enumerate(row, start=1):
            _put(ws, r, i, cell)
        r += 1
    return wb


def _save(wb: Workbook, target: Union[str, Path, IO[bytes]]) -> None:
    # Workbook.save() would stamp properties.modified with the current time
    with _StableArchive(target, "w", ZIP_DEFLATED, allowZip64=True) as archive:
        ExcelWriter(wb, archive).write_data()


def encode_xlsx(document: TabularDocument, sheet_name: str = "Sheet1") -> bytes:
    buf = io.BytesIO()
    _save(build_workbook(document, sheet_name), buf)
    return buf.getvalue()


def save_xlsx(document: TabularDocument, path: Union[str, Path], sheet_name: str = "Sheet1") -> Path:
    p = Path(path)
    _save(build_workbook(document, sheet_name), p)
    return p
