from __future__ import annotations
from typing import Iterable
from xml.sax.saxutils import escape, quoteattr
import io

from tabexport.cells.classifier import CellKind, TypedCell
from tabexport.document.builder import Row, TabularDocument

SPREADSHEET_NS = "urn:schemas-microsoft-com:office:spreadsheet"

XML_HEADER = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<?mso-application progid="Excel.Sheet"?>\n'
    f'<Workbook xmlns="{SPREADSHEET_NS}" xmlns:o="urn:schemas-microsoft-com:office:office" '
    f'xmlns:x="urn:schemas-microsoft-com:office:excel" xmlns:ss="{SPREADSHEET_NS}">\n'
    '<Styles>\n'
    '<Style ss:ID="Default" ss:Name="Normal"/>\n'
    '<Style ss:ID="header"><Font ss:Bold="1"/></Style>\n'
    '</Styles>\n'
)
XML_FOOTER = "</Workbook>\n"


def write_delimited(rows: Iterable[Row], separator: str = ",") -> str:
    # every cell is followed by the separator, the last one included
    buf = io.StringIO()
    for row in rows:
        buf.write("".join(c.text + separator for c in row))
        buf.write("\n")
    return buf.getvalue()


def encode_csv(document: TabularDocument, separator: str = ",") -> bytes:
    return write_delimited(document.rows, separator).encode("utf-8")


def _xml_cell(cell: TypedCell) -> str:
    data_type = "Number" if cell.is_finite_number else "String"
    # TEXT is already stripped of markup characters; markers, tokens and dates are not
    text = cell.text if cell.kind is CellKind.TEXT else escape(cell.text)
    return f'<Cell><Data ss:Type="{data_type}">{text}</Data></Cell>'


def write_excel_xml(document: TabularDocument, sheet_name: str) -> str:
    buf = io.StringIO()
    buf.write(XML_HEADER)
    buf.write(f"<Worksheet ss:Name={quoteattr(sheet_name)}>\n<Table>\n")
    if document.header is not None:
        buf.write('<Row ss:StyleID="header">')
        buf.write("".join(_xml_cell(c) for c in document.header))
        buf.write("</Row>\n")
    for row in document.body:
        buf.write("<Row>")
        buf.write("".join(_xml_cell(c) for c in row))
        buf.write("</Row>\n")
    buf.write("</Table>\n</Worksheet>\n")
    buf.write(XML_FOOTER)
    return buf.getvalue()


def encode_excel_xml(document: TabularDocument, sheet_name: str = "Sheet1") -> bytes:
    return write_excel_xml(document, sheet_name).encode("utf-8")
