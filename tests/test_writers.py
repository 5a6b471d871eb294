import unittest
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from unittest import mock
import datetime
import io
import xml.etree.ElementTree as ET

from openpyxl import load_workbook

from tabexport.cells.classifier import DBNULL, Dialect
from tabexport.config.env import ExportConfig
from tabexport.document.builder import build
from tabexport.exports.pdf import PageSize, encode_pdf
from tabexport.exports.workbook import PACKAGE_TIMESTAMP, encode_xlsx
from tabexport.exports.writers import SPREADSHEET_NS, encode_csv, encode_excel_xml

CFG = ExportConfig()
SS = "{%s}" % SPREADSHEET_NS


@dataclass
class Item:
    sku: str
    qty: int
    price: Decimal
    note: Any = None


ITEMS = [
    Item("A-1", 3, Decimal("9.99"), "fragile, handle\nwith care"),
    Item("B&2", 10, Decimal("0.50")),
]


def doc_for(dialect, **kw):
    doc, diag = build(ITEMS, dialect=dialect, config=CFG, **kw)
    assert diag is None, diag
    return doc


class TestCsvWriter(unittest.TestCase):
    def test_trailing_separator_and_lines(self):
        text = encode_csv(doc_for(Dialect.DELIMITED)).decode("utf-8")
        lines = text.splitlines()
        self.assertEqual(lines[0], "sku,qty,price,note,")
        self.assertEqual(lines[1], "A-1,3,9.99,fragile handle with care,")
        self.assertEqual(lines[2], "B&2,10,0.50,null,")
        self.assertTrue(text.endswith("\n"))

    def test_single_cell_comma_stripped(self):
        @dataclass
        class T:
            v: str

        doc, _ = build([T("a,b")], print_header=False, dialect=Dialect.DELIMITED, config=CFG)
        self.assertEqual(encode_csv(doc, ","), "ab,\n".encode("utf-8"))

    def test_custom_separator(self):
        doc = doc_for(Dialect.DELIMITED, separator=";", print_header=False)
        first = encode_csv(doc, ";").decode("utf-8").splitlines()[0]
        self.assertEqual(first, "A-1;3;9.99;fragile handle with care;")

    def test_utf8_without_bom(self):
        self.assertFalse(encode_csv(doc_for(Dialect.DELIMITED)).startswith(b"\xef\xbb\xbf"))


class TestExcelXmlWriter(unittest.TestCase):
    def test_well_formed_with_typed_cells(self):
        data = encode_excel_xml(doc_for(Dialect.MARKUP), "Items")
        self.assertIn(b'<?mso-application progid="Excel.Sheet"?>', data)
        root = ET.fromstring(data)
        ws = root.find(f"{SS}Worksheet")
        self.assertEqual(ws.get(f"{SS}Name"), "Items")
        rows = ws.find(f"{SS}Table").findall(f"{SS}Row")
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0].get(f"{SS}StyleID"), "header")
        cells = rows[2].findall(f"{SS}Cell/{SS}Data")
        self.assertEqual([c.text for c in cells], ["B2", "10", "0.50", "null"])
        self.assertEqual([c.get(f"{SS}Type") for c in cells], ["String", "Number", "Number", "String"])

    def test_sheet_name_is_escaped(self):
        root = ET.fromstring(encode_excel_xml(doc_for(Dialect.MARKUP), 'Q&A "1"'))
        self.assertEqual(root.find(f"{SS}Worksheet").get(f"{SS}Name"), 'Q&A "1"')

    def test_markers_and_dates_with_markup_characters(self):
        @dataclass
        class R:
            missing: Any
            gone: Any
            when: Any

        cfg = ExportConfig(null_text="<null>", null_object_text="N&A")
        doc, _ = build([R(None, DBNULL, datetime.date(2024, 3, 5))], date_format="%d & %m",
                       dialect=Dialect.MARKUP, config=cfg)
        root = ET.fromstring(encode_excel_xml(doc))
        rows = root.find(f"{SS}Worksheet/{SS}Table").findall(f"{SS}Row")
        self.assertEqual([c.text for c in rows[1].findall(f"{SS}Cell/{SS}Data")], ["<null>", "N&A", "05 & 03"])

    def test_non_finite_numbers_are_strings(self):
        @dataclass
        class T:
            v: float

        doc, _ = build([T(float("nan")), T(1.5)], print_header=False, dialect=Dialect.MARKUP, config=CFG)
        root = ET.fromstring(encode_excel_xml(doc))
        data = root.findall(f"{SS}Worksheet/{SS}Table/{SS}Row/{SS}Cell/{SS}Data")
        self.assertEqual([d.get(f"{SS}Type") for d in data], ["String", "Number"])


class TestXlsxWriter(unittest.TestCase):
    def test_round_trip_values(self):
        data = encode_xlsx(doc_for(Dialect.STRUCTURED), "Stock")
        self.assertTrue(data.startswith(b"PK"))
        wb = load_workbook(io.BytesIO(data))
        ws = wb["Stock"]
        self.assertEqual([c.value for c in ws[1]], ["sku", "qty", "price", "note"])
        self.assertTrue(ws["A1"].font.bold)
        self.assertFalse(ws["A2"].font.bold)
        self.assertEqual(ws["B2"].value, 3)
        self.assertAlmostEqual(float(ws["C3"].value), 0.5)
        self.assertIsNone(ws["D3"].value)
        self.assertEqual(ws["D2"].value, "fragile, handle\nwith care")

    def test_formula_like_text_stays_text(self):
        @dataclass
        class T:
            v: str

        doc, _ = build([T("=SUM(A1:A2)")], print_header=False, config=CFG)
        ws = load_workbook(io.BytesIO(encode_xlsx(doc))).active
        self.assertEqual(ws["A1"].value, "=SUM(A1:A2)")
        self.assertEqual(ws["A1"].data_type, "s")

    def test_non_finite_numbers_stay_text(self):
        @dataclass
        class T:
            a: float
            b: float
            c: int

        doc, _ = build([T(float("nan"), float("-inf"), 7)], print_header=False, config=CFG)
        ws = load_workbook(io.BytesIO(encode_xlsx(doc))).active
        self.assertEqual([ws["A1"].value, ws["B1"].value], ["nan", "-inf"])
        self.assertEqual(ws["A1"].data_type, "s")
        self.assertEqual(ws["C1"].value, 7)

    def test_bytes_do_not_depend_on_clock(self):
        doc = doc_for(Dialect.STRUCTURED)
        with mock.patch("time.time", return_value=1_000_000_000.0):
            a = encode_xlsx(doc)
        with mock.patch("time.time", return_value=1_500_000_000.0):
            b = encode_xlsx(doc)
        self.assertEqual(a, b)
        props = load_workbook(io.BytesIO(a)).properties
        self.assertEqual(props.created.replace(tzinfo=None), PACKAGE_TIMESTAMP)
        self.assertEqual(props.modified.replace(tzinfo=None), PACKAGE_TIMESTAMP)


class TestPdfWriter(unittest.TestCase):
    def test_pdf_bytes_and_determinism(self):
        doc = doc_for(Dialect.PAGINATED)
        a = encode_pdf(doc, PageSize.A4_HORIZONTAL)
        b = encode_pdf(doc, PageSize.A4_HORIZONTAL)
        self.assertTrue(a.startswith(b"%PDF"))
        self.assertEqual(a, b)

    def test_page_sizes(self):
        letter = PageSize.LETTER.dimensions
        self.assertGreater(letter[1], letter[0])
        landscape = PageSize.LEGAL_HORIZONTAL.dimensions
        self.assertGreater(landscape[0], landscape[1])
        self.assertIs(PageSize.parse("a4"), PageSize.A4)
        self.assertIs(PageSize.parse(6), PageSize.LEGAL_HORIZONTAL)
        self.assertIs(PageSize.parse("tabloid"), PageSize.LETTER)

    def test_markup_characters_in_cells(self):
        doc = doc_for(Dialect.PAGINATED)  # "B&2" must not break paragraph parsing
        self.assertTrue(encode_pdf(doc).startswith(b"%PDF"))


if __name__ == "__main__":
    unittest.main()
