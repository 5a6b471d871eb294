from __future__ import annotations
from enum import Enum
from typing import List, Tuple
from xml.sax.saxutils import escape
import io

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, LEGAL, LETTER, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from tabexport.document.builder import Row, TabularDocument

MARGIN = 10  # points, all four sides

HEADER_STYLE = ParagraphStyle("header", fontName="Helvetica-Bold", fontSize=9, leading=11, alignment=TA_CENTER)
BODY_STYLE = ParagraphStyle("body", fontName="Helvetica", fontSize=7, leading=9, alignment=TA_CENTER)


class PageSize(Enum):
    LETTER = 1
    LETTER_HORIZONTAL = 2
    A4 = 3
    A4_HORIZONTAL = 4
    LEGAL = 5
    LEGAL_HORIZONTAL = 6

    @property
    def dimensions(self) -> Tuple[float, float]:
        base = {"LETTER": LETTER, "A4": A4, "LEGAL": LEGAL}[self.name.replace("_HORIZONTAL", "")]
        return landscape(base) if self.name.endswith("_HORIZONTAL") else base

    @classmethod
    def parse(cls, value) -> "PageSize":
        """Accept a member, its name (any case) or its number; unknown values fall back to LETTER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value) if value in {m.value for m in cls} else cls.LETTER
        return cls.__members__.get(str(value or "").strip().upper(), cls.LETTER)


def _paragraphs(row: Row, style: ParagraphStyle) -> List[Paragraph]:
    return [Paragraph(escape(c.text), style) for c in row]


def encode_pdf(document: TabularDocument, page_size: PageSize = PageSize.LETTER) -> bytes:
    width, height = page_size.dimensions
    buf = io.BytesIO()
    pdf = SimpleDocTemplate(
        buf,
        pagesize=(width, height),
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        invariant=1,  # no timestamps or random ids: same document, same bytes
    )

    data = []
    if document.header is not None:
        data.append(_paragraphs(document.header, HEADER_STYLE))
    data.extend(_paragraphs(row, BODY_STYLE) for row in document.body)

    if document.column_count and data:
        col_width = (width - 2 * MARGIN) / document.column_count
        table = Table(
            data,
            colWidths=[col_width] * document.column_count,
            repeatRows=1 if document.header is not None else 0,
        )
        table.setStyle(TableStyle([
            ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        story = [table]
    else:
        story = [Spacer(1, 1)]
    pdf.build(story)
    return buf.getvalue()
