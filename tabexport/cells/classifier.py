from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any
import datetime
import math
import re

from tabexport.config.env import ExportConfig, get_export_config


class CellKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    NULL = "null"
    UNSUPPORTED = "unsupported"


class Dialect(Enum):
    DELIMITED = "delimited"    # csv
    MARKUP = "markup"          # SpreadsheetML 2003
    STRUCTURED = "structured"  # xlsx package
    PAGINATED = "paginated"    # pdf


class DBNullType:
    """Database null: a value that is known to be missing, as opposed to ``None``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DBNULL"

    def __bool__(self) -> bool:
        return False


DBNULL = DBNullType()

_NEWLINES = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class TypedCell:
    kind: CellKind
    text: str
    value: Any = None

    @property
    def is_finite_number(self) -> bool:
        """NUMBER cell a spreadsheet can store as a number (nan and inf cannot)."""
        if self.kind is not CellKind.NUMBER:
            return False
        try:
            return math.isfinite(self.value)
        except OverflowError:
            return True


@dataclass(frozen=True)
class RenderOptions:
    dialect: Dialect = Dialect.STRUCTURED
    separator: str = ","
    date_format: str = "%d/%m/%Y"
    config: ExportConfig = field(default_factory=get_export_config)


def _render_text(s: str, opts: RenderOptions) -> str:
    if opts.dialect is Dialect.MARKUP:
        # strips rather than escapes; kept for compatibility with existing workbooks
        return s.strip().replace("&", "").replace("<", "").replace(">", "")
    if opts.dialect is Dialect.DELIMITED:
        return _strip_separators(s, opts)
    return s


def _strip_separators(s: str, opts: RenderOptions) -> str:
    s = s.replace(",", "")
    if opts.separator:
        s = s.replace(opts.separator, "")
    return s


def _classify(value: Any, opts: RenderOptions) -> TypedCell:
    cfg = opts.config
    if value is None:
        return TypedCell(CellKind.NULL, "" if opts.dialect is Dialect.STRUCTURED else cfg.null_text, None)
    if isinstance(value, str):
        text = _render_text(value, opts)
        return TypedCell(CellKind.TEXT, text, text)
    # bool before numbers: bool is an int subclass
    if isinstance(value, bool):
        text = cfg.true_text if value else cfg.false_text
        return TypedCell(CellKind.BOOLEAN, text, text)
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
        if opts.dialect is Dialect.DELIMITED:
            text = _strip_separators(text, opts)
        return TypedCell(CellKind.NUMBER, text, value)
    if isinstance(value, datetime.date):
        text = value.strftime(opts.date_format)
        return TypedCell(CellKind.DATE, text, text)
    if value is DBNULL:
        return TypedCell(CellKind.NULL, cfg.null_object_text, DBNULL)
    return TypedCell(CellKind.UNSUPPORTED, cfg.unsupported_text, cfg.unsupported_text)


def classify(value: Any, opts: RenderOptions) -> TypedCell:
    """Map one field value to a CellKind and its rendering for ``opts.dialect``.

    First match wins: None, str, bool, int/float/Decimal, date/datetime, DBNULL,
    anything else (UNSUPPORTED). Delimited output never carries a line break.
    """
    cell = _classify(value, opts)
    if opts.dialect is Dialect.DELIMITED and cell.kind is not CellKind.UNSUPPORTED:
        text = _NEWLINES.sub(" ", cell.text)
        if text != cell.text:
            cell = TypedCell(cell.kind, text, text if cell.value == cell.text else cell.value)
    return cell


def header_cell(label: str, opts: RenderOptions) -> TypedCell:
    """Header cells are always TEXT and follow the dialect's text rule."""
    text = _render_text(str(label), opts)
    if opts.dialect is Dialect.DELIMITED:
        text = _NEWLINES.sub(" ", text)
    return TypedCell(CellKind.TEXT, text, text)
