"""Export call surface: one function per output format.

Every function returns ``ExportResult(payload, diagnostic)``; exactly one side is
set and no exception escapes.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, NamedTuple, Optional
import logging

from tabexport.cells.classifier import Dialect
from tabexport.config.env import ExportConfig, get_export_config
from tabexport.document.builder import TabularDocument, assemble
from tabexport.document.errors import EncodingError, ExportError
from tabexport.exports.pdf import PageSize, encode_pdf
from tabexport.exports.workbook import encode_xlsx, save_xlsx
from tabexport.exports.writers import encode_csv, encode_excel_xml
from tabexport.labels.resolver import LabelResolver

logger = logging.getLogger(__name__)


class ExportResult(NamedTuple):
    payload: Optional[bytes]
    diagnostic: Optional[str]

    @property
    def ok(self) -> bool:
        return self.payload is not None


def _run(
    records: Optional[Iterable[Any]],
    encode: Callable[[TabularDocument], bytes],
    *,
    dialect: Dialect,
    columns_to_print: Optional[Iterable[str]] = None,
    date_format: Optional[str] = None,
    print_header: bool = True,
    separator: str = ",",
    required: Optional[Mapping[str, Any]] = None,
    label_resolver: Optional[LabelResolver] = None,
    record_type: Optional[type] = None,
    config: Optional[ExportConfig] = None,
) -> ExportResult:
    cfg = config or get_export_config()
    try:
        doc = assemble(
            records,
            columns_to_print,
            print_header,
            date_format,
            dialect=dialect,
            separator=separator,
            label_resolver=label_resolver,
            record_type=record_type,
            required=required,
            config=cfg,
        )
        try:
            payload = encode(doc)
        except Exception as e:
            logger.exception("%s encoder failed", dialect.value)
            raise EncodingError(cfg.encoding_error_text + str(e)) from e
    except ExportError as e:
        logger.info("%s export returned diagnostic: %s", dialect.value, e)
        return ExportResult(None, str(e))
    except Exception as e:
        logger.exception("%s export failed", dialect.value)
        return ExportResult(None, cfg.exception_text + str(e))
    logger.info("%s export: %d bytes", dialect.value, len(payload))
    return ExportResult(payload, None)


def export_csv(records, separator: str = ",", columns_to_print=None, date_format: Optional[str] = None,
               print_header: bool = True, **common) -> ExportResult:
    return _run(
        records,
        lambda doc: encode_csv(doc, separator),
        dialect=Dialect.DELIMITED,
        separator=separator,
        columns_to_print=columns_to_print,
        date_format=date_format,
        print_header=print_header,
        **common,
    )


def export_excel_xml(records, columns_to_print=None, date_format: Optional[str] = None,
                     print_header: bool = True, sheet_name: Optional[str] = None, **common) -> ExportResult:
    cfg = common.get("config") or get_export_config()
    return _run(
        records,
        lambda doc: encode_excel_xml(doc, sheet_name or cfg.sheet_name),
        dialect=Dialect.MARKUP,
        columns_to_print=columns_to_print,
        date_format=date_format,
        print_header=print_header,
        **common,
    )


def export_xlsx(records, columns_to_print=None, date_format: Optional[str] = None,
                print_header: bool = True, sheet_name: Optional[str] = None, **common) -> ExportResult:
    cfg = common.get("config") or get_export_config()
    return _run(
        records,
        lambda doc: encode_xlsx(doc, sheet_name or cfg.sheet_name),
        dialect=Dialect.STRUCTURED,
        columns_to_print=columns_to_print,
        date_format=date_format,
        print_header=print_header,
        **common,
    )


def export_pdf(records, page_size: PageSize = PageSize.LETTER, columns_to_print=None,
               date_format: Optional[str] = None, print_header: bool = True, **common) -> ExportResult:
    size = PageSize.parse(page_size)
    return _run(
        records,
        lambda doc: encode_pdf(doc, size),
        dialect=Dialect.PAGINATED,
        columns_to_print=columns_to_print,
        date_format=date_format,
        print_header=print_header,
        **common,
    )


def export_excel_file(records, path: Optional[str], print_header: bool = True, **common) -> ExportResult:
    """Write the workbook to ``path``, return its bytes and remove the file.

    ``path`` is required; a blank path yields the missing-parameter diagnostic.
    """
    cfg = common.get("config") or get_export_config()

    def encode(doc: TabularDocument) -> bytes:
        p = Path(str(path))
        try:
            save_xlsx(doc, p, cfg.sheet_name)
            return p.read_bytes()
        finally:
            p.unlink(missing_ok=True)

    return _run(
        records,
        encode,
        dialect=Dialect.STRUCTURED,
        print_header=print_header,
        required={"path": path},
        **common,
    )


EXPORTERS: Dict[str, Callable[..., ExportResult]] = {
    "csv": export_csv,
    "excel_xml": export_excel_xml,
    "xlsx": export_xlsx,
    "pdf": export_pdf,
}

MIMETYPES: Dict[str, str] = {
    "csv": "text/csv",
    "excel_xml": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}

EXTENSIONS: Dict[str, str] = {"csv": "csv", "excel_xml": "xml", "xlsx": "xlsx", "pdf": "pdf"}
