from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Tuple
import logging

from tabexport.catalog.fields import FieldDescriptor, field_catalog
from tabexport.catalog.selector import select_columns
from tabexport.cells.classifier import Dialect, RenderOptions, TypedCell, classify, header_cell
from tabexport.config.env import ExportConfig, get_export_config
from tabexport.document.errors import EmptyInputError, ExportError, MissingParameterError, UnexpectedError
from tabexport.labels.resolver import LabelResolver, resolve_label

logger = logging.getLogger(__name__)

Row = Tuple[TypedCell, ...]


@dataclass(frozen=True)
class TabularDocument:
    columns: Tuple[FieldDescriptor, ...]
    header: Optional[Row]
    body: Tuple[Row, ...]

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def rows(self) -> Tuple[Row, ...]:
        """Header (when present) followed by the data rows."""
        return ((self.header,) if self.header is not None else ()) + self.body


class BuildResult(NamedTuple):
    document: Optional[TabularDocument]
    diagnostic: Optional[str]


def check_required(required: Optional[Mapping[str, Any]], config: ExportConfig) -> None:
    for name, value in (required or {}).items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise MissingParameterError(config.missing_parameter_text, name)


def assemble(
    records: Optional[Iterable[Any]],
    columns_to_print: Optional[Iterable[str]] = None,
    print_header: bool = True,
    date_format: Optional[str] = None,
    *,
    dialect: Dialect = Dialect.STRUCTURED,
    separator: str = ",",
    label_resolver: Optional[LabelResolver] = None,
    record_type: Optional[type] = None,
    required: Optional[Mapping[str, Any]] = None,
    config: Optional[ExportConfig] = None,
) -> TabularDocument:
    """Build the document or raise an ExportError subclass.

    Raises:
        EmptyInputError: no records
        MissingParameterError: a ``required`` value is blank
        UnexpectedError: reading or classifying a field failed
    """
    cfg = config or get_export_config()
    items: List[Any] = list(records) if records is not None else []
    if not items:
        raise EmptyInputError(cfg.data_empty_text)
    check_required(required, cfg)

    opts = RenderOptions(
        dialect=dialect,
        separator=separator,
        date_format=date_format or cfg.date_format,
        config=cfg,
    )
    try:
        rtype = record_type or type(items[0])
        active = select_columns(field_catalog(rtype), columns_to_print).active
        if not active:
            logger.warning("no active columns for %s", getattr(rtype, "__name__", rtype))

        header: Optional[Row] = None
        if print_header:
            header = tuple(header_cell(resolve_label(label_resolver, d, cfg.culture), opts) for d in active)

        body = tuple(
            tuple(classify(getattr(rec, d.name), opts) for d in active)
            for rec in items
        )
    except Exception as e:
        logger.exception("building %s document failed", dialect.value)
        raise UnexpectedError(cfg.exception_text + str(e)) from e

    logger.debug("built %s document: %d columns, %d rows", dialect.value, len(active), len(body))
    return TabularDocument(columns=active, header=header, body=body)


def build(
    records: Optional[Iterable[Any]],
    columns_to_print: Optional[Iterable[str]] = None,
    print_header: bool = True,
    date_format: Optional[str] = None,
    **kwargs: Any,
) -> BuildResult:
    """Same as `assemble`, but failures come back as ``(None, diagnostic)``."""
    try:
        doc = assemble(records, columns_to_print, print_header, date_format, **kwargs)
    except ExportError as e:
        return BuildResult(None, str(e))
    except Exception as e:
        # bad keyword values and the like; still never raised to the caller
        cfg = kwargs.get("config") or get_export_config()
        logger.exception("unexpected failure before build")
        return BuildResult(None, cfg.exception_text + str(e))
    return BuildResult(doc, None)
