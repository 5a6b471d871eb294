from __future__ import annotations
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ExportConfig:
    # Cell markers
    null_text: str = "null"
    null_object_text: str = "null object"
    unsupported_text: str = "unsupported type"
    true_text: str = "true"
    false_text: str = "false"

    # Defaults for export options
    date_format: str = "%d/%m/%Y"
    sheet_name: str = "Sheet1"
    culture: str = ""

    # Diagnostics returned instead of a payload
    data_empty_text: str = "no data"
    missing_parameter_text: str = "missing required parameter"
    exception_text: str = "unexpected error: "
    encoding_error_text: str = "encoding failed: "


def get_export_config() -> ExportConfig:
    d = ExportConfig()
    return ExportConfig(
        null_text=os.getenv("TABEXPORT_NULL_TEXT", d.null_text),
        null_object_text=os.getenv("TABEXPORT_NULL_OBJECT_TEXT", d.null_object_text),
        unsupported_text=os.getenv("TABEXPORT_UNSUPPORTED_TEXT", d.unsupported_text),
        true_text=os.getenv("TABEXPORT_TRUE_TEXT", d.true_text),
        false_text=os.getenv("TABEXPORT_FALSE_TEXT", d.false_text),
        date_format=os.getenv("TABEXPORT_DATE_FORMAT", d.date_format),
        sheet_name=os.getenv("TABEXPORT_SHEET_NAME", d.sheet_name),
        culture=os.getenv("TABEXPORT_CULTURE", d.culture),
        data_empty_text=os.getenv("TABEXPORT_DATA_EMPTY_TEXT", d.data_empty_text),
        missing_parameter_text=os.getenv("TABEXPORT_MISSING_PARAM_TEXT", d.missing_parameter_text),
        exception_text=os.getenv("TABEXPORT_EXCEPTION_TEXT", d.exception_text),
        encoding_error_text=os.getenv("TABEXPORT_ENCODING_ERROR_TEXT", d.encoding_error_text),
    )


@dataclass(frozen=True)
class ApiConfig:
    api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = 8000


def get_api_config() -> ApiConfig:
    return ApiConfig(
        api_key=os.getenv("API_KEY"),
        host=os.getenv("TABEXPORT_HOST", "0.0.0.0"),
        port=int(os.getenv("TABEXPORT_PORT", "8000")),
    )
