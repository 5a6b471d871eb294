from __future__ import annotations
from dataclasses import field, make_dataclass
from typing import Any, Dict, List, Optional, Tuple
import datetime

from tabexport.catalog.fields import LabelRef


class PayloadError(ValueError):
    pass


def _parse_date(v: Any) -> Any:
    if not isinstance(v, str) or not v:
        return v
    try:
        return datetime.datetime.fromisoformat(v)
    except ValueError:
        return v  # left as text


def _label(col: Dict[str, Any]) -> Optional[LabelRef]:
    label = col.get("label")
    if label is None:
        return None
    if isinstance(label, dict):
        return LabelRef(key=str(label["key"]), resource_type=label.get("resource_type"))
    return LabelRef(key=str(label))


def records_from_payload(payload: Dict[str, Any]) -> Tuple[type, List[Any]]:
    """Turn a JSON export request into a record type and its instances.

    Expected shape::

        {"columns": [{"name": "id"}, {"name": "created", "label": "Created", "type": "date"}],
         "records": [{"id": 1, "created": "2024-03-05"}]}

    Keys missing from a record become None; unknown keys are ignored.
    """
    if not isinstance(payload, dict):
        raise PayloadError("payload must be an object")
    columns = payload.get("columns")
    records = payload.get("records")
    if not isinstance(columns, list) or not columns:
        raise PayloadError("columns is required")
    if records is not None and not isinstance(records, list):
        raise PayloadError("records must be a list")

    spec = []
    dates = set()
    for col in columns:
        if isinstance(col, str):
            col = {"name": col}
        name = col.get("name") if isinstance(col, dict) else None
        if not name or not str(name).isidentifier():
            raise PayloadError(f"invalid column name: {name!r}")
        if col.get("type") == "date":
            dates.add(name)
        metadata = {"label": _label(col)} if col.get("label") is not None else {}
        spec.append((name, Any, field(default=None, metadata=metadata)))
    try:
        record_type = make_dataclass("PayloadRecord", spec, frozen=True)
    except (TypeError, ValueError) as e:
        raise PayloadError(str(e)) from e

    out = []
    for r in records or []:
        if not isinstance(r, dict):
            raise PayloadError("each record must be an object")
        values = {n: (_parse_date(r.get(n)) if n in dates else r.get(n)) for n, _, _ in spec}
        out.append(record_type(**values))
    return record_type, out
