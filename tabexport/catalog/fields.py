from __future__ import annotations
from dataclasses import dataclass, field, fields, is_dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Sequence, Tuple, Union
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelRef:
    key: str
    resource_type: Optional[str] = None  # None: key is the literal display text


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    label: Optional[LabelRef] = None
    order: int = 0


FieldSpec = Union[str, Tuple[str, Union[LabelRef, str, None]], FieldDescriptor]

# record type -> declared fields; written at import time by register_fields
_REGISTERED: Dict[type, Tuple[FieldDescriptor, ...]] = {}


def _as_label(label: Union[LabelRef, str, None]) -> Optional[LabelRef]:
    if label is None or isinstance(label, LabelRef):
        return label
    return LabelRef(key=str(label))


def column(label: Union[LabelRef, str, None] = None, resource_type: Optional[str] = None,
           export: bool = True, **field_kwargs: Any):
    """Dataclass field carrying export metadata.

    ``label`` is either a LabelRef or a key; with ``resource_type`` the key is looked up
    by the label resolver, otherwise it is shown as-is.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    if label is not None:
        metadata["label"] = LabelRef(key=label, resource_type=resource_type) if isinstance(label, str) else label
    metadata["export"] = export
    return field(metadata=metadata, **field_kwargs)


def register_fields(record_type: type, specs: Sequence[FieldSpec]) -> Tuple[FieldDescriptor, ...]:
    """Declare the exportable fields of a type that is not a dataclass (or override one)."""
    out = []
    for order, spec in enumerate(specs):
        if isinstance(spec, FieldDescriptor):
            out.append(FieldDescriptor(name=spec.name, label=spec.label, order=order))
        elif isinstance(spec, str):
            out.append(FieldDescriptor(name=spec, order=order))
        else:
            name, label = spec
            out.append(FieldDescriptor(name=name, label=_as_label(label), order=order))
    _REGISTERED[record_type] = tuple(out)
    field_catalog.cache_clear()
    return _REGISTERED[record_type]


def _dataclass_fields(record_type: type) -> Tuple[FieldDescriptor, ...]:
    out = []
    for f in fields(record_type):
        if f.name.startswith("_") or f.metadata.get("export", True) is False:
            continue
        out.append(FieldDescriptor(name=f.name, label=_as_label(f.metadata.get("label")), order=len(out)))
    return tuple(out)


@lru_cache(maxsize=256)
def field_catalog(record_type: type) -> Tuple[FieldDescriptor, ...]:
    """Ordered exportable fields of ``record_type``.

    Precedence: registered fields, dataclass fields (declaration order), named tuple
    ``_fields``. Any other type has no exportable fields and yields ``()``.
    """
    if record_type in _REGISTERED:
        return _REGISTERED[record_type]
    if is_dataclass(record_type):
        return _dataclass_fields(record_type)
    names = getattr(record_type, "_fields", None)
    if isinstance(names, tuple) and issubclass(record_type, tuple):
        return tuple(FieldDescriptor(name=n, order=i) for i, n in enumerate(names) if not n.startswith("_"))
    logger.debug("no exportable fields declared for %s", getattr(record_type, "__name__", record_type))
    return ()
