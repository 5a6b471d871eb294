from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from tabexport.catalog.fields import FieldDescriptor


@dataclass(frozen=True)
class ColumnSet:
    entries: Tuple[Tuple[FieldDescriptor, bool], ...]

    @property
    def active(self) -> Tuple[FieldDescriptor, ...]:
        return tuple(d for d, on in self.entries if on)


def select_columns(catalog: Iterable[FieldDescriptor], selection: Optional[Iterable[str]] = None) -> ColumnSet:
    """Mark catalog fields active against a case-insensitive allow-list.

    - No selection (None or empty): every field is active
    - Names missing from the catalog are ignored
    - Catalog order is kept; the selection order is not used
    """
    if isinstance(selection, str):
        selection = [selection]
    wanted = {str(s).casefold() for s in (selection or ())}
    if not wanted:
        return ColumnSet(tuple((d, True) for d in catalog))
    return ColumnSet(tuple((d, d.name.casefold() in wanted) for d in catalog))
