from __future__ import annotations
from typing import Mapping, Optional, Protocol, Sequence, List
import gettext
import logging

from tabexport.catalog.fields import FieldDescriptor, LabelRef
from tabexport.config.env import get_export_config

logger = logging.getLogger(__name__)


class LabelResolver(Protocol):
    def resolve(self, ref: LabelRef) -> str: ...


def culture_chain(culture: str) -> List[str]:
    """'es-MX' -> ['es-MX', 'es', ''] (most specific first, invariant last)."""
    chain: List[str] = []
    c = (culture or "").strip()
    while c:
        chain.append(c)
        c = c.rsplit("-", 1)[0] if "-" in c else ""
    chain.append("")
    return chain


class ResourceLabelResolver:
    """Looks labels up in in-memory resource sets.

    ``resources`` is ``{resource_type: {culture: {key: text}}}``. A LabelRef without a
    resource type resolves to its own key. Missing entries raise KeyError.
    ``culture`` defaults to the configured one (TABEXPORT_CULTURE).
    """

    def __init__(self, resources: Optional[Mapping[str, Mapping[str, Mapping[str, str]]]] = None,
                 culture: Optional[str] = None):
        self.resources = resources or {}
        self.culture = get_export_config().culture if culture is None else culture

    def resolve(self, ref: LabelRef) -> str:
        if ref.resource_type is None:
            return ref.key
        sets = self.resources[ref.resource_type]
        for c in culture_chain(self.culture):
            entries = sets.get(c)
            if entries and ref.key in entries:
                return str(entries[ref.key])
        raise KeyError(f"{ref.resource_type}:{ref.key} not found for culture '{self.culture}'")


class GettextLabelResolver:
    """Resource type is a gettext domain under ``localedir``; untranslated keys are failures."""

    def __init__(self, localedir: str, languages: Optional[Sequence[str]] = None):
        self.localedir = localedir
        if not languages:
            # gettext locales use underscores ('es_MX') and fall back to 'es' on their own
            culture = get_export_config().culture
            languages = [culture.replace("-", "_")] if culture else None
        self.languages = list(languages) if languages else None

    def resolve(self, ref: LabelRef) -> str:
        if ref.resource_type is None:
            return ref.key
        t = gettext.translation(ref.resource_type, localedir=self.localedir, languages=self.languages)
        text = t.gettext(ref.key)
        if text == ref.key:
            raise KeyError(f"{ref.resource_type}:{ref.key} has no translation")
        return text


def resolve_label(resolver: Optional[LabelResolver], descriptor: FieldDescriptor,
                  culture: Optional[str] = None) -> str:
    """Column title for ``descriptor``; never raises.

    ``culture`` only applies to the default resolver used when ``resolver`` is None.
    """
    if descriptor.label is None:
        return descriptor.name
    if resolver is None:
        resolver = ResourceLabelResolver(culture=culture)
    try:
        return resolver.resolve(descriptor.label)
    except Exception as e:
        logger.debug("label lookup failed for %s: %s", descriptor.name, e)
        return descriptor.name
