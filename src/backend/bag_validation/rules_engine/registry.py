from __future__ import annotations

from typing import Iterable, List

from .catalog import CatalogEntry, RuleCatalog, validate_catalog
from .rule import Rule


class RuleCatalogBuilder:
    """Collects catalog entries in declaration order and freezes them into a validated catalog."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: List[CatalogEntry] = list(entries)

    def add(self, rule_id: str, rule: Rule, depends_on: Iterable[str] = ()) -> "RuleCatalogBuilder":
        if not callable(getattr(rule, "evaluate", None)):
            raise TypeError(f"Rule {rule_id} has no evaluate() method")
        self._entries.append(CatalogEntry(rule_id=rule_id, rule=rule, depends_on=tuple(depends_on)))
        return self

    def extend(self, catalog: Iterable[CatalogEntry]) -> "RuleCatalogBuilder":
        self._entries.extend(catalog)
        return self

    def build(self) -> RuleCatalog:
        catalog = RuleCatalog(tuple(self._entries))
        validate_catalog(catalog)
        return catalog
