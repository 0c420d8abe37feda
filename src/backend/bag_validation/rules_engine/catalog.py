from __future__ import annotations

import argparse
import inspect
import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple

import yaml
from pydantic import BaseModel, Field

from .errors import DuplicateRuleIdError, PrerequisiteOrderError, UnknownPrerequisiteError
from .rule import Rule


@dataclass(frozen=True)
class CatalogEntry:
    rule_id: str
    rule: Rule
    depends_on: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.rule_id:
            raise ValueError("Catalog entry must define rule_id")
        # Ordered set: keep the first occurrence of each prerequisite.
        object.__setattr__(self, "depends_on", tuple(dict.fromkeys(self.depends_on)))


@dataclass(frozen=True)
class RuleCatalog:
    entries: Tuple[CatalogEntry, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __add__(self, other: "RuleCatalog") -> "RuleCatalog":
        return RuleCatalog(self.entries + tuple(other.entries))

    def ids(self) -> List[str]:
        return [entry.rule_id for entry in self.entries]

    def get(self, rule_id: str) -> CatalogEntry:
        for entry in self.entries:
            if entry.rule_id == rule_id:
                return entry
        raise KeyError(rule_id)


def validate_catalog(catalog: Iterable[CatalogEntry]) -> None:
    """Check the structure of a catalog before any rule runs.

    Raises `DuplicateRuleIdError` naming every repeated id,
    `UnknownPrerequisiteError` for references to ids outside the catalog and
    `PrerequisiteOrderError` for prerequisites that are not declared earlier
    than their dependent (which also covers self-references and cycles).
    """
    entries = list(catalog)

    counts = Counter(entry.rule_id for entry in entries)
    duplicates = [rule_id for rule_id, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateRuleIdError(duplicates)

    known = set(counts)
    missing: Dict[str, List[str]] = {}
    for entry in entries:
        refs = [dep for dep in entry.depends_on if dep not in known]
        if refs:
            missing[entry.rule_id] = refs
    if missing:
        raise UnknownPrerequisiteError(missing)

    seen: set[str] = set()
    misordered: List[Tuple[str, str]] = []
    for entry in entries:
        misordered.extend((entry.rule_id, dep) for dep in entry.depends_on if dep not in seen)
        seen.add(entry.rule_id)
    if misordered:
        raise PrerequisiteOrderError(misordered)


class RuleCatalogDescription(BaseModel):
    rule_id: str
    depends_on: List[str] = Field(default_factory=list)

    module: str
    class_name: str
    description: str = ""


def describe_catalog(catalog: RuleCatalog) -> List[RuleCatalogDescription]:
    rows: List[RuleCatalogDescription] = []
    for entry in catalog:
        rule_cls = type(entry.rule)
        doc = inspect.getdoc(rule_cls) or ""
        rows.append(
            RuleCatalogDescription(
                rule_id=entry.rule_id,
                depends_on=list(entry.depends_on),
                module=getattr(rule_cls, "__module__", ""),
                class_name=getattr(rule_cls, "__name__", ""),
                description=doc.split("\n\n", 1)[0].replace("\n", " "),
            )
        )
    return rows


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(catalog, sort_keys=False)


def main(argv: list[str] | None = None) -> None:
    from .rule_sets import RuleSetDependencies, RuleSets, ValidationContext

    parser = argparse.ArgumentParser(description="Print the rule catalog of a validation context.")
    parser.add_argument(
        "--context",
        choices=[c.value for c in ValidationContext],
        default=ValidationContext.DATA_STATION.value,
        help="Validation context (default: data-station).",
    )
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    rule_sets = RuleSets(RuleSetDependencies())
    catalog = [row.model_dump() for row in describe_catalog(rule_sets.catalog_for(ValidationContext(args.context)))]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
