from __future__ import annotations

from pathlib import Path
from typing import Iterable

from adapters.bagit.bag_info import BAG_INFO_TXT, BagInfoFormatError, get_values, read_bag_info
from adapters.bagit.identifiers import is_urn_uuid
from adapters.bagit.manifests import payload_manifests, verify_bag

from ..models import RuleOutcome


class BagIsValid:
    """The bag is a valid BagIt bag: declaration, payload manifest, complete and with matching checksums."""

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        problems = verify_bag(bag_dir)
        if problems:
            return RuleOutcome.failed([f"Bag is not valid: {p}" for p in problems])
        return RuleOutcome.passed()


class BagInfoExistsAndIsWellformed:
    """bag-info.txt exists and consists of well-formed `Label: value` lines."""

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        if not (bag_dir / BAG_INFO_TXT).is_file():
            return RuleOutcome.failed(f"Mandatory file '{BAG_INFO_TXT}' not found in bag")
        try:
            read_bag_info(bag_dir)
        except BagInfoFormatError as exc:
            return RuleOutcome.failed(f"{BAG_INFO_TXT} is not well-formed: {exc}")
        except UnicodeDecodeError:
            return RuleOutcome.failed(f"{BAG_INFO_TXT} is not valid UTF-8")
        return RuleOutcome.passed()


class BagInfoContainsAtMostOneOf:
    """bag-info.txt contains a given element at most once."""

    def __init__(self, label: str):
        self.label = label

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        count = len(get_values(bag_dir, self.label))
        if count > 1:
            return RuleOutcome.failed(
                f"{BAG_INFO_TXT} may contain at most one element: '{self.label}', found {count}"
            )
        return RuleOutcome.passed()


class BagInfoIsVersionOfIsValidUrnUuid:
    """Is-Version-Of, when present, is a urn:uuid."""

    label = "Is-Version-Of"

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        values = get_values(bag_dir, self.label)
        if not values:
            return RuleOutcome.inapplicable()
        if not is_urn_uuid(values[0]):
            return RuleOutcome.failed(f"{BAG_INFO_TXT} Is-Version-Of value must be a valid URN: {values[0]}")
        return RuleOutcome.passed()


class BagInfoOrganizationalIdentifierPrefixIsValid:
    """Has-Organizational-Identifier, when present, starts with one of the configured prefixes."""

    label = "Has-Organizational-Identifier"

    def __init__(self, prefixes: Iterable[str]):
        self.prefixes = tuple(prefixes)

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        values = get_values(bag_dir, self.label)
        if not values:
            return RuleOutcome.inapplicable()
        if not any(values[0].startswith(prefix) for prefix in self.prefixes):
            return RuleOutcome.failed(
                f"No valid prefix given for value of '{self.label}': {values[0]}"
            )
        return RuleOutcome.passed()


class BagHasOtherManifestsThanOnlyMd5:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        algorithms = set(payload_manifests(bag_dir))
        if algorithms == {"md5"}:
            return RuleOutcome.failed("The bag contains no manifests or only an MD5 payload manifest")
        return RuleOutcome.passed()
