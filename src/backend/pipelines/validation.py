from __future__ import annotations

import json
import logging
import tempfile
import zipfile
from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from adapters.bagit.zip_extract import extract_zip, first_directory
from bag_validation.rules_engine.models import RuleViolation
from bag_validation.rules_engine.rule_sets import RuleSets
from bag_validation.rules_engine.runner import RulesRunner

from .config import DEFAULT_MAX_ZIP_SIZE, ValidationConfig, build_rule_set_dependencies

logger = logging.getLogger(__name__)


class BagNotFoundError(ValueError):
    pass


class InformationPackageType(str, Enum):
    DEPOSIT = "DEPOSIT"
    MIGRATION = "MIGRATION"


class ValidateCommand(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bag_location: str = Field(alias="bagLocation")
    package_type: InformationPackageType = Field(default=InformationPackageType.DEPOSIT, alias="packageType")


class ValidateOk(BaseModel):
    """The compliance report returned to clients; field names are camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    bag_location: Optional[str] = Field(default=None, alias="bagLocation")
    name: str
    profile_version: str = Field(alias="profileVersion")
    information_package_type: InformationPackageType = Field(alias="informationPackageType")
    is_compliant: bool = Field(alias="isCompliant")
    rule_violations: List[RuleViolation] = Field(default_factory=list, alias="ruleViolations")


class BagValidationService:
    def __init__(
        self,
        runner: RulesRunner,
        *,
        profile_version: str = "1.0.0",
        base_folder: Path | None = None,
        max_zip_size: int = DEFAULT_MAX_ZIP_SIZE,
    ):
        self._runner = runner
        self._profile_version = profile_version
        self._base_folder = base_folder.resolve() if base_folder else None
        self._max_zip_size = max_zip_size

    def validate_dir(
        self,
        bag_dir: Path,
        *,
        package_type: InformationPackageType = InformationPackageType.DEPOSIT,
        bag_location: str | None = None,
    ) -> ValidateOk:
        resolved = self._resolve(bag_dir)
        if not resolved.is_dir():
            raise BagNotFoundError(f"Bag on path '{bag_dir}' could not be found or read")
        return self._validate(
            resolved,
            package_type=package_type,
            bag_location=bag_location if bag_location is not None else str(bag_dir),
        )

    def _validate(
        self,
        resolved: Path,
        *,
        package_type: InformationPackageType,
        bag_location: str | None,
    ) -> ValidateOk:
        logger.info("Validating bag %s as %s", resolved, package_type.value)
        report = self._runner.run(resolved)
        return ValidateOk(
            bag_location=bag_location,
            name=resolved.name,
            profile_version=self._profile_version,
            information_package_type=package_type,
            is_compliant=report.is_compliant,
            rule_violations=report.rule_violations,
        )

    def validate_zip(
        self,
        data: bytes,
        *,
        package_type: InformationPackageType = InformationPackageType.DEPOSIT,
    ) -> ValidateOk:
        if len(data) > self._max_zip_size:
            raise BagNotFoundError(f"Uploaded content of {len(data)} bytes exceeds the limit of {self._max_zip_size} bytes")
        with tempfile.TemporaryDirectory(prefix="validate-bag-") as tmp:
            try:
                extracted = extract_zip(data, Path(tmp), max_size=self._max_zip_size)
            except (zipfile.BadZipFile, ValueError) as exc:
                raise BagNotFoundError(f"Uploaded content is not a valid zip file: {exc}") from exc
            bag_dir = first_directory(extracted)
            if bag_dir is None:
                raise BagNotFoundError("No bag directory found in zip file")
            # The temporary extraction path means nothing to the client.
            return self._validate(bag_dir.resolve(), package_type=package_type, bag_location=None)

    def _resolve(self, bag_dir: Path) -> Path:
        if self._base_folder is None:
            return bag_dir.resolve()
        resolved = (self._base_folder / bag_dir).resolve()
        if resolved != self._base_folder and self._base_folder not in resolved.parents:
            raise BagNotFoundError(f"Bag on path '{bag_dir}' is outside the configured base folder")
        return resolved


def build_service(config: ValidationConfig) -> BagValidationService:
    rule_sets = RuleSets(build_rule_set_dependencies(config))
    runner = RulesRunner(rule_sets.catalog_for(config.context))
    logger.info("Loaded %d rules for context %s", len(runner.catalog), config.context.value)
    return BagValidationService(
        runner,
        profile_version=config.profile_version,
        base_folder=config.base_folder,
        max_zip_size=config.max_zip_size,
    )


def render_json(report: ValidateOk) -> str:
    return json.dumps(report.model_dump(mode="json", by_alias=True), indent=2)


def render_yaml(report: ValidateOk) -> str:
    return yaml.safe_dump(report.model_dump(mode="json", by_alias=True), sort_keys=False)


def render_text(report: ValidateOk) -> str:
    lines = [
        f"Bag: {report.name}",
        f"Location: {report.bag_location or '-'}",
        f"Profile version: {report.profile_version}",
        f"Information package type: {report.information_package_type.value}",
        f"Compliant: {'yes' if report.is_compliant else 'no'}",
    ]
    if report.rule_violations:
        lines.append("Rule violations:")
        lines.extend(f"  - [{v.rule}] {v.violation}" for v in report.rule_violations)
    return "\n".join(lines)
