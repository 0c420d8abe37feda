from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from bag_validation.rules_engine.rule_sets import RuleSetDependencies, ValidationContext
from connectors.vault_catalog import HttpVaultCatalogClient, get_vault_catalog_config


load_dotenv()

DEFAULT_MAX_ZIP_SIZE = 1 << 30


class ValidTermsFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scheme_uri: str = Field(alias="schemeUri")
    terms_file: Optional[Path] = Field(default=None, alias="termsFile")
    codes_file: Optional[Path] = Field(default=None, alias="codesFile")


class ValidationConfig(BaseModel):
    context: ValidationContext = ValidationContext.DATA_STATION
    profile_version: str = "1.0.0"
    # Local-dir requests are resolved against (and confined to) this folder when set.
    base_folder: Optional[Path] = None
    other_id_prefixes: List[str] = Field(default_factory=list)
    allowed_licenses: List[str] = Field(default_factory=list)
    valid_terms: List[ValidTermsFile] = Field(default_factory=list)
    valid_terms_dir: Optional[Path] = None
    # Uploaded zips expanding to more bytes than this are refused.
    max_zip_size: int = DEFAULT_MAX_ZIP_SIZE


def get_validation_config() -> ValidationConfig:
    """
    Load validation configuration from environment variables.

    Reads:
      VALIDATE_BAG_CONTEXT, VALIDATE_BAG_PROFILE_VERSION, VALIDATE_BAG_BASE_FOLDER,
      VALIDATE_BAG_OTHER_ID_PREFIXES, VALIDATE_BAG_ALLOWED_LICENSES (comma separated),
      VALIDATE_BAG_VALID_TERMS (YAML file listing schemeUri / termsFile / codesFile),
      VALIDATE_BAG_MAX_ZIP_SIZE (uncompressed bytes)
    """
    context = os.getenv("VALIDATE_BAG_CONTEXT", ValidationContext.DATA_STATION.value).strip().lower()
    try:
        validation_context = ValidationContext(context)
    except ValueError as exc:
        raise ValueError("VALIDATE_BAG_CONTEXT must be 'data-station' or 'vaas'.") from exc

    base_folder = os.getenv("VALIDATE_BAG_BASE_FOLDER", "").strip()
    valid_terms_path = os.getenv("VALIDATE_BAG_VALID_TERMS", "").strip()
    valid_terms: List[ValidTermsFile] = []
    if valid_terms_path:
        valid_terms = _load_valid_terms_index(Path(valid_terms_path))

    return ValidationConfig(
        context=validation_context,
        profile_version=os.getenv("VALIDATE_BAG_PROFILE_VERSION", "1.0.0").strip() or "1.0.0",
        base_folder=Path(base_folder) if base_folder else None,
        other_id_prefixes=_split_env("VALIDATE_BAG_OTHER_ID_PREFIXES"),
        allowed_licenses=_split_env("VALIDATE_BAG_ALLOWED_LICENSES"),
        valid_terms=valid_terms,
        valid_terms_dir=Path(valid_terms_path).parent if valid_terms_path else None,
        max_zip_size=_int_env("VALIDATE_BAG_MAX_ZIP_SIZE", DEFAULT_MAX_ZIP_SIZE),
    )


def _split_env(name: str) -> List[str]:
    return [part.strip() for part in os.getenv(name, "").split(",") if part.strip()]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _load_valid_terms_index(path: Path) -> List[ValidTermsFile]:
    if not path.is_file():
        raise ValueError(f"Valid terms index not found: {path}")
    with path.open(encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of valid terms files")
    return [ValidTermsFile.model_validate(entry) for entry in raw]


def load_lines(path: Path) -> FrozenSet[str]:
    """Non-empty, stripped lines of a vocabulary file; the first line is a header."""
    with path.open(encoding="utf-8") as handle:
        lines = handle.read().splitlines()[1:]
    return frozenset(line.strip() for line in lines if line.strip())


def build_rule_set_dependencies(config: ValidationConfig) -> RuleSetDependencies:
    base = config.valid_terms_dir or Path(".")
    terms: Dict[str, FrozenSet[str]] = {}
    codes: Dict[str, FrozenSet[str]] = {}
    for entry in config.valid_terms:
        if entry.terms_file is not None:
            terms[entry.scheme_uri] = load_lines(base / entry.terms_file)
        if entry.codes_file is not None:
            codes[entry.scheme_uri] = load_lines(base / entry.codes_file)

    vault_client = None
    vault_config = get_vault_catalog_config()
    if vault_config is not None:
        vault_client = HttpVaultCatalogClient(vault_config)
    elif config.context == ValidationContext.VAAS:
        raise ValueError("VAULT_CATALOG_BASE_URL is required for the 'vaas' context.")

    return RuleSetDependencies(
        other_id_prefixes=tuple(config.other_id_prefixes),
        allowed_licenses=frozenset(config.allowed_licenses),
        scheme_uri_to_valid_term_uris=terms,
        scheme_uri_to_valid_codes=codes,
        vault_catalog_client=vault_client,
    )
