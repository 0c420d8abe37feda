from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class VaultCatalogConfig:
    base_url: str
    timeout_seconds: int = 30
    max_retries: int = 3


def get_vault_catalog_config() -> VaultCatalogConfig | None:
    """
    Load Vault Catalog connector configuration from environment variables.

    Returns None when VAULT_CATALOG_BASE_URL is not set (the service is optional
    outside the Vault as a Service context). Reads:
      VAULT_CATALOG_BASE_URL, VAULT_CATALOG_TIMEOUT_SECONDS, VAULT_CATALOG_MAX_RETRIES
    """
    base_url = os.getenv("VAULT_CATALOG_BASE_URL", "").strip()
    if not base_url:
        return None
    return VaultCatalogConfig(
        base_url=base_url.rstrip("/"),
        timeout_seconds=_int_env("VAULT_CATALOG_TIMEOUT_SECONDS", 30),
        max_retries=_int_env("VAULT_CATALOG_MAX_RETRIES", 3),
    )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
