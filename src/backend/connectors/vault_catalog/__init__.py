"""Vault Catalog connector (network lives here; rules only see the VaultCatalogClient protocol)."""

from .client import HttpVaultCatalogClient, VaultCatalogClient, VaultCatalogError
from .config import VaultCatalogConfig, get_vault_catalog_config

__all__ = [
    "HttpVaultCatalogClient",
    "VaultCatalogClient",
    "VaultCatalogConfig",
    "VaultCatalogError",
    "get_vault_catalog_config",
]
