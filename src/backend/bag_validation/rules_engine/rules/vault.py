from __future__ import annotations

import logging
from pathlib import Path

from adapters.bagit.bag_info import get_values
from connectors.vault_catalog import VaultCatalogClient

from ..models import RuleOutcome

logger = logging.getLogger(__name__)


def to_sword_token(is_version_of: str) -> str:
    if is_version_of.startswith("sword:"):
        return is_version_of
    if is_version_of.startswith("urn:uuid:"):
        return "sword:" + is_version_of[len("urn:uuid:"):]
    raise ValueError(f"Is-Version-Of value must start with 'sword:' or 'urn:uuid:': {is_version_of}")


class BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog:
    """Is-Version-Of, when present, refers to a dataset known to the Vault Catalog."""

    def __init__(self, client: VaultCatalogClient | None):
        self.client = client

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        if self.client is None:
            raise RuntimeError("Vault catalog rule called, but the vault catalog service is not configured")

        values = get_values(bag_dir, "Is-Version-Of")
        if not values:
            return RuleOutcome.inapplicable()

        try:
            sword_token = to_sword_token(values[0])
        except ValueError as exc:
            return RuleOutcome.failed(str(exc))
        logger.debug("Looking up dataset with SWORD token %s", sword_token)
        dataset = self.client.find_dataset_by_sword_token(sword_token)
        if dataset is None:
            return RuleOutcome.failed(
                "If 'Is-Version-Of' is specified, it must be a valid SWORD token in the vault catalog; "
                f"no tokens were found: {values[0]}"
            )
        return RuleOutcome.passed()
