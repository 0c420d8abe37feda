import pytest

from bag_validation.rules_engine.models import OutcomeStatus
from bag_validation.rules_engine.rules import BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog
from bag_validation.rules_engine.rules.vault import to_sword_token


UUID = "0b9bb5ee-3187-4387-bb39-2c09536c79f7"


class FakeVaultCatalog:
    def __init__(self, known=()):
        self.known = set(known)
        self.lookups = []

    def find_dataset_by_sword_token(self, sword_token):
        self.lookups.append(sword_token)
        if sword_token in self.known:
            return {"swordToken": sword_token}
        return None


def test_to_sword_token():
    assert to_sword_token(f"urn:uuid:{UUID}") == f"sword:{UUID}"
    assert to_sword_token(f"sword:{UUID}") == f"sword:{UUID}"
    with pytest.raises(ValueError):
        to_sword_token(UUID)


def test_known_dataset_passes(make_bag):
    catalog = FakeVaultCatalog(known=[f"sword:{UUID}"])
    bag = make_bag(bag_info=f"Is-Version-Of: urn:uuid:{UUID}\n")

    outcome = BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog(catalog).evaluate(bag)

    assert outcome.status == OutcomeStatus.PASSED
    assert catalog.lookups == [f"sword:{UUID}"]


def test_unknown_dataset_fails(make_bag):
    bag = make_bag(bag_info=f"Is-Version-Of: urn:uuid:{UUID}\n")

    outcome = BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog(FakeVaultCatalog()).evaluate(bag)

    assert outcome.status == OutcomeStatus.FAILED
    assert outcome.messages[0].endswith(f"no tokens were found: urn:uuid:{UUID}")


def test_no_is_version_of_is_inapplicable(make_bag):
    catalog = FakeVaultCatalog()

    outcome = BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog(catalog).evaluate(make_bag())

    assert outcome.status == OutcomeStatus.INAPPLICABLE
    assert catalog.lookups == []


def test_unconfigured_catalog_is_an_error(make_bag):
    with pytest.raises(RuntimeError):
        BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog(None).evaluate(make_bag())


def test_unrecognised_is_version_of_fails_without_lookup(make_bag):
    catalog = FakeVaultCatalog()
    bag = make_bag(bag_info=f"Is-Version-Of: {UUID}\n")

    outcome = BagInfoIsVersionOfPointsToExistingDatasetInVaultCatalog(catalog).evaluate(bag)

    assert outcome.status == OutcomeStatus.FAILED
    assert "must start with 'sword:' or 'urn:uuid:'" in outcome.messages[0]
    assert catalog.lookups == []
