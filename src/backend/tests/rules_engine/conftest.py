import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import bag_validation...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from pathlib import Path

import pytest

from bag_validation.rules_engine.catalog import CatalogEntry, RuleCatalog
from bag_validation.rules_engine.models import RuleOutcome


class StubRule:
    """Returns a fixed outcome and counts how often it was asked."""

    def __init__(self, outcome: RuleOutcome):
        self.outcome = outcome
        self.calls = 0
        self.bags: list[Path] = []

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        self.calls += 1
        self.bags.append(bag_dir)
        return self.outcome


class RaisingRule:
    def __init__(self, exc: Exception):
        self.exc = exc

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        raise self.exc


@pytest.fixture
def passing():
    return lambda: StubRule(RuleOutcome.passed())


@pytest.fixture
def failing():
    return lambda *messages: StubRule(RuleOutcome.failed(*(messages or ("bad",))))


@pytest.fixture
def inapplicable():
    return lambda: StubRule(RuleOutcome.inapplicable())


@pytest.fixture
def raising():
    return lambda exc=None: RaisingRule(exc or RuntimeError("boom"))


@pytest.fixture
def make_catalog():
    def _make(*rows) -> RuleCatalog:
        entries = []
        for row in rows:
            rule_id, rule, *rest = row
            entries.append(CatalogEntry(rule_id=rule_id, rule=rule, depends_on=tuple(rest[0]) if rest else ()))
        return RuleCatalog(tuple(entries))

    return _make
