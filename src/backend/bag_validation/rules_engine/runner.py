from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

from .catalog import RuleCatalog, validate_catalog
from .models import RuleResult, ValidationReport
from .report import count_by_status, summarize

logger = logging.getLogger(__name__)


class RulesRunner:
    """Runs a catalog against bags, one sequential pass per bag.

    The catalog is validated once, here, so a runner can only be built from a
    well-formed catalog. The runner keeps no per-bag state and may be shared
    between concurrent requests.
    """

    def __init__(self, catalog: RuleCatalog):
        validate_catalog(catalog)
        self._catalog = catalog

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    def execute(self, bag_dir: Path) -> List[RuleResult]:
        passed: Dict[str, bool] = {}
        results: List[RuleResult] = []

        for entry in self._catalog:
            blocked_by = [dep for dep in entry.depends_on if not passed[dep]]
            if blocked_by:
                logger.debug("Skipping rule %s, prerequisites not passed: %s", entry.rule_id, ", ".join(blocked_by))
                result = RuleResult.skipped(entry.rule_id)
            else:
                logger.debug("Evaluating rule %s", entry.rule_id)
                try:
                    outcome = entry.rule.evaluate(bag_dir)
                except Exception:
                    logger.exception("Rule %s could not be evaluated for bag %s", entry.rule_id, bag_dir)
                    raise
                result = RuleResult.from_outcome(entry.rule_id, outcome)

            passed[entry.rule_id] = result.passed
            results.append(result)

        totals = count_by_status(results)
        logger.info(
            "Validated bag %s: %s",
            bag_dir,
            ", ".join(f"{status.value}={count}" for status, count in totals.items()),
        )
        return results

    def run(self, bag_dir: Path) -> ValidationReport:
        return summarize(self.execute(bag_dir))


def execute(catalog: RuleCatalog, bag_dir: Path) -> List[RuleResult]:
    return RulesRunner(catalog).execute(bag_dir)
