from __future__ import annotations

from typing import Dict, Iterable, List

from .models import RuleResult, RuleStatus, RuleViolation, ValidationReport


def summarize(results: Iterable[RuleResult]) -> ValidationReport:
    failed = [res for res in results if res.status == RuleStatus.FAILED]
    violations: List[RuleViolation] = []
    for res in failed:
        violations.extend(RuleViolation(rule=res.rule_id, violation=msg) for msg in res.messages)
    return ValidationReport(is_compliant=not failed, rule_violations=violations)


def count_by_status(results: Iterable[RuleResult]) -> Dict[RuleStatus, int]:
    totals: Dict[RuleStatus, int] = {}
    for res in results:
        totals[res.status] = totals.get(res.status, 0) + 1
    return totals
