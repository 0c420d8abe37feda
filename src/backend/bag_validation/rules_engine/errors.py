from __future__ import annotations

from typing import Dict, Iterable, List, Tuple


class RuleEngineConfigurationError(ValueError):
    """The rule catalog itself is broken; raised at start-up, never per bag."""


class DuplicateRuleIdError(RuleEngineConfigurationError):
    def __init__(self, rule_ids: Iterable[str]):
        self.rule_ids: List[str] = list(rule_ids)
        super().__init__(f"Duplicate rule ids in catalog: {', '.join(self.rule_ids)}")


class UnknownPrerequisiteError(RuleEngineConfigurationError):
    def __init__(self, missing: Dict[str, List[str]]):
        self.missing = dict(missing)
        listed = "; ".join(f"{rule_id} -> {', '.join(refs)}" for rule_id, refs in self.missing.items())
        super().__init__(f"Rules depend on ids that are not in the catalog: {listed}")


class PrerequisiteOrderError(RuleEngineConfigurationError):
    def __init__(self, misordered: List[Tuple[str, str]]):
        self.misordered = list(misordered)
        listed = "; ".join(f"{rule_id} -> {dep}" for rule_id, dep in self.misordered)
        super().__init__(f"Rules must be declared after the rules they depend on: {listed}")
