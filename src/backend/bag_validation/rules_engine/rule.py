from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from .models import RuleOutcome


@runtime_checkable
class Rule(Protocol):
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        """Check one requirement of the profile against the bag rooted at `bag_dir`.

        Violations are returned as a failed outcome. Raising means the rule
        could not reach a verdict at all, which aborts the whole run.
        """
        ...
