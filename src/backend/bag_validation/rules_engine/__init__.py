"""Rule-dependency execution engine for bag compliance checks.

The engine knows nothing about what a rule checks:
- A catalog pairs rule ids with rules and the ids they depend on.
- The runner evaluates rules in catalog order and skips dependents of rules
  that did not pass.
- The report keeps only the failed rules as violations.
"""

from .catalog import CatalogEntry, RuleCatalog, validate_catalog
from .errors import (
    DuplicateRuleIdError,
    PrerequisiteOrderError,
    RuleEngineConfigurationError,
    UnknownPrerequisiteError,
)
from .models import (
    OutcomeStatus,
    RuleOutcome,
    RuleResult,
    RuleStatus,
    RuleViolation,
    ValidationReport,
)
from .registry import RuleCatalogBuilder
from .report import summarize
from .rule import Rule
from .runner import RulesRunner, execute
