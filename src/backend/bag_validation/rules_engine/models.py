from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OutcomeStatus(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    INAPPLICABLE = "INAPPLICABLE"


class RuleStatus(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    INAPPLICABLE = "INAPPLICABLE"
    # Set by the runner only: the rule was never evaluated.
    SKIPPED = "SKIPPED"


class RuleOutcome(BaseModel):
    """What a single rule concluded about a bag.

    `INAPPLICABLE` means the data the rule needs is absent from the bag; the
    runner treats it like a failure when deciding whether to run dependents,
    but it is never reported as a violation.
    """

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    messages: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_messages(self) -> "RuleOutcome":
        if self.status == OutcomeStatus.FAILED and not self.messages:
            raise ValueError("A failed outcome needs at least one message")
        if self.status != OutcomeStatus.FAILED and self.messages:
            raise ValueError(f"A {self.status.value} outcome carries no messages")
        return self

    @classmethod
    def passed(cls) -> "RuleOutcome":
        return cls(status=OutcomeStatus.PASSED)

    @classmethod
    def failed(cls, *messages: str | List[str]) -> "RuleOutcome":
        flat: List[str] = []
        for message in messages:
            if isinstance(message, str):
                flat.append(message)
            else:
                flat.extend(message)
        return cls(status=OutcomeStatus.FAILED, messages=flat)

    @classmethod
    def inapplicable(cls) -> "RuleOutcome":
        return cls(status=OutcomeStatus.INAPPLICABLE)


class RuleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str
    status: RuleStatus
    messages: List[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, rule_id: str, outcome: RuleOutcome) -> "RuleResult":
        return cls(rule_id=rule_id, status=RuleStatus(outcome.status.value), messages=list(outcome.messages))

    @classmethod
    def skipped(cls, rule_id: str) -> "RuleResult":
        return cls(rule_id=rule_id, status=RuleStatus.SKIPPED)

    @property
    def passed(self) -> bool:
        return self.status == RuleStatus.PASSED


class RuleViolation(BaseModel):
    rule: str
    violation: str


class ValidationReport(BaseModel):
    is_compliant: bool
    rule_violations: List[RuleViolation] = Field(default_factory=list)
