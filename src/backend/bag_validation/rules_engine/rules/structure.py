from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable

from ..models import RuleOutcome


class BagContainsDir:
    def __init__(self, path: str | PurePosixPath):
        self.path = PurePosixPath(path)

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        if not (bag_dir / self.path).is_dir():
            return RuleOutcome.failed(f"Mandatory directory '{self.path}' not found in bag")
        return RuleOutcome.passed()


class BagContainsFile:
    def __init__(self, path: str | PurePosixPath):
        self.path = PurePosixPath(path)

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        if not (bag_dir / self.path).is_file():
            return RuleOutcome.failed(f"Mandatory file '{self.path}' not found in bag")
        return RuleOutcome.passed()


class BagDirContainsNothingElseThan:
    """A directory holds only the listed entries."""

    def __init__(self, path: str | PurePosixPath, allowed: Iterable[str]):
        self.path = PurePosixPath(path)
        self.allowed = frozenset(allowed)

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        extra = sorted(child.name for child in (bag_dir / self.path).iterdir() if child.name not in self.allowed)
        if extra:
            return RuleOutcome.failed(
                f"Directory '{self.path}' contains files or directories that are not allowed: {', '.join(extra)}"
            )
        return RuleOutcome.passed()


class BagDirDoesNotContain:
    """None of the listed entries exist directly under a directory."""

    def __init__(self, path: str | PurePosixPath, forbidden: Iterable[str]):
        self.path = PurePosixPath(path)
        self.forbidden = tuple(forbidden)

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        directory = bag_dir / self.path
        found = [name for name in self.forbidden if (directory / name).exists()]
        if found:
            return RuleOutcome.failed(
                f"Directory '{self.path}' contains files or directories that are not allowed: {', '.join(found)}"
            )
        return RuleOutcome.passed()
