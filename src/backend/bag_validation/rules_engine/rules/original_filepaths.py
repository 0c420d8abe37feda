from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import List

from adapters.bagit import original_filepaths
from adapters.bagit.files_xml import read_file_paths
from adapters.bagit.manifests import list_payload_files

from ..models import RuleOutcome


class OptionalBagFileIsUtf8Decodable:
    """An optional tag file, when present, is valid UTF-8."""

    def __init__(self, path: str | PurePosixPath):
        self.path = PurePosixPath(path)

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        target = bag_dir / self.path
        if not target.is_file():
            return RuleOutcome.inapplicable()
        try:
            target.read_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            return RuleOutcome.failed(f"Input not valid UTF-8: {self.path}: {exc.reason} at byte {exc.start}")
        return RuleOutcome.passed()


class OptionalOriginalFilePathsIsComplete:
    """
    original-filepaths.txt, when present, maps every payload file, only maps
    existing files and only to original paths that files.xml describes.
    """

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        if not original_filepaths.exists(bag_dir):
            return RuleOutcome.inapplicable()
        try:
            mapping = original_filepaths.read_original_filepaths(bag_dir).physical_to_original
        except ValueError as exc:
            return RuleOutcome.failed(str(exc))

        payload = list_payload_files(bag_dir)
        described = set(read_file_paths(bag_dir))
        errors: List[str] = []

        not_mapped = [path for path in payload if path not in mapping]
        if not_mapped:
            errors.append(f"original-filepaths.txt: payload files without a mapping: {', '.join(not_mapped)}")

        payload_set = set(payload)
        no_file = sorted(phys for phys in mapping if phys not in payload_set)
        if no_file:
            errors.append(f"original-filepaths.txt: mapped files not found in payload: {', '.join(no_file)}")

        not_described = sorted(orig for orig in mapping.values() if orig not in described)
        if not_described:
            errors.append(f"original-filepaths.txt: original paths not described in files.xml: {', '.join(not_described)}")

        if errors:
            return RuleOutcome.failed(errors)
        return RuleOutcome.passed()
