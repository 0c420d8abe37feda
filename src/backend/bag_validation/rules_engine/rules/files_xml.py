from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path, PurePosixPath
from typing import Dict, List

from adapters.bagit import original_filepaths
from adapters.bagit.files_xml import read_file_paths
from adapters.bagit.manifests import PAYLOAD_DIR, list_payload_files

from ..models import RuleOutcome

logger = logging.getLogger(__name__)


def _original_to_physical(bag_dir: Path) -> Dict[str, str]:
    # Without original-filepaths.txt, files.xml describes the physical paths.
    if not original_filepaths.exists(bag_dir):
        return {}
    try:
        return original_filepaths.read_original_filepaths(bag_dir).original_to_physical()
    except ValueError as exc:
        # Reported as a violation by the original-filepaths rules.
        logger.warning("Ignoring unreadable original-filepaths.txt in %s: %s", bag_dir, exc)
        return {}


def _is_payload_path(value: str) -> bool:
    path = PurePosixPath(value)
    return (
        not path.is_absolute()
        and len(path.parts) > 1
        and path.parts[0] == PAYLOAD_DIR
        and ".." not in path.parts
    )


class FilesXmlFilePathAttributesContainLocalBagPath:
    """Every files.xml `filepath` is a payload path that exists in the bag."""

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        mapping = _original_to_physical(bag_dir)
        errors: List[str] = []
        for file_path in read_file_paths(bag_dir):
            if not _is_payload_path(file_path):
                errors.append(f"files.xml: filepath attribute is not a payload path: '{file_path}'")
                continue
            physical = mapping.get(file_path, file_path)
            if not (bag_dir / physical).is_file():
                errors.append(f"files.xml: filepath attribute points to a file that is not in the bag: '{file_path}'")
        if errors:
            return RuleOutcome.failed(errors)
        return RuleOutcome.passed()


class FilesXmlNoDuplicateFilesAndEveryPayloadFileIsDescribed:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        described = read_file_paths(bag_dir)
        errors: List[str] = []

        duplicates = sorted(path for path, count in Counter(described).items() if count > 1)
        if duplicates:
            errors.append(f"files.xml: duplicate entries found: {', '.join(duplicates)}")

        physical_to_original = {phys: orig for orig, phys in _original_to_physical(bag_dir).items()}
        described_set = set(described)
        missing = [
            path for path in list_payload_files(bag_dir) if physical_to_original.get(path, path) not in described_set
        ]
        if missing:
            errors.append(f"files.xml: payload files not described: {', '.join(missing)}")

        if errors:
            return RuleOutcome.failed(errors)
        return RuleOutcome.passed()
