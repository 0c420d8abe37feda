from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

BAG_INFO_TXT = "bag-info.txt"


class BagInfoFormatError(ValueError):
    pass


def parse_bag_info(text: str) -> List[Tuple[str, str]]:
    """
    Parse the `Label: value` lines of a bag-info.txt.

    Lines starting with whitespace continue the previous value. Repeated labels
    are kept in file order, labels are case-sensitive.
    """
    fields: List[Tuple[str, str]] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        if line[0] in " \t":
            if not fields:
                raise BagInfoFormatError(f"line {lineno}: continuation line without a preceding label")
            label, value = fields[-1]
            fields[-1] = (label, f"{value} {line.strip()}".strip())
            continue
        if ":" not in line:
            raise BagInfoFormatError(f"line {lineno}: expected 'Label: value', got {line!r}")
        label, value = line.split(":", 1)
        if not label.strip() or label != label.strip():
            raise BagInfoFormatError(f"line {lineno}: invalid label {label!r}")
        fields.append((label, value.strip()))
    return fields


def read_bag_info(bag_dir: Path) -> List[Tuple[str, str]]:
    path = bag_dir / BAG_INFO_TXT
    return parse_bag_info(path.read_text(encoding="utf-8"))


def get_values(bag_dir: Path, label: str) -> List[str]:
    return [value for key, value in read_bag_info(bag_dir) if key == label]


def get_single_value(bag_dir: Path, label: str) -> str | None:
    values = get_values(bag_dir, label)
    if len(values) > 1:
        raise ValueError(f"Expected at most one {label} in {BAG_INFO_TXT}, found {len(values)}")
    return values[0] if values else None
