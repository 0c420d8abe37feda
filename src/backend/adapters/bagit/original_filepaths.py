from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

ORIGINAL_FILEPATHS_TXT = "original-filepaths.txt"


@dataclass(frozen=True)
class OriginalFilepaths:
    physical_to_original: Dict[str, str] = field(default_factory=dict)

    def original_to_physical(self) -> Dict[str, str]:
        return {orig: phys for phys, orig in self.physical_to_original.items()}

    def physical_path(self, original: str) -> str | None:
        return self.original_to_physical().get(original)


def exists(bag_dir: Path) -> bool:
    return (bag_dir / ORIGINAL_FILEPATHS_TXT).is_file()


def parse_original_filepaths(text: str) -> OriginalFilepaths:
    # "<physical path>  <original path>", two spaces as separator
    mapping: Dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        physical, sep, original = line.partition("  ")
        if not sep or not physical.strip() or not original.strip():
            raise ValueError(f"{ORIGINAL_FILEPATHS_TXT}: malformed line {line!r}")
        mapping[physical.strip()] = original.strip()
    return OriginalFilepaths(physical_to_original=mapping)


def read_original_filepaths(bag_dir: Path) -> OriginalFilepaths:
    return parse_original_filepaths((bag_dir / ORIGINAL_FILEPATHS_TXT).read_text(encoding="utf-8"))
