from __future__ import annotations

import io
import zipfile
from pathlib import Path


def extract_zip(data: bytes, target_dir: Path, *, max_size: int | None = None) -> Path:
    """
    Extract zip content under `target_dir`, refusing members that would land outside it.

    With `max_size`, archives whose members add up to more uncompressed bytes are refused
    before anything is written.
    """
    target = target_dir.resolve()
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        members = archive.infolist()
        if max_size is not None:
            total = sum(member.file_size for member in members)
            if total > max_size:
                raise ValueError(f"Zip content of {total} bytes exceeds the limit of {max_size} bytes")
        for member in members:
            destination = (target / member.filename).resolve()
            if destination != target and target not in destination.parents:
                raise ValueError(f"Zip entry escapes the extraction directory: {member.filename}")
        archive.extractall(target)
    return target


def first_directory(directory: Path) -> Path | None:
    for child in sorted(directory.iterdir()):
        if child.is_dir() and child.name != "__MACOSX":
            return child
    return None
