from __future__ import annotations

from pathlib import Path
from typing import List

from .xml import FILES_XML, read_xml


def read_file_paths(bag_dir: Path) -> List[str]:
    """The `filepath` attributes of all `files:file` elements, in document order."""
    doc = read_xml(bag_dir / FILES_XML)
    return [el.get("filepath", "") for el in doc.findall("files:file")]
