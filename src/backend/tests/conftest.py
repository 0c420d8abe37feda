import hashlib
import io
import itertools
import os
import sys
import zipfile
from pathlib import Path


# Ensure `src/backend` is on sys.path so imports like `import bag_validation...` work,
# even when pytest's rootdir is the repository root.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest


LICENSE_CC_BY = "http://creativecommons.org/licenses/by/4.0"

DDM_OPEN = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<ddm:DDM xmlns:ddm="http://schemas.dans.knaw.nl/dataset/ddm-v2/"'
    ' xmlns:dc="http://purl.org/dc/elements/1.1/"'
    ' xmlns:dcterms="http://purl.org/dc/terms/"'
    ' xmlns:dcx-dai="http://easy.dans.knaw.nl/schemas/dcx/dai/"'
    ' xmlns:gml="http://www.opengis.net/gml"'
    ' xmlns:id-type="http://easy.dans.knaw.nl/schemas/vocab/identification-type/"'
    ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">\n'
)

DEFAULT_PAYLOAD = {
    "data/file1.txt": b"hello",
    "data/sub/file2.txt": b"world",
}

DEFAULT_BAG_INFO = "Created: 2024-01-01T00:00:00.000+01:00\nBagging-Date: 2024-01-01\n"


@pytest.fixture
def make_dataset_xml():
    def _make(
        *,
        dcmi: str = "",
        profile: str = "",
        license_uri: str | None = LICENSE_CC_BY,
        rights_holder: str | None = "DANS",
    ) -> str:
        parts = [DDM_OPEN, "  <ddm:profile>\n    <dc:title>Test dataset</dc:title>\n", profile, "  </ddm:profile>\n"]
        parts.append("  <ddm:dcmiMetadata>\n")
        if license_uri is not None:
            parts.append(f'    <dcterms:license xsi:type="dcterms:URI">{license_uri}</dcterms:license>\n')
        if rights_holder is not None:
            parts.append(f"    <dcterms:rightsHolder>{rights_holder}</dcterms:rightsHolder>\n")
        parts.append(dcmi)
        parts.append("  </ddm:dcmiMetadata>\n</ddm:DDM>\n")
        return "".join(parts)

    return _make


@pytest.fixture
def make_files_xml():
    def _make(file_paths) -> str:
        entries = "".join(f'  <file filepath="{path}"/>\n' for path in file_paths)
        return f'<files xmlns="http://easy.dans.knaw.nl/schemas/bag/metadata/files/">\n{entries}</files>\n'

    return _make


@pytest.fixture
def make_bag(tmp_path, make_dataset_xml, make_files_xml):
    """Write a bag that complies with the profile unless told otherwise; returns its directory."""
    counter = itertools.count(1)

    def _make(
        *,
        name: str | None = None,
        payload: dict | None = None,
        dataset_xml: str | None = None,
        files_xml: str | None = None,
        bag_info: str = DEFAULT_BAG_INFO,
        extra_files: dict | None = None,
        omit: tuple = (),
        algorithms: tuple = ("sha1",),
    ) -> Path:
        bag_dir = tmp_path / (name or f"bag{next(counter)}")
        payload = DEFAULT_PAYLOAD if payload is None else payload
        files = {
            "bagit.txt": "BagIt-Version: 1.0\nTag-File-Character-Encoding: UTF-8\n",
            "bag-info.txt": bag_info,
            "metadata/dataset.xml": dataset_xml if dataset_xml is not None else make_dataset_xml(),
            "metadata/files.xml": files_xml if files_xml is not None else make_files_xml(payload),
            **payload,
            **(extra_files or {}),
        }
        (bag_dir / "data").mkdir(parents=True)
        for rel_path, content in files.items():
            if rel_path in omit:
                continue
            target = bag_dir / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")

        for algorithm in algorithms:
            lines = []
            for path in sorted(p for p in (bag_dir / "data").rglob("*") if p.is_file()):
                digest = hashlib.new(algorithm, path.read_bytes()).hexdigest()
                lines.append(f"{digest}  {path.relative_to(bag_dir).as_posix()}\n")
            (bag_dir / f"manifest-{algorithm}.txt").write_text("".join(lines), encoding="utf-8")
        return bag_dir

    return _make


@pytest.fixture
def make_service():
    from bag_validation.rules_engine.rule_sets import RuleSetDependencies, RuleSets
    from bag_validation.rules_engine.runner import RulesRunner
    from pipelines.validation import BagValidationService

    def _make(*, base_folder: Path | None = None, profile_version: str = "1.0.0"):
        rule_sets = RuleSets(RuleSetDependencies(allowed_licenses=frozenset({LICENSE_CC_BY})))
        return BagValidationService(
            RulesRunner(rule_sets.data_station()),
            profile_version=profile_version,
            base_folder=base_folder,
        )

    return _make


@pytest.fixture
def zip_bag():
    """Zip a bag directory the way depositors upload it: one top-level directory."""

    def _zip(bag_dir: Path) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for path in sorted(bag_dir.rglob("*")):
                if path.is_file():
                    archive.write(path, f"{bag_dir.name}/{path.relative_to(bag_dir).as_posix()}")
        return buffer.getvalue()

    return _zip
