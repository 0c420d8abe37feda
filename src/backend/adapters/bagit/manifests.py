from __future__ import annotations

import hashlib
import re
from pathlib import Path, PurePosixPath
from typing import Dict, List

BAGIT_TXT = "bagit.txt"
PAYLOAD_DIR = "data"

_MANIFEST_RE = re.compile(r"^manifest-([a-z0-9]+)\.txt$")
_TAG_MANIFEST_RE = re.compile(r"^tagmanifest-([a-z0-9]+)\.txt$")

SUPPORTED_ALGORITHMS = ("md5", "sha1", "sha256", "sha512")


def payload_manifests(bag_dir: Path) -> Dict[str, Path]:
    return _manifests(bag_dir, _MANIFEST_RE)


def tag_manifests(bag_dir: Path) -> Dict[str, Path]:
    return _manifests(bag_dir, _TAG_MANIFEST_RE)


def _manifests(bag_dir: Path, pattern: re.Pattern) -> Dict[str, Path]:
    found: Dict[str, Path] = {}
    for child in sorted(bag_dir.iterdir()):
        match = pattern.match(child.name)
        if match and child.is_file():
            found[match.group(1)] = child
    return found


def parse_manifest(path: Path) -> Dict[str, str]:
    """Map bag-relative file path -> checksum."""
    entries: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        parts = line.split(maxsplit=1)
        if len(parts) != 2:
            raise ValueError(f"{path.name}: malformed manifest line {line!r}")
        checksum, rel_path = parts
        entries[_decode_path(rel_path.strip())] = checksum.lower()
    return entries


def _decode_path(value: str) -> str:
    return value.replace("%0D", "\r").replace("%0A", "\n").replace("%25", "%")


def file_checksum(path: Path, algorithm: str) -> str:
    digest = hashlib.new(algorithm)
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 16), b""):
            digest.update(chunk)
    return digest.hexdigest()


def list_payload_files(bag_dir: Path) -> List[str]:
    payload = bag_dir / PAYLOAD_DIR
    if not payload.is_dir():
        return []
    return sorted(p.relative_to(bag_dir).as_posix() for p in payload.rglob("*") if p.is_file())


def read_bagit_declaration(bag_dir: Path) -> Dict[str, str]:
    path = bag_dir / BAGIT_TXT
    declaration: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        if ":" in line:
            key, value = line.split(":", 1)
            declaration[key.strip()] = value.strip()
    return declaration


def verify_bag(bag_dir: Path) -> List[str]:
    """Return the problems that make the bag invalid (empty list = valid)."""
    if not (bag_dir / BAGIT_TXT).is_file():
        return [f"Mandatory file {BAGIT_TXT} not found"]
    problems: List[str] = []
    try:
        declaration = read_bagit_declaration(bag_dir)
    except UnicodeDecodeError:
        return [f"{BAGIT_TXT} is not valid UTF-8"]
    for key in ("BagIt-Version", "Tag-File-Character-Encoding"):
        if key not in declaration:
            problems.append(f"{BAGIT_TXT} does not declare {key}")
    if not (bag_dir / PAYLOAD_DIR).is_dir():
        problems.append(f"Payload directory '{PAYLOAD_DIR}' not found")

    manifests = payload_manifests(bag_dir)
    if not manifests:
        problems.append("No payload manifest found")

    payload_files = set(list_payload_files(bag_dir))
    for algorithm, manifest in {**manifests, **tag_manifests(bag_dir)}.items():
        problems.extend(_verify_manifest(bag_dir, manifest, algorithm, payload_files))
    return problems


def _verify_manifest(bag_dir: Path, manifest: Path, algorithm: str, payload_files: set[str]) -> List[str]:
    if algorithm not in SUPPORTED_ALGORITHMS:
        return [f"{manifest.name}: unsupported checksum algorithm '{algorithm}'"]
    problems: List[str] = []
    try:
        entries = parse_manifest(manifest)
    except UnicodeDecodeError:
        return [f"{manifest.name} is not valid UTF-8"]
    except ValueError as exc:
        return [str(exc)]
    for rel_path, expected in entries.items():
        target = inside_bag(bag_dir, rel_path)
        if target is None:
            problems.append(f"{manifest.name}: path outside the bag: {rel_path}")
        elif not target.is_file():
            problems.append(f"{manifest.name}: file {rel_path} does not exist")
        elif file_checksum(target, algorithm) != expected:
            problems.append(f"{manifest.name}: checksum mismatch for {rel_path}")
    if manifest.name.startswith("manifest-"):
        for rel_path in sorted(payload_files - set(entries)):
            problems.append(f"{manifest.name}: payload file {rel_path} is not listed")
    return problems


def inside_bag(bag_dir: Path, rel_path: str) -> Path | None:
    """Resolve a manifest path against the bag; None when it is absolute or leads out of the bag."""
    if PurePosixPath(rel_path).is_absolute() or ".." in PurePosixPath(rel_path).parts:
        return None
    root = bag_dir.resolve()
    target = (root / rel_path).resolve()
    if target != root and root not in target.parents:
        return None
    return target
