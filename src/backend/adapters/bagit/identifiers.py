"""Checksum and syntax checks for the person and dataset identifiers used in DDM."""

from __future__ import annotations

import re

_DAI_PREFIX = "info:eu-repo/dai/nl/"
_DAI_RE = re.compile(r"^\d{7,9}[\dXx]$")
_ISO7064_RE = re.compile(r"^\d{15}[\dX]$")
_DOI_RE = re.compile(r"^10(\.\d+)+/.+")
_URN_UUID_RE = re.compile(
    r"^urn:uuid:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def _mod11_check_char(digits: str) -> str:
    total = 0
    weight = 2
    for ch in reversed(digits):
        total += weight * int(ch)
        weight = weight + 1 if weight < 9 else 2
    remainder = total % 11
    if remainder == 0:
        return "0"
    check = 11 - remainder
    return "X" if check == 10 else str(check)


def is_valid_dai(value: str) -> bool:
    dai = value.strip()
    if dai.startswith(_DAI_PREFIX):
        dai = dai[len(_DAI_PREFIX):]
    if not _DAI_RE.match(dai):
        return False
    return _mod11_check_char(dai[:-1]) == dai[-1].upper()


def iso7064_mod11_2_check_char(digits: str) -> str:
    total = 0
    for ch in digits:
        total = (total + int(ch)) * 2
    result = (12 - total % 11) % 11
    return "X" if result == 10 else str(result)


def _normalize_iso7064(value: str) -> str:
    # Accept URL forms like https://orcid.org/0000-0002-1825-0097 and grouped forms.
    last = value.strip().rstrip("/").rsplit("/", 1)[-1]
    return re.sub(r"[\s-]", "", last).upper()


def is_valid_isni(value: str) -> bool:
    isni = _normalize_iso7064(value)
    if not _ISO7064_RE.match(isni):
        return False
    return iso7064_mod11_2_check_char(isni[:-1]) == isni[-1]


def is_valid_orcid(value: str) -> bool:
    # ORCID iDs are a block within the ISNI number space.
    return is_valid_isni(value)


def is_valid_doi(value: str) -> bool:
    return bool(_DOI_RE.match(value.strip()))


def is_urn_uuid(value: str) -> bool:
    return bool(_URN_UUID_RE.match(value.strip()))
