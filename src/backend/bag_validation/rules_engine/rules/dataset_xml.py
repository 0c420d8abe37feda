from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, List, Mapping, Set
from urllib.parse import urlparse

from adapters.bagit.geometry import has_at_least_two_values, pos_list_problems
from adapters.bagit.identifiers import is_valid_dai, is_valid_doi, is_valid_isni, is_valid_orcid
from adapters.bagit.xml import DATASET_XML, NAMESPACES, ParseError, XmlDocument, local_name, read_xml, text_of

from ..models import RuleOutcome

SCHEME_URI_ABR_OLD = "https://data.cultureelerfgoed.nl/term/id/rn/a4a7933c-e096-4bcf-a921-4f70a78749fe"
SCHEME_URI_ABR_PLUS = "https://data.cultureelerfgoed.nl/term/id/abr/b6df7840-67bf-48bd-aa56-7ee39435d2ed"
SCHEME_URI_ABR_COMPLEX = "https://data.cultureelerfgoed.nl/term/id/abr/e9546020-4b28-4819-b0c2-29e7c864c5c0"
SCHEME_URI_ABR_ARTIFACT = "https://data.cultureelerfgoed.nl/term/id/abr/22cbb070-6542-48f0-8afe-7d98d398cc0b"
SCHEME_URI_ABR_PERIOD = "https://data.cultureelerfgoed.nl/term/id/abr/9b688754-1315-484b-9c89-8817e87c1e84"
SCHEME_URI_ABR_RAPPORT_TYPE = "https://data.cultureelerfgoed.nl/term/id/abr/7a99aaba-c1e7-49a4-9dd8-d295dbcc870e"
SCHEME_URI_ABR_VERWERVINGSWIJZE = "https://data.cultureelerfgoed.nl/term/id/abr/554ca1ec-3ed8-42d3-ae4b-47bcb848b238"

ABR_OLD_BASE_URL = "https://data.cultureelerfgoed.nl/term/id/rn/"
ABR_NEW_BASE_URL = "https://data.cultureelerfgoed.nl/term/id/abr/"

# (element, scheme URI) pairs that must carry exactly one of valueURI / valueCode.
ABR_ELEMENTS = (
    ("subject", SCHEME_URI_ABR_OLD),
    ("subject", SCHEME_URI_ABR_PLUS),
    ("subject", SCHEME_URI_ABR_COMPLEX),
    ("subject", SCHEME_URI_ABR_ARTIFACT),
    ("reportNumber", SCHEME_URI_ABR_RAPPORT_TYPE),
    ("acquisitionMethod", SCHEME_URI_ABR_VERWERVINGSWIJZE),
    ("temporal", SCHEME_URI_ABR_PERIOD),
)

_URL_ATTRIBUTES = ("href", "schemeURI", "valueURI")


def _dataset_xml(bag_dir: Path) -> XmlDocument:
    return read_xml(bag_dir / DATASET_XML)


def _dcmi_identifiers(doc: XmlDocument, id_type: str) -> List[ET.Element]:
    return [el for el in doc.findall("ddm:dcmiMetadata/dcterms:identifier") if doc.has_xsi_type(el, "id-type", id_type)]


class BagFileIsWellFormedXml:
    """A metadata file parses as XML and has the expected root element."""

    def __init__(self, path: str | PurePosixPath, root_element: str):
        self.path = PurePosixPath(path)
        self.root_element = root_element

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        try:
            doc = read_xml(bag_dir / self.path)
        except ParseError as exc:
            return RuleOutcome.failed(f"{self.path.name} is not well-formed XML: {exc}")
        if doc.root.tag != self.root_element:
            return RuleOutcome.failed(
                f"{self.path.name} has root element {doc.root.tag}, expected {self.root_element}"
            )
        return RuleOutcome.passed()


class DatasetXmlContainsExactlyOneDctermsLicenseWithXsiTypeUri:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        licenses = [el for el in doc.findall("ddm:dcmiMetadata/dcterms:license") if doc.has_xsi_type(el, "dcterms", "URI")]
        if len(licenses) != 1:
            return RuleOutcome.failed(
                f"Found {len(licenses)} dcterms:license elements with xsi:type dcterms:URI, there must be exactly one"
            )
        value = text_of(licenses[0])
        if not _is_valid_url(value):
            return RuleOutcome.failed(f"License is not a valid URI: {value}")
        return RuleOutcome.passed()


class DatasetXmlLicenseAllowed:
    """The dataset license is one of the licenses the Data Station accepts."""

    def __init__(self, allowed_licenses: Set[str]):
        self.allowed = {_normalize_license(uri) for uri in allowed_licenses}

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        for el in doc.findall("ddm:dcmiMetadata/dcterms:license"):
            if doc.has_xsi_type(el, "dcterms", "URI"):
                value = text_of(el)
                if _normalize_license(value) not in self.allowed:
                    return RuleOutcome.failed(f"Found unknown or unsupported license: {value}")
                return RuleOutcome.passed()
        # Presence of exactly one license is a prerequisite rule.
        raise ValueError("dataset.xml has no dcterms:license with xsi:type dcterms:URI")


def _normalize_license(uri: str) -> str:
    return uri.strip().rstrip("/")


class DatasetXmlIdentifiersAreValid:
    """All person identifiers of one kind (DAI, ISNI or ORCID) pass their checksum."""

    _validators: Dict[str, Callable[[str], bool]] = {
        "DAI": is_valid_dai,
        "ISNI": is_valid_isni,
        "ORCID": is_valid_orcid,
    }

    def __init__(self, kind: str):
        if kind not in self._validators:
            raise ValueError(f"Unsupported identifier kind: {kind}")
        self.kind = kind

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        is_valid = self._validators[self.kind]
        invalid = [text_of(el) for el in doc.iterfind(f".//dcx-dai:{self.kind}") if not is_valid(text_of(el))]
        if invalid:
            return RuleOutcome.failed(f"dataset.xml: Invalid {self.kind}s: {', '.join(invalid)}")
        return RuleOutcome.passed()


class DatasetXmlGmlPolygonPosListIsWellFormed:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        messages: List[str] = []
        for pos_list in doc.iterfind(".//gml:Polygon//gml:posList"):
            messages.extend(pos_list_problems(pos_list.text or ""))
        if messages:
            return RuleOutcome.failed(messages)
        return RuleOutcome.passed()


class DatasetXmlGmlPolygonsInSameMultiSurfaceHaveSameSrsName:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        messages: List[str] = []
        for surface in doc.iterfind(".//gml:MultiSurface"):
            srs_names = {polygon.get("srsName") for polygon in surface.iterfind(".//gml:Polygon", NAMESPACES)}
            if len(srs_names) > 1:
                found = ", ".join(sorted(name or "(none)" for name in srs_names))
                messages.append(f"Found MultiSurface element containing polygons with different srsNames: {found}")
        if messages:
            return RuleOutcome.failed(messages)
        return RuleOutcome.passed()


class DatasetXmlGmlPointsHaveAtLeastTwoValues:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        bad = [text_of(pos) for pos in doc.iterfind(".//gml:Point/gml:pos") if not has_at_least_two_values(pos.text or "")]
        if bad:
            return RuleOutcome.failed([f"Point has less than two coordinate values: '{value}'" for value in bad])
        return RuleOutcome.passed()


class DatasetXmlArchisIdentifiersHaveAtMost10Characters:
    max_length = 10

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        too_long = [text_of(el) for el in _dcmi_identifiers(doc, "ARCHIS-ZAAK-IDENTIFICATIE") if len(text_of(el)) > self.max_length]
        if too_long:
            return RuleOutcome.failed(
                [f"Archis identifier must be {self.max_length} or fewer characters long: {value}" for value in too_long]
            )
        return RuleOutcome.passed()


class DatasetXmlAllUrlsAreValid:
    """URL-valued attributes and elements typed dcterms:URI / dcterms:URL hold absolute http(s) URLs."""

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        messages: List[str] = []
        for el in doc.root.iter():
            for attr in _URL_ATTRIBUTES:
                value = el.get(attr)
                if value is not None and not _is_valid_url(value):
                    messages.append(f"{local_name(el)} has invalid {attr}: {value}")
            if doc.has_xsi_type(el, "dcterms", "URI") or doc.has_xsi_type(el, "dcterms", "URL"):
                if not _is_valid_url(text_of(el)):
                    messages.append(f"{local_name(el)} is not a valid URL: {text_of(el)}")
        if messages:
            return RuleOutcome.failed(messages)
        return RuleOutcome.passed()


def _is_valid_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc) and " " not in value.strip()


class DatasetXmlHasRightsHolderInElement:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        holders = [el for el in doc.findall("ddm:dcmiMetadata/dcterms:rightsHolder") if text_of(el)]
        if not holders:
            return RuleOutcome.failed("No rightsholder found in <dcterms:rightsHolder> element")
        return RuleOutcome.passed()


class DatasetXmlDoesNotHaveRightHolderInAuthorRole:
    """The rights holder goes in dcterms:rightsHolder, never as the role of an author or organization."""

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        roles = [
            role
            for path in (".//dcx-dai:author/dcx-dai:role", ".//dcx-dai:organization/dcx-dai:role")
            for role in doc.iterfind(path)
            if text_of(role) == "RightsHolder"
        ]
        if roles:
            return RuleOutcome.failed(
                f"dataset.xml: role RightsHolder is used for {len(roles)} author(s) or organization(s), "
                "use dcterms:rightsHolder instead"
            )
        return RuleOutcome.passed()


class DatasetXmlExactlyOneOfValueUriAndValueCode:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        errors: List[str] = []
        for element_name, scheme_uri in ABR_ELEMENTS:
            for el in doc.findall(f"ddm:dcmiMetadata/ddm:{element_name}"):
                if el.get("schemeURI") != scheme_uri:
                    continue
                has_uri = el.get("valueURI") is not None
                has_code = el.get("valueCode") is not None
                if not has_uri and not has_code:
                    errors.append(f"Element {element_name} has neither valueURI nor valueCode")
                elif has_uri and has_code:
                    errors.append(f"Element {element_name} has both valueURI and valueCode")
        if errors:
            return RuleOutcome.failed(errors)
        return RuleOutcome.passed()


class DatasetXmlValueUrisAreValid:
    """valueURI attributes of controlled-vocabulary elements are terms of their scheme."""

    def __init__(self, scheme_uri_to_valid_term_uris: Mapping[str, Set[str]]):
        self.valid_terms = scheme_uri_to_valid_term_uris

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        errors: List[str] = []
        for el in doc.root.iterfind("./*/*"):
            scheme_uri = el.get("schemeURI")
            value_uri = el.get("valueURI")
            if scheme_uri not in self.valid_terms or value_uri is None:
                continue
            value_uri = _convert_old_abr_to_new(value_uri)
            if value_uri not in self.valid_terms[scheme_uri]:
                errors.append(f"Invalid term for {el.get('subjectScheme', scheme_uri)}: {value_uri}")
        if errors:
            return RuleOutcome.failed(errors)
        return RuleOutcome.passed()


def _convert_old_abr_to_new(uri: str) -> str:
    if uri.startswith(ABR_OLD_BASE_URL):
        return ABR_NEW_BASE_URL + uri[len(ABR_OLD_BASE_URL):]
    return uri


class DatasetXmlValueCodesAreValid:
    def __init__(self, scheme_uri_to_valid_codes: Mapping[str, Set[str]]):
        self.valid_codes = scheme_uri_to_valid_codes

    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        errors: List[str] = []
        for el in doc.root.iterfind("./*/*"):
            scheme_uri = el.get("schemeURI")
            value_code = el.get("valueCode")
            if scheme_uri not in self.valid_codes or value_code is None:
                continue
            if value_code not in self.valid_codes[scheme_uri]:
                errors.append(f"Invalid term for {el.get('subjectScheme', scheme_uri)}: {value_code}")
        if errors:
            return RuleOutcome.failed(errors)
        return RuleOutcome.passed()


class DatasetXmlContainsAtMostOneIdentifierWithIdTypeDoi:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        count = len(_dcmi_identifiers(doc, "DOI"))
        if count > 1:
            return RuleOutcome.failed(f"dataset.xml: Found {count} identifiers with xsi:type id-type:DOI, at most one is allowed")
        return RuleOutcome.passed()


class DatasetXmlDoisAreValid:
    def evaluate(self, bag_dir: Path) -> RuleOutcome:
        doc = _dataset_xml(bag_dir)
        invalid = [text_of(el) for el in _dcmi_identifiers(doc, "DOI") if not is_valid_doi(text_of(el))]
        if invalid:
            return RuleOutcome.failed(f"dataset.xml: Invalid DOIs: {', '.join(invalid)}")
        return RuleOutcome.passed()
