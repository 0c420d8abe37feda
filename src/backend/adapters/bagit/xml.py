from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, iterparse

DATASET_XML = Path("metadata") / "dataset.xml"
FILES_XML = Path("metadata") / "files.xml"

NAMESPACES: Dict[str, str] = {
    "ddm": "http://schemas.dans.knaw.nl/dataset/ddm-v2/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcterms": "http://purl.org/dc/terms/",
    "dcx-dai": "http://easy.dans.knaw.nl/schemas/dcx/dai/",
    "dcx-gml": "http://easy.dans.knaw.nl/schemas/dcx/gml/",
    "gml": "http://www.opengis.net/gml",
    "id-type": "http://easy.dans.knaw.nl/schemas/vocab/identification-type/",
    "files": "http://easy.dans.knaw.nl/schemas/bag/metadata/files/",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
}

XSI_TYPE = f"{{{NAMESPACES['xsi']}}}type"


@dataclass(frozen=True)
class XmlDocument:
    root: ET.Element
    # Prefixes as declared in the document; xsi:type values are resolved against these.
    prefixes: Dict[str, str] = field(default_factory=dict)

    def findall(self, path: str) -> List[ET.Element]:
        return self.root.findall(path, NAMESPACES)

    def iterfind(self, path: str) -> Iterator[ET.Element]:
        return self.root.iterfind(path, NAMESPACES)

    def resolve_qname(self, value: str) -> str:
        prefix, sep, local = value.strip().rpartition(":")
        if not sep:
            return local
        uri = self.prefixes.get(prefix, NAMESPACES.get(prefix))
        if uri is None:
            return value.strip()
        return f"{{{uri}}}{local}"

    def has_xsi_type(self, element: ET.Element, namespace_prefix: str, local: str) -> bool:
        value = element.get(XSI_TYPE)
        if value is None:
            return False
        return self.resolve_qname(value) == f"{{{NAMESPACES[namespace_prefix]}}}{local}"


def read_xml(path: Path) -> XmlDocument:
    """Parse an XML file; raises `ParseError` when it is not well-formed or declares a DTD or entities."""
    prefixes: Dict[str, str] = {}
    root = None
    try:
        for event, item in iterparse(str(path), events=("start-ns", "start"), forbid_dtd=True):
            if event == "start-ns":
                prefix, uri = item
                prefixes.setdefault(prefix, uri)
            elif root is None:
                root = item
    except DefusedXmlException as exc:
        raise ParseError(f"{path.name}: {exc!r}") from exc
    if root is None:
        raise ParseError(f"{path.name}: no root element")
    return XmlDocument(root=root, prefixes=prefixes)


def qname(prefix: str, local: str) -> str:
    return f"{{{NAMESPACES[prefix]}}}{local}"


def local_name(element: ET.Element) -> str:
    return element.tag.rpartition("}")[2]


def text_of(element: ET.Element) -> str:
    return (element.text or "").strip()
