"""Read-only access to a BagIt bag on disk and the DANS metadata files it carries."""

from .bag_info import BagInfoFormatError, get_single_value, get_values, read_bag_info
from .manifests import list_payload_files, payload_manifests, verify_bag
from .xml import XmlDocument, read_xml
from .zip_extract import extract_zip, first_directory

__all__ = [
    "BagInfoFormatError",
    "XmlDocument",
    "extract_zip",
    "first_directory",
    "get_single_value",
    "get_values",
    "list_payload_files",
    "payload_manifests",
    "read_bag_info",
    "read_xml",
    "verify_bag",
]
