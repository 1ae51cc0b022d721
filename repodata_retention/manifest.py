"""
Minimal repomd.xml reader.

Extracts the location of every <data> record of a manifest. Documents in
the standard repo namespace and un-namespaced documents are both read.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Union

from .exceptions import ManifestParseError
from .models import ManifestRecord

REPO_NS = "http://linux.duke.edu/metadata/repo"
NS = {"repo": REPO_NS}
XML_BASE = "{http://www.w3.org/XML/1998/namespace}base"


def parse_repomd(path: Union[str, Path]) -> list[ManifestRecord]:
    """
    Parse a repomd.xml file into manifest records.

    Args:
        path: Path to the repomd.xml file

    Returns:
        One ManifestRecord per <data> element, in document order

    Raises:
        ManifestParseError: If the file cannot be read or is not valid XML
    """
    try:
        tree = ET.parse(str(path))
    except (OSError, ET.ParseError) as e:
        raise ManifestParseError(f"Cannot parse repomd: {e}", manifest_path=str(path)) from e

    root = tree.getroot()

    # Try with namespace first, fallback to no namespace
    data_elements = root.findall("repo:data", NS)
    if not data_elements:
        data_elements = root.findall("data")

    records = []
    for data in data_elements:
        location = data.find("repo:location", NS)
        if location is None:
            location = data.find("location")

        record = ManifestRecord(type=data.get("type"))
        if location is not None:
            record.location_href = location.get("href") or None
            record.location_base = location.get(XML_BASE) or None
        records.append(record)

    return records
