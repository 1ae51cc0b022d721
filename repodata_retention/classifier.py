"""
Filename classification for repodata files.

Buckets metadata filenames into families by suffix matching, the same
way createrepo has always recognised old primary/filelists/other files:
the final extension (usually a compression suffix) is stripped and the
remainder must end with a family marker.
"""

from typing import Optional

from .models import MetadataFamily

# Checked in this order; the first marker that matches wins.
FAMILY_MARKERS: tuple[MetadataFamily, ...] = (
    MetadataFamily.PRIMARY_XML,
    MetadataFamily.PRIMARY_DB,
    MetadataFamily.FILELISTS_XML,
    MetadataFamily.FILELISTS_DB,
    MetadataFamily.OTHER_XML,
    MetadataFamily.OTHER_DB,
)


def strip_last_suffix(filename: str) -> Optional[str]:
    """
    Return filename without its final dot-delimited extension.

    Args:
        filename: Base filename

    Returns:
        Name without the last extension, or None if it contains no dot
    """
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[0]


def classify_filename(filename: str) -> Optional[MetadataFamily]:
    """
    Determine the metadata family of a filename.

    Matching is case-sensitive and only looks at the tail, so checksum
    prefixes such as ``<hash>-primary.xml.gz`` classify correctly.

    Args:
        filename: Base filename (no directory component)

    Returns:
        The matching MetadataFamily, or None if the name is not metadata
    """
    name_without_suffix = strip_last_suffix(filename)
    if name_without_suffix is None:
        return None

    for family in FAMILY_MARKERS:
        if name_without_suffix.endswith(family.value):
            return family
    return None
