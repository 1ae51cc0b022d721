"""
Retention selection for old metadata files.

Computes the blacklist: base names of old metadata files that must be
removed from a repository or must not be carried forward into a new one.
Two strategies exist and share the same output contract:

- classic: scan the directory, group files by metadata family and keep
  the ``retain`` most recent of each family (by modification time)
- manifest: blacklist everything the previous repomd.xml references,
  but only when ``retain`` is 0

The manifest filename itself is never added here; callers add it.
"""

import logging
import os
from collections import defaultdict

from .classifier import classify_filename
from .exceptions import DirectoryAccessError, InvalidRetainCountError, ManifestParseError
from .file_manager import RepodataFileManager
from .manifest import parse_repomd
from .models import (
    MetadataFamily,
    RetainedFile,
    RetentionOperation,
    RetentionStrategy,
)

logger = logging.getLogger(__name__)

RETAIN_ALL = -1

# Files that cannot be stat'ed sort as the oldest of their family.
STAT_FAILURE_MTIME = 1.0

DEFAULT_MANIFEST_FILENAME = "repomd.xml"


def validate_retain_count(
    retain: int, operation: RetentionOperation = RetentionOperation.SELECT
) -> None:
    """
    Reject retain counts below -1.

    Raises:
        InvalidRetainCountError: If retain is negative and not -1
    """
    if retain < RETAIN_ALL:
        raise InvalidRetainCountError(operation, retain)


def _stat_mtime(path: str) -> float:
    try:
        return os.stat(path).st_mtime
    except OSError:
        return STAT_FAILURE_MTIME


def scan_families(directory: str) -> dict[MetadataFamily, list[RetainedFile]]:
    """
    Group the metadata files of a directory by family.

    Args:
        directory: Directory to scan

    Returns:
        Mapping of family to its files, most recent first

    Raises:
        DirectoryAccessError: If the directory cannot be opened
    """
    try:
        filenames = RepodataFileManager().list_directory(
            directory, RetentionOperation.SELECT
        )
    except DirectoryAccessError as e:
        logger.warning(e.message)
        raise

    families: dict[MetadataFamily, list[RetainedFile]] = defaultdict(list)
    for filename in filenames:
        family = classify_filename(filename)
        if family is None:
            continue
        path = os.path.join(directory, filename)
        families[family].append(RetainedFile(mtime=_stat_mtime(path), path=path))

    for records in families.values():
        records.sort(key=lambda record: record.mtime, reverse=True)

    return dict(families)


def blacklist_classic(directory: str, retain: int) -> set[str]:
    """
    Blacklist all but the ``retain`` most recent files of each family.

    Args:
        directory: Metadata directory to scan
        retain: Retain count (-1 keeps everything)

    Returns:
        Base names of the files beyond the retain count

    Raises:
        InvalidRetainCountError: If retain is negative and not -1
        DirectoryAccessError: If the directory cannot be opened
    """
    if retain == RETAIN_ALL:
        return set()
    validate_retain_count(retain)

    blacklist = set()
    for family, records in scan_families(directory).items():
        for record in records[retain:]:
            logger.debug(
                "Old %s file beyond retain count: %s", family.value, record.path
            )
            blacklist.add(os.path.basename(record.path))

    return blacklist


def blacklist_from_manifest(
    directory: str,
    retain: int,
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME,
) -> set[str]:
    """
    Blacklist every file referenced by the previous manifest.

    Only a retain count of exactly 0 blacklists anything. An unreadable
    manifest is treated as empty.

    Args:
        directory: Directory holding the previous manifest
        retain: Retain count
        manifest_filename: Name of the manifest file in directory

    Returns:
        Base names of the referenced files

    Raises:
        InvalidRetainCountError: If retain is negative and not -1
    """
    if retain == RETAIN_ALL or retain > 0:
        return set()
    validate_retain_count(retain)

    manifest_path = os.path.join(directory, manifest_filename)
    try:
        records = parse_repomd(manifest_path)
    except ManifestParseError:
        logger.warning("Cannot parse repomd: %s", manifest_path)
        records = []

    blacklist = set()
    for record in records:
        if not record.location_href:
            logger.warning(
                "Record without location href in old repo (type: %s)", record.type
            )
            continue

        if record.location_base:
            logger.debug(
                "Old repomd record with base location is ignored: %s - %s",
                record.location_base,
                record.location_href,
            )
            continue

        blacklist.add(os.path.basename(record.location_href))

    return blacklist


def build_blacklist(
    directory: str,
    retain: int,
    strategy: RetentionStrategy = RetentionStrategy.CLASSIC,
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME,
) -> set[str]:
    """
    Compute a blacklist with the given strategy.

    Args:
        directory: Metadata directory
        retain: Retain count
        strategy: Which selection strategy to run
        manifest_filename: Manifest name, used by the manifest strategy

    Returns:
        Base names to exclude (manifest filename not included)
    """
    if strategy is RetentionStrategy.MANIFEST:
        return blacklist_from_manifest(directory, retain, manifest_filename)
    return blacklist_classic(directory, retain)
