"""
Data models for repodata retention operations.

Defines the metadata families recognised in a repodata/ directory, the
transient records built while scanning it, manifest records, and the
configuration shared by pruning and migration.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class MetadataFamily(Enum):
    """
    Metadata families subject to retention.

    Each value is the marker a filename must end with (once its final
    extension is stripped) to belong to the family.
    """

    PRIMARY_XML = "primary.xml"
    PRIMARY_DB = "primary.sqlite"
    FILELISTS_XML = "filelists.xml"
    FILELISTS_DB = "filelists.sqlite"
    OTHER_XML = "other.xml"
    OTHER_DB = "other.sqlite"


class RetentionStrategy(Enum):
    """
    How old metadata files are discovered.

    CLASSIC trusts on-disk names and modification times, MANIFEST trusts
    the records of the previous repomd.xml.
    """

    CLASSIC = "classic"
    MANIFEST = "manifest"


class RetentionOperation(Enum):
    """Operation during which a retention error was raised."""

    SELECT = "select"
    PRUNE = "prune"
    MIGRATE = "migrate"
    MANIFEST = "manifest"


@dataclass
class RetainedFile:
    """
    Metadata file awaiting a retention decision.

    Built while scanning a directory and discarded once the blacklist
    has been computed.
    """

    mtime: float
    path: str


@dataclass
class ManifestRecord:
    """
    One <data> record of a repomd.xml manifest.

    Only the fields needed for retention are kept.
    """

    type: Optional[str] = None
    location_href: Optional[str] = None
    location_base: Optional[str] = None


@dataclass
class FileOperation:
    """
    Record of a completed file operation.

    Tracks the outcome of a single remove or copy so failures can be
    logged without interrupting the remaining files.
    """

    operation: str
    source: str
    destination: Optional[str]
    timestamp: datetime
    success: bool
    error_message: Optional[str] = None


@dataclass
class RetentionConfig:
    """
    Configuration for pruning and migration.

    retain_old follows the shared retain-count contract: -1 keeps
    everything, 0 keeps nothing beyond the strategy baseline, and a
    positive n keeps the n most recent files of each family.
    """

    retain_old: int = 0
    repodata_dirname: str = "repodata"
    manifest_filename: str = "repomd.xml"
    migration_strategy: str = RetentionStrategy.CLASSIC.value
    dry_run: bool = False

    @property
    def strategy(self) -> RetentionStrategy:
        """Migration strategy as an enum member."""
        return RetentionStrategy(self.migration_strategy)
