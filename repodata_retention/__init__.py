"""
Retention and migration of old repository metadata.

When repodata/ is regenerated, decides which metadata files left over from
previous generations are deleted and which are carried forward into the
new metadata directory, without ever overwriting new output.
"""

from .classifier import FAMILY_MARKERS, classify_filename
from .exceptions import (
    DirectoryAccessError,
    InvalidRetainCountError,
    ManifestParseError,
    RetentionError,
)
from .file_manager import RepodataFileManager
from .manifest import parse_repomd
from .migrator import RepoMigrator, migrate_old_metadata
from .models import (
    FileOperation,
    ManifestRecord,
    MetadataFamily,
    RetainedFile,
    RetentionConfig,
    RetentionOperation,
    RetentionStrategy,
)
from .pruner import RepoPruner, prune_old_metadata
from .selector import (
    RETAIN_ALL,
    STAT_FAILURE_MTIME,
    blacklist_classic,
    blacklist_from_manifest,
    build_blacklist,
)

__all__ = [
    # Entry points
    "prune_old_metadata",
    "migrate_old_metadata",
    "RepoPruner",
    "RepoMigrator",
    # Selection
    "FAMILY_MARKERS",
    "RETAIN_ALL",
    "STAT_FAILURE_MTIME",
    "blacklist_classic",
    "blacklist_from_manifest",
    "build_blacklist",
    "classify_filename",
    "parse_repomd",
    "RepodataFileManager",
    # Exceptions
    "RetentionError",
    "InvalidRetainCountError",
    "DirectoryAccessError",
    "ManifestParseError",
    # Models
    "FileOperation",
    "ManifestRecord",
    "MetadataFamily",
    "RetainedFile",
    "RetentionConfig",
    "RetentionOperation",
    "RetentionStrategy",
]
