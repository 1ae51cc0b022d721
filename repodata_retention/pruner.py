"""
Pruning of old metadata from a repository.

Deletes metadata files beyond the retain count from a repository's
repodata/ directory, together with the repomd.xml manifest, before new
metadata is generated there.
"""

import logging
import os
from typing import Optional

from .exceptions import DirectoryAccessError
from .file_manager import RepodataFileManager
from .models import RetentionConfig, RetentionOperation
from .selector import blacklist_classic, validate_retain_count


class RepoPruner:
    """
    Removes superseded metadata from a repository's metadata directory.

    Only an invalid retain count or an unopenable directory stops a
    prune. Files that cannot be removed are logged and skipped.
    """

    def __init__(self, config: Optional[RetentionConfig] = None):
        """
        Initialize Repo Pruner.

        Args:
            config: Retention configuration (None = defaults)
        """
        self.config = config or RetentionConfig()
        self.file_manager = RepodataFileManager(dry_run=self.config.dry_run)
        self.logger = logging.getLogger(__name__)

    def prune(self, repo_root: str, retain: Optional[int] = None) -> None:
        """
        Delete old metadata from repo_root's metadata directory.

        Args:
            repo_root: Repository root containing the metadata directory
            retain: Retain count (None = config.retain_old)

        Raises:
            InvalidRetainCountError: If retain is negative and not -1
            DirectoryAccessError: If the metadata directory cannot be opened
        """
        if retain is None:
            retain = self.config.retain_old
        validate_retain_count(retain, RetentionOperation.PRUNE)

        repodata_path = self.file_manager.metadata_dir(
            repo_root, self.config.repodata_dirname
        )

        blacklist = blacklist_classic(repodata_path, retain)
        # Always remove repomd.xml
        blacklist.add(self.config.manifest_filename)

        try:
            filenames = self.file_manager.list_directory(
                repodata_path, RetentionOperation.PRUNE, prefix="Cannot open a dir"
            )
        except DirectoryAccessError:
            self.logger.debug("Path %s doesn't exist", repo_root)
            raise

        to_remove = [
            os.path.join(repodata_path, filename)
            for filename in filenames
            if filename in blacklist
        ]

        for op in self.file_manager.remove_files(to_remove):
            if op.success:
                self.logger.debug("Removed %s", op.source)
            else:
                self.logger.warning("Cannot remove %s: %s", op.source, op.error_message)


def prune_old_metadata(
    repo_root: str, retain: int, config: Optional[RetentionConfig] = None
) -> None:
    """
    Delete superseded metadata (always including repomd.xml) from repo_root.

    Args:
        repo_root: Repository root containing the metadata directory
        retain: Retain count
        config: Retention configuration (None = defaults)
    """
    RepoPruner(config).prune(repo_root, retain)
