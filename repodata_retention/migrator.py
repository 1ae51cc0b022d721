"""
Migration of old metadata into a newly generated repository.

Copies metadata files that are still worth keeping from the old metadata
directory into the new one. Files the new generation already produced are
never overwritten, and the old repomd.xml is never carried forward.
"""

import logging
import os
from typing import Optional

from .exceptions import DirectoryAccessError
from .file_manager import RepodataFileManager
from .models import RetentionConfig, RetentionOperation, RetentionStrategy
from .selector import build_blacklist, validate_retain_count


class RepoMigrator:
    """
    Carries non-superseded metadata from an old repository to a new one.

    The classic strategy is the default ("compatibility mode"); the
    manifest strategy can be selected through the configuration.
    """

    def __init__(
        self,
        config: Optional[RetentionConfig] = None,
        strategy: Optional[RetentionStrategy] = None,
    ):
        """
        Initialize Repo Migrator.

        Args:
            config: Retention configuration (None = defaults)
            strategy: Selection strategy (None = config.migration_strategy)
        """
        self.config = config or RetentionConfig()
        self.strategy = strategy or self.config.strategy
        self.file_manager = RepodataFileManager(dry_run=self.config.dry_run)
        self.logger = logging.getLogger(__name__)

    def migrate(self, old_repo: str, new_repo: str, retain: Optional[int] = None) -> None:
        """
        Copy retained metadata from old_repo into new_repo.

        Both paths are metadata directories. A missing old_repo is not an
        error: there is simply nothing to migrate.

        Args:
            old_repo: Metadata directory of the previous generation
            new_repo: Metadata directory of the new generation
            retain: Retain count (None = config.retain_old)

        Raises:
            InvalidRetainCountError: If retain is negative and not -1
            DirectoryAccessError: If old_repo exists but cannot be opened
        """
        if retain is None:
            retain = self.config.retain_old

        if not os.path.exists(old_repo):
            return

        validate_retain_count(retain, RetentionOperation.MIGRATE)

        self.logger.debug("Copying files from old repository to the new one")

        blacklist = build_blacklist(
            old_repo,
            retain,
            strategy=self.strategy,
            manifest_filename=self.config.manifest_filename,
        )
        # Never copy old repomd.xml to the new repository
        blacklist.add(self.config.manifest_filename)

        try:
            filenames = self.file_manager.list_directory(
                old_repo, RetentionOperation.MIGRATE
            )
        except DirectoryAccessError as e:
            self.logger.warning(e.message)
            raise

        for filename in filenames:
            if filename in blacklist:
                self.logger.debug("Blacklisted: %s", filename)
                continue

            full_path = os.path.join(old_repo, filename)
            new_full_path = os.path.join(new_repo, filename)

            # Do not override new file with the old one
            if self.file_manager.exists(new_full_path):
                self.logger.debug(
                    "Skipped copy: %s -> %s (file already exists)",
                    full_path,
                    new_full_path,
                )
                continue

            op = self.file_manager.copy_path(full_path, new_full_path)
            if op.success:
                self.logger.debug("Copied %s -> %s", full_path, new_full_path)
            else:
                self.logger.warning(
                    "Cannot copy %s -> %s: %s",
                    full_path,
                    new_full_path,
                    op.error_message,
                )


def migrate_old_metadata(
    old_repo: str,
    new_repo: str,
    retain: int,
    config: Optional[RetentionConfig] = None,
) -> None:
    """
    Copy non-superseded metadata from old_repo into new_repo.

    Args:
        old_repo: Metadata directory of the previous generation
        new_repo: Metadata directory of the new generation
        retain: Retain count
        config: Retention configuration (None = defaults)
    """
    RepoMigrator(config).migrate(old_repo, new_repo, retain)
