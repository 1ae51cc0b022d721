"""
File Manager for retention operations.

Handles the file system side of pruning and migration: listing metadata
directories, removing blacklisted files and copying retained files into
a new repository. Per-file failures are returned as FileOperation records
rather than raised.
"""

import os
import shutil
from datetime import datetime
from pathlib import Path

from .exceptions import DirectoryAccessError
from .models import FileOperation, RetentionOperation


class RepodataFileManager:
    """
    Manages file system operations for retention.

    Directory handles are only held inside os.scandir context managers so
    they are released on every exit path.
    """

    def __init__(self, dry_run: bool = False):
        """
        Initialize File Manager.

        Args:
            dry_run: If True, simulate removals and copies without making changes
        """
        self.dry_run = dry_run

    def list_directory(
        self, directory: str, operation: RetentionOperation, prefix: str = "Cannot open directory"
    ) -> list[str]:
        """
        List the entry names of a directory.

        Args:
            directory: Directory to list
            operation: Operation the listing belongs to, for error reporting
            prefix: Leading text of the error message

        Returns:
            Base names of all entries

        Raises:
            DirectoryAccessError: If the directory cannot be opened
        """
        try:
            with os.scandir(directory) as entries:
                return [entry.name for entry in entries]
        except OSError as e:
            raise DirectoryAccessError(
                operation=operation,
                message=f"{prefix}: {directory}: {e.strerror or e}",
                path=directory,
            ) from e

    def remove_files(self, files: list[str]) -> list[FileOperation]:
        """
        Remove files and track operations.

        Args:
            files: List of file paths to remove

        Returns:
            List of file operations
        """
        operations = []
        for file_path in files:
            try:
                if not self.dry_run:
                    os.remove(file_path)

                operations.append(FileOperation(
                    operation="remove",
                    source=file_path,
                    destination=None,
                    timestamp=datetime.now(),
                    success=True,
                ))
            except OSError as e:
                operations.append(FileOperation(
                    operation="remove",
                    source=file_path,
                    destination=None,
                    timestamp=datetime.now(),
                    success=False,
                    error_message=e.strerror or str(e),
                ))

        return operations

    def copy_path(self, source: str, destination: str) -> FileOperation:
        """
        Copy a file or directory tree, preserving attributes.

        Files are copied with shutil.copy2 (mode, timestamps and flags),
        directories recursively with shutil.copytree. Symlinks are copied
        as symlinks.

        Args:
            source: Path to copy from
            destination: Path to copy to; must not exist yet

        Returns:
            FileOperation record
        """
        try:
            if not self.dry_run:
                if os.path.isdir(source) and not os.path.islink(source):
                    shutil.copytree(
                        source, destination, symlinks=True, copy_function=shutil.copy2
                    )
                else:
                    shutil.copy2(source, destination, follow_symlinks=False)

            return FileOperation(
                operation="copy",
                source=source,
                destination=destination,
                timestamp=datetime.now(),
                success=True,
            )
        except OSError as e:
            return FileOperation(
                operation="copy",
                source=source,
                destination=destination,
                timestamp=datetime.now(),
                success=False,
                error_message=str(e),
            )

    @staticmethod
    def exists(path: str) -> bool:
        """Return True if anything (including a dangling symlink) is at path."""
        return os.path.lexists(path)

    @staticmethod
    def metadata_dir(repo_root: str, repodata_dirname: str) -> str:
        """Path of the metadata subdirectory of a repository root."""
        return str(Path(repo_root) / repodata_dirname)
