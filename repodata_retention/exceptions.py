"""
Exception classes for retention operations.

Only failures that stop an operation outright are raised: invalid retain
counts and directories that cannot be opened. Per-file failures are
logged by the caller instead.
"""

from typing import Optional

from .models import RetentionOperation


class RetentionError(Exception):
    """
    Base exception for retention operations.

    Attributes:
        operation: The operation during which the error occurred
        message: Human-readable error description
        recoverable: Whether the error can be recovered from with retry
    """

    def __init__(
        self, operation: RetentionOperation, message: str, recoverable: bool = True
    ) -> None:
        """
        Initialize retention error.

        Args:
            operation: The operation during which the error occurred
            message: Error description
            recoverable: Whether error can be recovered from
        """
        self.operation = operation
        self.message = message
        self.recoverable = recoverable
        super().__init__(f"[{operation.value}] {message}")


class InvalidRetainCountError(RetentionError):
    """
    Raised when a retain count is negative and not -1.

    Never recoverable: retrying with the same argument fails the same way.
    """

    def __init__(self, operation: RetentionOperation, retain: int) -> None:
        self.retain = retain
        super().__init__(
            operation,
            "Number of retained old metadatas must be integer number >= -1 "
            f"(got {retain})",
            recoverable=False,
        )


class DirectoryAccessError(RetentionError):
    """
    Error opening a metadata directory.

    Raised when a directory cannot be listed due to:
    - Directory not found
    - Permission denied
    - Path is not a directory
    """

    def __init__(
        self,
        operation: RetentionOperation,
        message: str,
        path: Optional[str] = None,
        recoverable: bool = True,
    ) -> None:
        """
        Initialize directory access error.

        Args:
            operation: The operation during which the error occurred
            message: Error description
            path: Directory that could not be opened
            recoverable: Whether error can be recovered from
        """
        self.path = path
        super().__init__(operation, message, recoverable)


class ManifestParseError(RetentionError):
    """
    Error reading or parsing a repomd.xml manifest.

    Manifest-driven selection swallows this error and treats the
    manifest as empty.
    """

    def __init__(
        self,
        message: str,
        manifest_path: Optional[str] = None,
    ) -> None:
        self.manifest_path = manifest_path
        error_msg = f"{message}"
        if manifest_path:
            error_msg = f"{message} (manifest: {manifest_path})"
        super().__init__(RetentionOperation.MANIFEST, error_msg)
