# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
OSBackup Exceptions - Custom exceptions for the osbackup package.
"""


class OSBackupError(Exception):
    """Base exception for all osbackup errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(OSBackupError):
    """Raised when configuration is invalid."""

    pass


class RequestConstructionError(OSBackupError):
    """
    Raised when an outbound request cannot be built.

    This is a setup defect (bad base address, unencodable path), not a
    runtime condition. Callers must not turn it into a FAIL status.
    """

    pass


class ValidationError(OSBackupError):
    """Raised when an incoming request is malformed."""

    pass


class CuratorError(OSBackupError):
    """Raised when a Curator call fails or answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class SearchEngineError(OSBackupError):
    """Raised when a search engine query fails."""

    pass


class SnapshotNotFoundError(SearchEngineError):
    """Raised when a snapshot is missing from its repository."""

    pass


class RestoreError(OSBackupError):
    """Raised when a sequential restore gives up on an index."""

    pass


class RequestCancelledError(OSBackupError):
    """Raised when the caller's deadline expires mid-operation."""

    pass
