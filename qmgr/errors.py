"""Project-specific exception types."""

from __future__ import annotations

from typing import Sequence


class QmgrError(RuntimeError):
    """Base error for domain-level qmgr failures."""


class UserInputError(QmgrError):
    """Raised when a required command-line argument is missing."""


class ConfigNotFoundError(QmgrError):
    """Raised when a named VM config file does not exist."""


class ConfigDecodeError(QmgrError):
    """Raised when a stored VM config cannot be decoded."""


class StorageError(QmgrError):
    """Raised when a config or disk directory/file cannot be created or read."""


class ExecutionError(QmgrError):
    def __init__(
        self, cmd: Sequence[str], message: str, code: int | None = None
    ):
        self.cmd = list(cmd)
        self.code = code
        super().__init__(message)
