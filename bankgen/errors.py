"""bankgen - Error taxonomy.

Run-level failures are exceptions carrying a FetchErrorCode; the pipeline
converts them into a FetchResult. Per-bank load failures are not
exceptions: they are collected as BankLoadWarning records and the batch
continues.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FetchErrorCode(str, Enum):
    """Error codes reported by a fetch run."""

    BANK_DIRECTORY_NOT_FOUND = "BANK_DIRECTORY_NOT_FOUND"
    SYSTEM_INIT_FAILED = "SYSTEM_INIT_FAILED"
    BACKEND_ERROR = "BACKEND_ERROR"
    EMPTY_PATH_LIST = "EMPTY_PATH_LIST"
    WRITE_FAILED = "WRITE_FAILED"
    CONFIG_INVALID = "CONFIG_INVALID"


class BankgenError(Exception):
    """Base class for run-level failures."""

    code: FetchErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BankDirectoryNotFound(BankgenError):
    """No directory with compiled banks could be located."""

    code = FetchErrorCode.BANK_DIRECTORY_NOT_FOUND


class SystemInitFailed(BankgenError):
    """The offline studio system could not be created or initialized."""

    code = FetchErrorCode.SYSTEM_INIT_FAILED


class EmptyPathList(BankgenError, ValueError):
    """Identifier synthesis was asked to name zero paths."""

    code = FetchErrorCode.EMPTY_PATH_LIST


@dataclass(frozen=True)
class BankLoadWarning:
    """A single bank file that failed to load. Not fatal."""

    bank_file: str
    result: str

    def __str__(self) -> str:
        return f"Failed to load bank: {self.bank_file} => {self.result}"
