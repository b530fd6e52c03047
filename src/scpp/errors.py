"""Exception taxonomy and process exit codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit codes, one per handled failure category."""

    OK = 0
    FAILURE = 1
    ENTRY_NOT_FOUND = 3
    ENTRY_ACCESS = 4
    DESTINATION_ACCESS = 5
    OVERWRITE_DECLINED = 6
    PROMPT_UNAVAILABLE = 7


class ScppError(Exception):
    """Base class for handled packaging failures."""

    exit_code: ExitCode = ExitCode.FAILURE

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConfigLoadError(ScppError):
    """Settings file is missing or unreadable. Never caught by the CLI."""


class EntryNotFoundError(ScppError):
    exit_code = ExitCode.ENTRY_NOT_FOUND


class EntryAccessError(ScppError):
    exit_code = ExitCode.ENTRY_ACCESS


class DestinationAccessError(ScppError):
    exit_code = ExitCode.DESTINATION_ACCESS


class OverwriteDeclinedError(ScppError):
    exit_code = ExitCode.OVERWRITE_DECLINED


class PromptUnavailableError(ScppError):
    """The overwrite question could not be asked interactively."""

    exit_code = ExitCode.PROMPT_UNAVAILABLE


@dataclass(frozen=True, slots=True)
class ArchiveWarning:
    """Non-fatal archive problem, e.g. a file vanished before it was read."""

    path: str
    message: str
    error: OSError | None = None
