"""Packaging orchestration: probe, confirm, delete, then stream into a zip archive."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from scpp import reporter
from scpp.archive import ArchiveResult, ArchiveSession
from scpp.config import PackConfig
from scpp.confirm import confirm_overwrite
from scpp.errors import (
    ArchiveWarning,
    DestinationAccessError,
    EntryAccessError,
    EntryNotFoundError,
    ExitCode,
    OverwriteDeclinedError,
    ScppError,
)
from scpp.probe import ProbeStatus, probe

LOGGER = logging.getLogger(__name__)

Confirmer = Callable[[Path], bool]


class BuildState(str, Enum):
    START = "START"
    ENTRY_CHECKED = "ENTRY_CHECKED"
    DEST_CHECKED = "DEST_CHECKED"
    CONFIRMED = "CONFIRMED"
    SKIPPED = "SKIPPED"
    DELETED = "DELETED"
    STREAMING = "STREAMING"
    CLOSED = "CLOSED"
    ABORTED = "ABORTED"


@dataclass(frozen=True, slots=True)
class PackOptions:
    """Runtime options for one packaging run."""

    force: bool = False


@dataclass(frozen=True, slots=True)
class PackResult:
    """Return object for a completed packaging run."""

    state: BuildState
    exit_code: ExitCode
    archive: ArchiveResult | None
    deleted_existing: bool


def remove_path(path: Path) -> None:
    """Delete a file or a whole directory tree."""

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class PackBuilder:
    """Drives one packaging run through its states.

    Handled failures are reported and raised as ScppError subclasses.
    Fatal archive errors propagate untouched.
    """

    def __init__(
        self,
        config: PackConfig,
        options: PackOptions | None = None,
        *,
        confirm: Confirmer = confirm_overwrite,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.options = options or PackOptions()
        self.confirm = confirm
        self.logger = logger or LOGGER
        self.state = BuildState.START
        self.deleted_existing = False

    def _advance(self, state: BuildState) -> None:
        self.logger.debug("pack.state %s -> %s", self.state.value, state.value)
        self.state = state

    def _fail(self, exc: ScppError) -> ScppError:
        reporter.error(exc.message)
        self._advance(BuildState.ABORTED)
        return exc

    def check_entry(self) -> None:
        entry = self.config.entry_path
        result = probe(entry)
        if result.status is ProbeStatus.NOT_FOUND:
            raise self._fail(EntryNotFoundError(f"entry directory not found: {entry}", cause=result.error))
        if result.status is ProbeStatus.OTHER_ERROR:
            raise self._fail(EntryAccessError(f"cannot access entry {entry}: {result.error}", cause=result.error))
        if not entry.is_dir():
            raise self._fail(EntryAccessError(f"entry is not a directory: {entry}"))
        self._advance(BuildState.ENTRY_CHECKED)

    def check_destination(self) -> None:
        destination = self.config.destination_path
        result = probe(destination)
        self._advance(BuildState.DEST_CHECKED)

        if result.status is ProbeStatus.NOT_FOUND:
            self._advance(BuildState.SKIPPED)
            return
        if result.status is ProbeStatus.OTHER_ERROR:
            raise self._fail(
                DestinationAccessError(f"cannot access destination {destination}: {result.error}", cause=result.error)
            )

        if self.options.force:
            self.logger.info("pack.force_overwrite path=%s", destination)
            confirmed = True
        else:
            try:
                confirmed = self.confirm(destination)
            except ScppError as exc:
                raise self._fail(exc)
        if not confirmed:
            raise self._fail(OverwriteDeclinedError("process terminated"))
        self._advance(BuildState.CONFIRMED)

        remove_path(destination)
        self.deleted_existing = True
        self.logger.info("pack.deleted path=%s", destination)
        self._advance(BuildState.DELETED)

    def stream(self) -> ArchiveResult:
        config = self.config
        self._advance(BuildState.STREAMING)
        reporter.primary("packing ", config.entry_path, " -> ", config.destination_path)

        def _on_warning(warning: ArchiveWarning) -> None:
            reporter.warning(warning.message)

        with ArchiveSession(config.destination_path, on_warning=_on_warning) as session:
            session.add_directory(config.entry_path, config.output_name)
            result = session.finalize()

        self._advance(BuildState.CLOSED)
        reporter.tips(result.bytes_written, " total bytes")
        reporter.success("archive created: ", result.path)
        return result

    def run(self) -> PackResult:
        """Run every stage in order and return the final result."""

        self.check_entry()
        self.check_destination()
        archive = self.stream()
        return PackResult(
            state=self.state,
            exit_code=ExitCode.OK,
            archive=archive,
            deleted_existing=self.deleted_existing,
        )


def run_pack(
    config: PackConfig,
    options: PackOptions | None = None,
    *,
    confirm: Confirmer = confirm_overwrite,
    logger: logging.Logger | None = None,
) -> PackResult:
    """Package config.entry_path into config.destination_path."""

    return PackBuilder(config, options, confirm=confirm, logger=logger).run()
