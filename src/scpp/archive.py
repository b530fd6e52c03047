"""Zip archive session: encoder plus destination file for one packaging run."""

from __future__ import annotations

import logging
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator

from scpp.errors import ArchiveWarning

LOGGER = logging.getLogger(__name__)

COMPRESSION = zipfile.ZIP_DEFLATED
COMPRESS_LEVEL = 9

WarningHandler = Callable[[ArchiveWarning], None]


@dataclass(frozen=True, slots=True)
class ArchiveResult:
    """Outcome of a finalized archive."""

    path: Path
    bytes_written: int
    files_added: int
    dirs_added: int
    warnings: tuple[ArchiveWarning, ...] = ()


WalkErrorHandler = Callable[[OSError], None]


def _inode(path: Path) -> tuple[int, int]:
    stat = os.stat(path)
    return stat.st_dev, stat.st_ino


def iter_tree(
    root: Path,
    *,
    skip: Path | None = None,
    onerror: WalkErrorHandler | None = None,
) -> Iterator[tuple[Path, str]]:
    """Yield (absolute path, posix relative path) for every dir and file under root, sorted.

    Symlinked directories are followed. A link back to one of its own ancestors is
    yielded as a directory but not descended into.
    """

    inodes: dict[Path, tuple[int, int]] = {root: _inode(root)}
    for current, dirs, files in os.walk(root, onerror=onerror, followlinks=True):
        dirs.sort()
        files.sort()
        base = Path(current)

        ancestors: set[tuple[int, int]] = set()
        parent = base
        while True:
            ancestors.add(inodes[parent])
            if parent == root:
                break
            parent = parent.parent

        descend: list[str] = []
        for name in dirs:
            path = base / name
            yield path, path.relative_to(root).as_posix()
            try:
                key = _inode(path)
            except FileNotFoundError:
                continue
            if key in ancestors:
                LOGGER.warning("archive.symlink_cycle path=%s", path)
                continue
            inodes[path] = key
            descend.append(name)
        dirs[:] = descend

        for name in files:
            path = base / name
            if skip is not None and path == skip:
                continue
            yield path, path.relative_to(root).as_posix()


@dataclass
class ArchiveSession:
    """Pairs a zip encoder with its destination file until finalize or abort."""

    destination: Path
    on_warning: WarningHandler | None = None
    _zip: zipfile.ZipFile | None = field(default=None, init=False, repr=False)
    _files_added: int = field(default=0, init=False)
    _dirs_added: int = field(default=0, init=False)
    _warnings: list[ArchiveWarning] = field(default_factory=list, init=False)

    def open(self) -> "ArchiveSession":
        self.destination.parent.mkdir(parents=True, exist_ok=True)
        self._zip = zipfile.ZipFile(
            self.destination,
            mode="w",
            compression=COMPRESSION,
            compresslevel=COMPRESS_LEVEL,
            strict_timestamps=False,
        )
        LOGGER.info("archive.open path=%s", self.destination)
        return self

    def __enter__(self) -> "ArchiveSession":
        return self.open() if self._zip is None else self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()

    def _require_open(self) -> zipfile.ZipFile:
        if self._zip is None:
            raise RuntimeError("archive session is not open")
        return self._zip

    def _warn(self, path: Path, exc: OSError) -> None:
        warning = ArchiveWarning(path=str(path), message=f"{path}: {exc.strerror or exc}", error=exc)
        self._warnings.append(warning)
        LOGGER.warning("archive.warning path=%s error=%s", path, exc)
        if self.on_warning is not None:
            self.on_warning(warning)

    def add_directory(self, source: Path, prefix: str) -> None:
        """Add every directory and file under *source*, nested under *prefix*/."""

        archive = self._require_open()
        prefix = prefix.strip("/")
        archive.write(source, prefix)
        self._dirs_added += 1

        skip = self.destination.resolve()

        def _walk_error(exc: OSError) -> None:
            if not isinstance(exc, FileNotFoundError):
                raise exc
            self._warn(Path(exc.filename or source), exc)

        for path, relative in iter_tree(source.resolve(), skip=skip, onerror=_walk_error):
            arcname = f"{prefix}/{relative}"
            try:
                archive.write(path, arcname)
            except FileNotFoundError as exc:
                # vanished between listing and reading
                self._warn(path, exc)
                continue
            if path.is_dir():
                self._dirs_added += 1
            else:
                self._files_added += 1
        LOGGER.info(
            "archive.added source=%s prefix=%s files=%s dirs=%s",
            source,
            prefix,
            self._files_added,
            self._dirs_added,
        )

    def finalize(self) -> ArchiveResult:
        """Write the central directory, flush and close the destination file."""

        archive = self._require_open()
        archive.close()
        self._zip = None
        bytes_written = self.destination.stat().st_size
        LOGGER.info("archive.closed path=%s bytes=%s", self.destination, bytes_written)
        return ArchiveResult(
            path=self.destination,
            bytes_written=bytes_written,
            files_added=self._files_added,
            dirs_added=self._dirs_added,
            warnings=tuple(self._warnings),
        )

    def abort(self) -> None:
        """Release the file handle after a fatal error. The partial file is left in place."""

        if self._zip is None:
            return
        archive, self._zip = self._zip, None
        archive.close()
        LOGGER.warning("archive.aborted path=%s", self.destination)
