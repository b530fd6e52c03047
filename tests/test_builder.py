from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from scpp.builder import BuildState, PackBuilder, PackOptions, run_pack
from scpp.config import PackConfig
from scpp.errors import (
    DestinationAccessError,
    EntryAccessError,
    EntryNotFoundError,
    ExitCode,
    OverwriteDeclinedError,
    PromptUnavailableError,
)


def _never_asked(path: Path) -> bool:
    raise AssertionError(f"unexpected prompt for {path}")


def _snapshot(root: Path) -> set[str]:
    return {path.relative_to(root).as_posix() for path in root.rglob("*")}


def test_missing_entry_reports_and_writes_nothing(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = PackConfig(
        entry_path=tmp_path / "missing",
        output_name="bundle",
        extension="zip",
        destination_dir=tmp_path / "dist",
    )
    before = _snapshot(tmp_path)
    builder = PackBuilder(config, confirm=_never_asked)
    with pytest.raises(EntryNotFoundError) as excinfo:
        builder.run()

    assert excinfo.value.exit_code is ExitCode.ENTRY_NOT_FOUND
    assert builder.state is BuildState.ABORTED
    assert _snapshot(tmp_path) == before
    assert "scpp entry directory not found" in capsys.readouterr().out


def test_entry_that_is_a_file_is_rejected(tmp_path: Path) -> None:
    entry = tmp_path / "file.txt"
    entry.write_text("x", encoding="utf-8")
    config = PackConfig(entry_path=entry, output_name="bundle", extension="zip", destination_dir=tmp_path)
    with pytest.raises(EntryAccessError):
        run_pack(config, confirm=_never_asked)


def test_fresh_destination_no_prompt_no_delete(pack_config: PackConfig, capsys: pytest.CaptureFixture[str]) -> None:
    result = run_pack(pack_config, confirm=_never_asked)

    assert result.state is BuildState.CLOSED
    assert result.exit_code is ExitCode.OK
    assert result.deleted_existing is False
    assert result.archive is not None
    assert pack_config.destination_path.exists()
    out = capsys.readouterr().out
    assert f"scpp {result.archive.bytes_written} total bytes" in out
    assert "scpp archive created: " in out


def test_force_overwrites_without_prompt(pack_config: PackConfig) -> None:
    destination = pack_config.destination_path
    destination.parent.mkdir(parents=True)
    destination.write_bytes(b"stale")

    result = run_pack(pack_config, PackOptions(force=True), confirm=_never_asked)

    assert result.deleted_existing is True
    with zipfile.ZipFile(destination) as zf:
        assert "bundle/index.html" in zf.namelist()


def test_force_replaces_directory_at_destination(pack_config: PackConfig) -> None:
    destination = pack_config.destination_path
    (destination / "nested").mkdir(parents=True)
    (destination / "nested" / "old.txt").write_text("old", encoding="utf-8")

    run_pack(pack_config, PackOptions(force=True), confirm=_never_asked)

    assert destination.is_file()
    assert zipfile.is_zipfile(destination)


def test_confirmed_overwrite_deletes_then_writes(pack_config: PackConfig) -> None:
    destination = pack_config.destination_path
    destination.parent.mkdir(parents=True)
    destination.write_bytes(b"stale")
    asked: list[Path] = []

    def yes(path: Path) -> bool:
        asked.append(path)
        return True

    result = run_pack(pack_config, confirm=yes)

    assert asked == [destination]
    assert result.deleted_existing is True
    assert zipfile.is_zipfile(destination)


def test_declined_overwrite_leaves_destination(pack_config: PackConfig, capsys: pytest.CaptureFixture[str]) -> None:
    destination = pack_config.destination_path
    destination.parent.mkdir(parents=True)
    destination.write_bytes(b"keep me")

    builder = PackBuilder(pack_config, confirm=lambda _path: False)
    with pytest.raises(OverwriteDeclinedError) as excinfo:
        builder.run()

    assert excinfo.value.exit_code is ExitCode.OVERWRITE_DECLINED
    assert destination.read_bytes() == b"keep me"
    assert "scpp process terminated" in capsys.readouterr().out


def test_prompt_unavailable_is_reported(pack_config: PackConfig, capsys: pytest.CaptureFixture[str]) -> None:
    destination = pack_config.destination_path
    destination.parent.mkdir(parents=True)
    destination.write_bytes(b"keep me")

    def no_tty(path: Path) -> bool:
        raise PromptUnavailableError(f"cannot ask about {path}")

    with pytest.raises(PromptUnavailableError):
        run_pack(pack_config, confirm=no_tty)
    assert destination.read_bytes() == b"keep me"
    assert "scpp cannot ask about" in capsys.readouterr().out


def test_destination_access_error(tmp_path: Path, site: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    config = PackConfig(entry_path=site, output_name="bundle", extension="zip", destination_dir=blocker)
    with pytest.raises(DestinationAccessError) as excinfo:
        run_pack(config, confirm=_never_asked)
    assert excinfo.value.exit_code is ExitCode.DESTINATION_ACCESS


def test_forced_runs_are_repeatable(pack_config: PackConfig) -> None:
    def contents() -> dict[str, bytes]:
        with zipfile.ZipFile(pack_config.destination_path) as zf:
            return {name: zf.read(name) for name in zf.namelist()}

    run_pack(pack_config, PackOptions(force=True), confirm=_never_asked)
    first = contents()
    run_pack(pack_config, PackOptions(force=True), confirm=_never_asked)
    assert contents() == first


def test_state_sequence_for_fresh_run(pack_config: PackConfig) -> None:
    builder = PackBuilder(pack_config, confirm=_never_asked)
    builder.check_entry()
    assert builder.state is BuildState.ENTRY_CHECKED
    builder.check_destination()
    assert builder.state is BuildState.SKIPPED
    builder.stream()
    assert builder.state is BuildState.CLOSED


def test_unreachable_entry_is_an_access_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    config = PackConfig(
        entry_path=blocker / "child",
        output_name="bundle",
        extension="zip",
        destination_dir=tmp_path / "dist",
    )
    before = _snapshot(tmp_path)
    builder = PackBuilder(config, confirm=_never_asked)

    with pytest.raises(EntryAccessError) as excinfo:
        builder.run()

    assert excinfo.value.exit_code is ExitCode.ENTRY_ACCESS
    assert isinstance(excinfo.value.cause, NotADirectoryError)
    assert builder.state is BuildState.ABORTED
    assert _snapshot(tmp_path) == before
    assert "scpp cannot access entry" in capsys.readouterr().out
