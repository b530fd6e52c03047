"""Typer CLI entrypoint for scpp."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

import typer
import yaml

from scpp import __version__
from scpp.builder import PackOptions, run_pack
from scpp.config import load_settings, resolve_pack_config
from scpp.errors import ScppError
from scpp.logging_utils import configure_logging

app = typer.Typer(
    add_completion=False,
    help="Package a source directory into a zip archive.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@dataclass(frozen=True, slots=True)
class CliFlags:
    """Parsed command-line flags. Unrecognized arguments are kept in `extra`."""

    entry: str | None = None
    output: str | None = None
    dest: str | None = None
    force: bool = False
    extra: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"scpp {__version__}")
        raise typer.Exit()


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def main(
    ctx: typer.Context,
    entry: str | None = typer.Option(None, "-e", "--entry", help="Source directory to archive."),
    output: str | None = typer.Option(None, "-o", "--output", help="Archive base name."),
    dest: str | None = typer.Option(None, "--dest", help="Destination directory override."),
    force: bool = typer.Option(False, "-f", "--force", help="Overwrite an existing archive without asking."),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="Optional settings YAML path.",
        exists=False,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    show_config: bool = typer.Option(False, "--show-config", help="Print the effective settings and exit."),
    verbose: bool = typer.Option(False, "--verbose", help="Log progress at INFO level."),
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
) -> None:
    """Zip the configured entry directory into the destination archive."""

    settings = load_settings(config_file=config_file)
    if show_config:
        typer.echo(yaml.safe_dump(settings.as_dict(), sort_keys=False))
        return

    logger = configure_logging(logging.INFO if verbose else settings.log_level, settings.log_file)
    flags = CliFlags(entry=entry, output=output, dest=dest, force=force, extra=tuple(ctx.args))
    if flags.extra:
        logger.info("cli.ignored_args args=%s", " ".join(flags.extra))

    config = resolve_pack_config(settings, flags)
    logger.info(
        "cli.config entry=%s destination=%s force=%s",
        config.entry_path,
        config.destination_path,
        flags.force,
    )
    try:
        run_pack(config, PackOptions(force=flags.force), logger=logger)
    except ScppError as exc:
        raise typer.Exit(code=int(exc.exit_code)) from exc
