"""Colored, prefixed status lines written to stdout."""

from __future__ import annotations

import typer

PREFIX = "scpp "


def format_message(*messages: object) -> str:
    """Join message fragments with no separator and prepend the prefix."""

    return PREFIX + "".join(str(message) for message in messages)


def _report(color: str, messages: tuple[object, ...]) -> None:
    typer.secho(format_message(*messages), fg=color)


def tips(*messages: object) -> None:
    _report(typer.colors.CYAN, messages)


def primary(*messages: object) -> None:
    _report(typer.colors.BLUE, messages)


def warning(*messages: object) -> None:
    _report(typer.colors.YELLOW, messages)


def success(*messages: object) -> None:
    _report(typer.colors.GREEN, messages)


def error(*messages: object) -> None:
    _report(typer.colors.RED, messages)
