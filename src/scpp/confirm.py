"""Interactive overwrite confirmation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import typer

from scpp.errors import PromptUnavailableError

LOGGER = logging.getLogger(__name__)

Prompt = Callable[..., bool]


def confirm_overwrite(path: Path, prompt: Prompt = typer.confirm) -> bool:
    """Ask whether an existing destination may be replaced. Defaults to yes.

    Raises PromptUnavailableError when no answer can be read, instead of
    treating the missing answer as a decision.
    """

    try:
        answer = prompt(f"{path} already exists. Overwrite it?", default=True)
    except (EOFError, typer.Abort) as exc:
        LOGGER.warning("confirm.prompt_unavailable path=%s", path)
        raise PromptUnavailableError(
            f"cannot ask whether to overwrite {path}; rerun with -f to force",
            cause=exc,
        ) from exc
    LOGGER.info("confirm.answer path=%s overwrite=%s", path, answer)
    return bool(answer)
