from __future__ import annotations

import pytest

from scpp.errors import (
    ConfigLoadError,
    DestinationAccessError,
    EntryAccessError,
    EntryNotFoundError,
    ExitCode,
    OverwriteDeclinedError,
    PromptUnavailableError,
    ScppError,
)


@pytest.mark.parametrize(
    "error_cls",
    [
        ScppError,
        ConfigLoadError,
        EntryNotFoundError,
        EntryAccessError,
        DestinationAccessError,
        OverwriteDeclinedError,
        PromptUnavailableError,
    ],
)
def test_handled_failures_never_exit_with_success(error_cls: type[ScppError]) -> None:
    assert error_cls("boom").exit_code != ExitCode.OK


def test_generic_failure_code() -> None:
    assert ScppError("boom").exit_code is ExitCode.FAILURE
    assert ConfigLoadError("missing").exit_code == 1
