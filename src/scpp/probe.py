"""Filesystem existence checks classified into OK / not-found / other-error."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class ProbeStatus(str, Enum):
    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    OTHER_ERROR = "OTHER_ERROR"


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a single existence check."""

    path: Path
    status: ProbeStatus
    error: OSError | None = None

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.OK


def probe(path: Path) -> ProbeResult:
    """Check that *path* exists and is reachable."""

    try:
        os.stat(path)
    except FileNotFoundError as exc:
        LOGGER.debug("probe.not_found path=%s", path)
        return ProbeResult(path=path, status=ProbeStatus.NOT_FOUND, error=exc)
    except OSError as exc:
        LOGGER.debug("probe.other_error path=%s error=%s", path, exc)
        return ProbeResult(path=path, status=ProbeStatus.OTHER_ERROR, error=exc)
    return ProbeResult(path=path, status=ProbeStatus.OK)
