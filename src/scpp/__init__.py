"""scpp: package a source directory into a zip archive."""

from scpp.builder import BuildState, PackOptions, PackResult, run_pack
from scpp.config import PackConfig, PackSettings, load_settings, resolve_pack_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "BuildState",
    "PackOptions",
    "PackResult",
    "run_pack",
    "PackConfig",
    "PackSettings",
    "load_settings",
    "resolve_pack_config",
]
