"""Dataset mutation workflow for imaging mass-spectrometry submissions."""

# ruff: noqa: E402  # imports not at top-level

# -------------------
# package metadata

import importlib.metadata

LIB_NAME: str = "smdataset"

# disables the loguru logger until the host application opts in
from loguru import logger as log

log.disable(LIB_NAME)

__version__ = importlib.metadata.version(LIB_NAME)

# -------------------
# package imports

from smdataset import models
from smdataset.client import Client

# -------------------
# package level functions


def enable_logging() -> None:
    """Enables loguru logger."""
    log.enable(LIB_NAME)
    log.info(f"Enabled logging for '{LIB_NAME}'")


# -------------------
# package exports

__all__ = [
    "Client",
    "__version__",
    "enable_logging",
    "models",
]
