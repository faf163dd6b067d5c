"""Utility functions for the dataset mutation workflow."""

import logging
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any

from loguru import logger as log

logger = logging.getLogger(__name__)


def log_user(msg: str, depth: int = 1) -> None:
    """Alias to log_user_info. Logs a message visible to callers."""
    log_user_info(msg, depth=depth + 1)


def log_user_info(msg: str, depth: int = 1) -> None:
    """Logs an informational message to the user."""
    log.opt(depth=depth).info(msg)
    logger.info(msg)


def log_user_warning(msg: str, depth: int = 1) -> None:
    """Logs a warning message to the user."""
    log.opt(depth=depth).warning(msg)
    logger.warning(msg)


def log_user_error(msg: str, depth: int = 1) -> None:
    """Logs an error message to the user."""
    log.opt(depth=depth).error(msg)
    logger.error(msg)


def get_in(tree: Mapping[str, Any] | None, keys: Sequence[str]) -> Any:
    """Reads a nested value, returning None when any level is missing."""
    node: Any = tree
    for key in keys:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def set_in(tree: dict[str, Any], keys: Sequence[str], value: Any) -> None:
    """Writes a nested value, creating (or replacing non-dict) levels as needed."""
    node = tree
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


def resolve_image_url(image_url: str, base_url: str) -> str:
    """Prefixes host-relative image URLs with the image storage base URL.

    Web clients send paths such as `/optical_images/abc` without host and port,
    so the engine is pointed at the internal image storage instead.
    """
    if image_url.startswith("/"):
        return base_url.rstrip("/") + image_url
    return image_url
