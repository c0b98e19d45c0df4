"""
Centralized logging utilities for the voxform package.

Usage:
    from voxform.utils.logging import get_logger
    logger = get_logger(__name__)

Environment variables:
    VOXFORM_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
"""

from __future__ import annotations

import logging
import os
from typing import Optional


_ROOT_NAME = "voxform"

_LEVEL_NAMES = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _resolve_level(env_value: Optional[str]) -> int:
    if not env_value:
        return logging.INFO
    return _LEVEL_NAMES.get(env_value.strip().upper(), logging.INFO)


def _configure_root_once() -> None:
    root = logging.getLogger(_ROOT_NAME)
    if root.handlers:
        return
    level = _resolve_level(os.getenv("VOXFORM_LOG_LEVEL"))
    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = logging.Formatter(
        fmt="%(levelname)s | %(name)s | %(message)s",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)
    # Keep package messages out of the global root logger
    root.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package root logger.

    Module names already inside the package (``voxform.grid.selection``) are
    used as-is; anything else becomes a child of ``voxform``.
    """
    _configure_root_once()
    pkg_logger = logging.getLogger(_ROOT_NAME)
    if not name:
        return pkg_logger
    if name == _ROOT_NAME or name.startswith(_ROOT_NAME + "."):
        return logging.getLogger(name)
    return pkg_logger.getChild(name)
