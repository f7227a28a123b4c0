"""
Logging utilities for proxitrack.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional

ROOT_LOGGER_NAME = 'proxitrack'
ENV_LOG_LEVEL = 'PROXITRACK_LOG_LEVEL'

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def parse_level(value: str) -> Optional[int]:
    """
    Resolve a level name ('debug', 'WARNING') or number ('10').

    Returns None when the value is not a known level.
    """
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value)
    return level if isinstance(level, int) else None


def configure_root(
    name: str = ROOT_LOGGER_NAME,
    environ: Optional[Mapping[str, str]] = None,
) -> logging.Logger:
    """
    Attach the shared stream handler to the named logger once.

    The level comes from PROXITRACK_LOG_LEVEL; an unrecognized value falls
    back to INFO with a warning.
    """
    root = logging.getLogger(name)
    if root.handlers:
        return root

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(handler)

    env = os.environ if environ is None else environ
    raw = env.get(ENV_LOG_LEVEL)
    level = parse_level(raw) if raw else logging.INFO
    if level is None:
        root.setLevel(logging.INFO)
        root.warning("Unknown %s value %r, using INFO", ENV_LOG_LEVEL, raw)
    else:
        root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the proxitrack hierarchy.

    The shared stream handler is attached to the 'proxitrack' root logger
    once; child loggers propagate to it.

    Args:
        name: Dotted logger name, e.g. 'proxitrack.registry'.
    """
    configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    return logging.getLogger(name)
