"""Shared logging configuration for brief-analysis.

Call ``configure_logging()`` once at any CLI entry point. It is idempotent:
if the root logger already has handlers, it does nothing.
"""
from __future__ import annotations

import logging
from typing import Union

from rich.logging import RichHandler


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    handler = RichHandler(show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    root.addHandler(handler)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
