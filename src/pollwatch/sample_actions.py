"""Example action callbacks that can be referenced from configuration."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict

from .actions import ChangeContext

logger = logging.getLogger(__name__)


def log_change(context: ChangeContext, options: Dict[str, Any]) -> None:
    """Log that the watched file changed."""

    level_name = str(options.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    message = options.get("message", "File changed")

    modified_at = datetime.fromtimestamp(context.modification_time / 1e9)
    logger.log(
        level,
        "%s: %s (modified %s, poll #%s)",
        message,
        context.path,
        modified_at.isoformat(timespec="milliseconds"),
        context.poll_count,
    )


def log_contents_summary(context: ChangeContext, options: Dict[str, Any]) -> None:
    """Re-read the file as text and log its size, the way a reload hook would."""

    level_name = str(options.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    encoding = str(options.get("encoding", "utf-8"))

    try:
        text = context.path.read_text(encoding=encoding)
    except FileNotFoundError:
        # Removed again between the poll and this callback.
        logger.warning("%s vanished before it could be reloaded", context.path)
        return
    except UnicodeDecodeError:
        logger.error("%s is not valid %s text", context.path, encoding)
        return

    logger.log(
        level,
        "Reloaded %s: %s lines, %s characters",
        context.path,
        len(text.splitlines()),
        len(text),
    )
