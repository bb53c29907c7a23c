"""Logging setup for the CLI. The library itself never installs handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "filterrules-cli"


@dataclass(frozen=True, slots=True)
class PreviousLoggingState:
    level: int
    handlers: list[logging.Handler]


def _level_for_verbosity(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int) -> PreviousLoggingState:
    """
    Route log records to stderr through rich.

    -v enables INFO, -vv enables DEBUG (including expressions that failed to
    evaluate and were treated as non-matching).
    """
    root = logging.getLogger()
    previous = PreviousLoggingState(level=root.level, handlers=list(root.handlers))

    handler = RichHandler(
        console=Console(stderr=True, force_terminal=False),
        show_time=False,
        show_path=verbosity >= 2,
        rich_tracebacks=True,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(_level_for_verbosity(verbosity))

    root.handlers = [h for h in root.handlers if h.get_name() != _HANDLER_NAME]
    root.addHandler(handler)
    root.setLevel(_level_for_verbosity(verbosity))
    return previous


def restore_logging(previous: PreviousLoggingState) -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.close()
    root.handlers = list(previous.handlers)
    root.setLevel(previous.level)
