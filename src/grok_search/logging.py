"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Iterator

from rich.console import Console
from rich.logging import RichHandler

_command_var: contextvars.ContextVar[str] = contextvars.ContextVar("grok_search_command", default="-")

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class _ContextFilter(logging.Filter):
    """Inject the running command into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.command = _command_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def command_context(command: str) -> Iterator[None]:
    """Temporarily bind the CLI command name for log records."""

    token = _command_var.set(command)
    try:
        yield
    finally:
        _command_var.reset(token)


def configure_logging(level: str = "WARNING") -> None:
    """Configure application logging.

    Log output goes to stderr so it never mixes with answers printed on stdout.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
    )
    handler.addFilter(_ContextFilter())
    handler.setFormatter(logging.Formatter(fmt="cmd=%(command)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)
