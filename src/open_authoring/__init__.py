"""Open authoring: gate edit mode behind a signed-in user and a valid fork.

Edits are committed to a fork of the source repository. Before edit mode is
entered, the gate checks that a user is signed in and that the fork carries
the head branch, and walks the user through fixing whichever is missing.
"""

import logging
import sys

import structlog

# Suppress httpx HTTP request logs
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


def configure_logging(level: str = "WARNING") -> None:
    """Configure structlog to print to stderr at the given level."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), pad_event=30),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


from open_authoring.config import Settings, settings  # noqa: E402 - logging helpers first

configure_logging(settings.log_level)

from open_authoring.gate import AuthorizationGate  # noqa: E402
from open_authoring.status import AuthorizationStatus, GateState, next_state  # noqa: E402

__version__ = "0.1.0"
__all__ = [
    "AuthorizationGate",
    "AuthorizationStatus",
    "GateState",
    "Settings",
    "__version__",
    "configure_logging",
    "next_state",
]
