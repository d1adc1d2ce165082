"""Process logging for the webhook service.

Every request already leaves a row in ``webhook_logs``; the process log is
the side channel for what that row cannot hold: resume upload failures,
audit writes that did not land, and the pipeline's progress events.  Those
events are snake_case names with their details passed as ``extra``, so the
formatter appends the extra fields as ``key=value`` pairs after the message.
"""

import logging
import sys

from app.core.config import settings

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class EventFormatter(logging.Formatter):
    """``time | level | logger | event key=value ...``"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = " ".join(
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if not fields:
            return line
        # Keep tracebacks below the event line
        head, sep, tail = line.partition("\n")
        return f"{head} {fields}{sep}{tail}"


def setup_logging() -> None:
    """Route all service logging to stdout at ``settings.LOG_LEVEL``.

    Safe to call more than once: the root handler is replaced, not stacked.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        EventFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # The Supabase client talks HTTP/2 through httpx; its per-request chatter
    # would drown the webhook events.
    for noisy in ("httpx", "httpcore", "hpack", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
