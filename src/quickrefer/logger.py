import logging
import sys

import structlog

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.NOTSET),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(),
    ],
)

# Level and handlers come from the root logger
_std_logger = logging.getLogger("quickrefer")
_std_logger.setLevel(logging.NOTSET)
_std_logger.propagate = True

logger: structlog.BoundLogger = structlog.get_logger("quickrefer")


def setup_logging(debug: bool) -> None:
    """
    Route quickrefer log records to stderr, at DEBUG when *debug* is set and
    INFO otherwise. Existing root handlers are reused.
    """
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        for handler in root.handlers:
            handler.setLevel(level)
        return

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    # Lines arrive fully rendered by ConsoleRenderer
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(stderr_handler)
