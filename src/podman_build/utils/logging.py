import logging
import sys

import structlog

# Using this module keeps the logging configuration consistent between the CLI and library users.


def configure_logging_early():
    """Configures standard Python logging module.

    Log lines of modules using standard Python logging (logging.getLogger()) are
    dropped unless the module gets configured. Logs go to stderr so that stdout
    only carries the printed command.
    """
    logging.basicConfig(
        level=logging.WARNING,
        # This log message format is a bit similar to the default structlog format.
        format="%(asctime)s [%(levelname)s] %(message)s logger=%(name)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def configure_development_mode_logging(debug: bool = False):
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.dev.ConsoleRenderer(),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if debug else logging.WARNING
        ),
        logger_factory=_stderr_logger_factory,
    )


def _stderr_logger_factory(*args):
    # Resolved per logger so that a redirected sys.stderr is picked up.
    return structlog.PrintLogger(file=sys.stderr)
