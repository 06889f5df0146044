from __future__ import annotations

import logging
from typing import Optional, TextIO

LOGGER_NAMESPACE = "lintbridge"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Library default: stay silent unless the host configures logging.
logging.getLogger(LOGGER_NAMESPACE).addHandler(logging.NullHandler())


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI flags to a logging level.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING
    """
    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Send lintbridge log records to stderr (or ``stream``) for CLI use.

    Only the ``lintbridge`` logger is touched, so an embedding host keeps
    control of the root logger. Calling this again replaces the handler.
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        if getattr(handler, "_lintbridge_cli", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._lintbridge_cli = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else LOGGER_NAMESPACE)
