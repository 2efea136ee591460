"""Logging setup for the DAO generator.

Every module obtains its logger through :func:`get_logger`; the CLI calls
:func:`setup_logging` once to attach a rich handler to the package logger.
"""

import logging

from rich.logging import RichHandler

PACKAGE_LOGGER = "dao_generator"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package logger."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: int | str = logging.WARNING, use_rich: bool = True) -> None:
    """Configure the package logger.

    Args:
        level: Logging level name or number.
        use_rich: Use a rich console handler instead of a plain stream handler.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if _configured:
        return

    if use_rich:
        handler: logging.Handler = RichHandler(
            rich_tracebacks=True, show_path=False, markup=False
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    logger.addHandler(handler)
    logger.propagate = False
    _configured = True
