"""
Logging setup for the ledger service.

Every module logs through logging.getLogger(__name__), so all
records land under the "accounting_ledger" logger. This module
attaches one handler to that logger tree.
"""

import logging

LOGGER_NAME = "accounting_ledger"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the application logger.

    Safe to call more than once: the handler is only added the
    first time, later calls just adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not any(getattr(h, "_ledger_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._ledger_handler = True
        logger.addHandler(handler)

    return logger
