"""Log output setup for the command line driver.

Library modules only create module loggers; handlers are attached here.
"""
import logging

LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"
PACKAGE_LOGGER = "fhir_pager"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a stream handler to the package logger (once) and set its level."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
