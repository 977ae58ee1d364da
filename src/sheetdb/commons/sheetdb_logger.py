"""SheetDB logger module."""

import logging

from sheetdb.configs import (
    PROJECT_NAME,
    LOG_FILE_PATH,
    LOG_FILE_LEVEL,
    LOG_STREAM_LEVEL,
)


class SheetDBLogger(object):
    """Process-wide logger.

    Calling ``SheetDBLogger()`` always returns the same configured
    :class:`logging.Logger`, so components can keep a reference as
    ``self.logger = SheetDBLogger()``.
    """

    _instance = None

    @classmethod
    def _build_logger(cls):
        logger = logging.getLogger(PROJECT_NAME)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False

        log_format = f"[%(name)s][%(levelname)s][%(asctime)s][{PROJECT_NAME}][%(module)s:%(lineno)d] %(message)s"
        formatter = logging.Formatter(log_format)

        if LOG_STREAM_LEVEL != "DISABLE":
            stream_handler = logging.StreamHandler()
            stream_handler.setLevel(getattr(logging, LOG_STREAM_LEVEL, logging.INFO))
            stream_handler.setFormatter(formatter)
            logger.addHandler(stream_handler)

        if LOG_FILE_LEVEL != "DISABLE":
            file_handler = logging.FileHandler(LOG_FILE_PATH, delay=True, mode="a+")
            file_handler.setLevel(getattr(logging, LOG_FILE_LEVEL, logging.DEBUG))
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        if not logger.handlers:
            logger.addHandler(logging.NullHandler())

        return logger

    def __new__(cls, *args, **kwargs) -> logging.Logger:
        """Return the shared logger, building it on first use."""
        if cls._instance is None:
            cls._instance = super(SheetDBLogger, cls).__new__(cls)
            cls._instance._logger = SheetDBLogger._build_logger()
        return cls._instance._logger
