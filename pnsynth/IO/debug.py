from __future__ import annotations

import logging
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_level: str = "INFO",
    log_filename: Optional[str] = None,
    name: str = "pnsynth",
) -> logging.Logger:
    """
    Configure and return the package logger.

    A stream handler is always attached; a file handler is added when
    ``log_filename`` is given. Repeated calls only update the level and
    never stack additional handlers on the same logger.

    :param log_level: Name of the logging level (``"DEBUG"``, ``"INFO"``, ...).
    :type log_level: str
    :param log_filename: Optional path of a log file.
    :type log_filename: str or None
    :param name: Logger name, defaults to the package logger.
    :type name: str
    :returns: The configured logger.
    :rtype: logging.Logger
    :raises ValueError: If ``log_level`` is not a known level name.

    .. code-block:: python

        from pnsynth.IO.debug import setup_logging

        logger = setup_logging("DEBUG")
        logger.debug("separation engine started")
    """
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")

    logger = logging.getLogger(name)
    logger.setLevel(level)

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    if not any(getattr(h, "_pnsynth_stream", False) for h in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        stream._pnsynth_stream = True  # type: ignore[attr-defined]
        logger.addHandler(stream)

    if log_filename is not None:
        known = {
            getattr(h, "baseFilename", None)
            for h in logger.handlers
            if isinstance(h, logging.FileHandler)
        }
        fh = logging.FileHandler(log_filename)
        if fh.baseFilename in known:
            fh.close()
        else:
            fh.setFormatter(formatter)
            logger.addHandler(fh)

    return logger
