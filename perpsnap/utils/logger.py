import itertools
import logging
import os
import sys
from typing import Optional

LOGGER_NAME = "perpsnap"

_SEQ = itertools.count(1)


class _SeqFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # Monotonic sequence number so interleaved fetch-thread logs can be ordered.
        record.seq = next(_SEQ)  # type: ignore[attr-defined]
        return True


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def setup_logger(level: Optional[str] = None) -> logging.Logger:
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False  # avoid double handlers / root propagation

    # Reset handlers so repeated setup calls don't stack them.
    for h in list(logger.handlers):
        logger.removeHandler(h)

    # stderr keeps stdout free for the report itself
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(_SeqFilter())
    formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)s | %(name)s | %(seq)d | %(threadName)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
