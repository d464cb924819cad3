# pySinkhorn/logger.py
import logging
import sys
from pathlib import Path

FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def get_logger(name="pySinkhorn", level=logging.INFO, log_file=None):
    logger = logging.getLogger(name)
    if not logger.handlers:  # prevent duplicate handlers
        logger.setLevel(level)
        formatter = logging.Formatter(FORMAT)

        # Console handler
        ch = logging.StreamHandler(sys.stdout)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

        # Optional: file handler
        if log_file is not None:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file)
            fh.setFormatter(formatter)
            logger.addHandler(fh)

    return logger
