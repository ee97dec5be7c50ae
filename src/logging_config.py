"""Shared logging configuration for the systemic risk model.

Call ``configure_logging()`` once from a CLI entry point. Root handlers are
installed only on the first call; later calls (or hosts that configured
logging themselves) just adjust the level of the ``src.riskmodel`` loggers.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "riskmodel.log"
PACKAGE_LOGGER = "src.riskmodel"


def configure_logging(level: int = logging.INFO, log_dir: str = "logs") -> None:
    """Configure root logger with console + optional file handler."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)

    root = logging.getLogger()
    if root.handlers:
        return

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    try:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(os.path.join(log_dir, LOG_FILE), mode="a")
        fh.setFormatter(formatter)
        root.addHandler(fh)
    except OSError as e:
        root.warning(f"File logging disabled: {e}")

    root.setLevel(level)
