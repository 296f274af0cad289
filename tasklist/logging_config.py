"""Logging setup shared by the server and maintenance scripts."""

import logging


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for the process.

    Args:
        level: Logging level name or number (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("tasklist").setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
