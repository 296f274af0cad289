"""Run the API server: ``python -m tasklist``."""

import logging

import uvicorn

from tasklist.config import get_settings
from tasklist.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Server listening on port %s", settings.PORT)
    uvicorn.run(
        "tasklist.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
