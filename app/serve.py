"""
Run the API server. From the project root:

  python -m app.serve

Listens on 0.0.0.0:$PORT (default 8000).
"""

import logging
import sys

import uvicorn

from app.core.config import get_settings


def main() -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    logging.getLogger(__name__).info(
        "Starting API server", extra={"port": settings.PORT, "env": settings.APP_ENV}
    )
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.APP_ENV == "dev" and settings.DEBUG,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
