"""
Entry point: ``python -m bistro``.

In production the OpenAPI documents are written before the listener starts.
In development nothing is served from here; run the app under a development
server instead, e.g. ``uvicorn bistro.main:app --reload``.
"""
import logging
import sys

from bistro.core.config import get_settings
from bistro.main import app

logger = logging.getLogger("bistro")


def main() -> int:
    settings = get_settings()

    if not settings.precompute_docs:
        logger.warning(
            "ENVIRONMENT=development: not starting a listener. "
            "Run `uvicorn bistro.main:app --reload` to serve the app."
        )
        return 0

    app.state.publisher.publish(app)

    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
