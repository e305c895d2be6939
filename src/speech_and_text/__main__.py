import logging
import sys

import uvicorn

from .app import create_app
from .settings import SettingsError, load_settings
from .utils import setup_logger

logger = logging.getLogger(__name__)


def main() -> None:
    try:
        settings = load_settings()
    except SettingsError as exc:
        setup_logger()
        logger.error("Error: %s", exc)
        sys.exit(1)

    setup_logger(settings.server.log_level)
    logger.info("PROJECT_ID=%s", settings.recognition.project_id)
    logger.info("PORT=%s", settings.server.port)
    logger.info("Credential mode: %s", settings.recognition.credential_mode.value)

    app = create_app(settings)
    logger.info("Listening on port %s", settings.server.port)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_level=settings.server.log_level.lower())


if __name__ == "__main__":
    main()
