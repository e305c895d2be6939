import logging

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(level: str = "INFO", log_format: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Configures root logging for the service process.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=log_format)
    return logging.getLogger("speech_and_text")
