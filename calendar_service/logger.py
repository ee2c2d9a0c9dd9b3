import logging

from calendar_service.settings import settings


logging_formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s")

logging_handler = logging.StreamHandler()
logging_handler.setFormatter(logging_formatter)


def get_logger(name: str) -> logging.Logger:
    logger: logging.Logger = logging.getLogger(name)
    if logging_handler not in logger.handlers:
        logger.addHandler(logging_handler)
    logger.setLevel(logging.getLevelName(settings.log_level))
    return logger
