# logging_config.py
import logging


def setup_logger():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler()],
    )

    chronoid_logger = logging.getLogger("chronoid")
    if chronoid_logger.level == logging.NOTSET:
        chronoid_logger.setLevel(logging.DEBUG)

    return chronoid_logger
