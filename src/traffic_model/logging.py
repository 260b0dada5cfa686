"""Every module logs below the ``traffic_model`` logger.

A stderr handler is attached to that logger the first time a module asks
for its logger; records still propagate to the root logger.
"""
import logging

ROOT_LOGGER_NAME = 'traffic_model'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def _package_logger() -> logging.Logger:
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.INFO)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    _package_logger()
    return logging.getLogger(name)


def set_global_log_level(level: int) -> None:
    _package_logger().setLevel(level)
