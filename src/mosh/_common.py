import logging

logger = logging.getLogger("mosh")
logger.addHandler(logging.NullHandler())


def warn(string):
    logger.warning(string)


def debug(string):
    logger.debug(string)
