import logging
import sys


def setup_logging(level="INFO", log_format=None):
    """Attach a single stdout handler to the package logger."""
    logger = logging.getLogger("campus_connect")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # create_app may run several times in one process (tests)
    if not any(getattr(h, "_campus_connect", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(log_format or "%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        handler._campus_connect = True
        logger.addHandler(handler)

    logger.propagate = False
    return logger
