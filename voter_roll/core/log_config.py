import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root logging once for the application process"""
    logging.basicConfig(
        level=log_level.upper(),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    # SQL echo is controlled by the engine, keep its logger from doubling output
    logging.getLogger("sqlalchemy.engine").propagate = False
