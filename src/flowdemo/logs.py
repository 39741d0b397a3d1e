import logging
import sys


def setup_logging(level: str = "WARNING") -> None:
    logger = logging.getLogger("flowdemo")
    if logger.handlers:  # don't double add when the CLI is invoked repeatedly in-process
        logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
        return
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    h = logging.StreamHandler(sys.stderr)
    fmt = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s :: %(message)s"
    )
    h.setFormatter(fmt)
    logger.addHandler(h)
