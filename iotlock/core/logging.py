import logging
import sys

LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging to standard output once per process."""
    root = logging.getLogger()
    if not any(getattr(handler, "_iotlock", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._iotlock = True
        root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
