import logging, sys

from socialdesk.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"

def setup_logging(level: str | None = None):
    """Root stdout handler for the service. Safe to call more than once."""
    root = logging.getLogger()
    if root.handlers:  # don’t double add during reload
        return
    level = (level or LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    # requests/urllib3 log every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
