import logging

from duelytics.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if any(getattr(h, "_duelytics", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._duelytics = True
    root.addHandler(handler)

    # statement echo only when asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
