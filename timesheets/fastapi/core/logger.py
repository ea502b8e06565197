import logging

from timesheets.fastapi.core.init_settings import global_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure root logging once for the whole service."""
    logging.basicConfig(
        level=(level or global_settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT
    )
    # SQL echo is far too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
