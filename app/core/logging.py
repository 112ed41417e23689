import logging
import sys

from app.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for a process entry point (worker, CLI).

    Library modules only call logging.getLogger(__name__); this is the one
    place handlers are installed.
    """
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True  # Override any handlers installed by Celery or imported libs
    )
