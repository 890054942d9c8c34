"""Rich-handler logging preset."""
import logging
from typing import Optional
from rich.logging import RichHandler
from .app_config import settings

def resolve_level(document_level: Optional[str] = None) -> int:
    name = (settings.LOG_LEVEL or document_level or settings.DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO

def configure(document_level: Optional[str] = None):
    logging.basicConfig(
        level=resolve_level(document_level),
        format="%(asctime)s │ %(name)-24s │ %(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
        force=True,
    )
