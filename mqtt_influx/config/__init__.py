from .app_config import settings
from .logging_config import configure

__all__ = ["settings", "configure"]
