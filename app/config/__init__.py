"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, template limits, feed sizes, logging format
  - Loaded from .env file via pydantic-settings
"""
from app.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
