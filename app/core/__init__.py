"""Core: config, exception handlers, rate limiter and application lifespan.

Single place for settings; import get_settings() rather than a module-level instance.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
