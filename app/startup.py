"""
Startup validation utilities.
"""

from typing import Optional
from app.config import Settings, get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


def validate_startup(settings: Optional[Settings] = None) -> list:
    """Log configuration problems; none of them stop the application."""
    settings = settings or get_settings()
    issues = settings.validate_configuration()

    if issues:
        logger.warning(f"Configuration warnings: {issues}")
    else:
        logger.info("✅ Configuration validation passed")

    configured = [name for name, ok in settings.configured_providers.items() if ok]
    logger.info(
        f"AI providers: primary={settings.AI_PRIMARY_PROVIDER}, "
        f"fallback={settings.AI_FALLBACK_PROVIDER or 'none'}, "
        f"configured={configured or 'none'}"
    )
    return issues
