# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Optional but recommended configuration (warnings only).
    Uploads fail at request time without the storage settings.
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY")
    for key in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_BUCKET_NAME"):
        if not getattr(settings, key):
            warnings.append(f"{key} (uploads disabled)")

    return warnings


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Missing required config is fatal in production, a warning elsewhere.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        if settings.ENV == "production":
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        logger.warning(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    if not missing_required:
        logger.info("Configuration validation passed")
