import secrets

from shared.config.settings import get_settings


def verify_api_key(provided_key: str) -> bool:
    """Verify an internal API key using constant-time comparison to prevent timing attacks."""
    if not provided_key:
        return False
    return secrets.compare_digest(str(provided_key), str(get_settings().internal_api_key))
