# auth.py
import logging
import secrets
from typing import Optional

from fastapi import Depends, Header

from .config import Settings, get_settings
from .exceptions import AuthorizationFailure

logger = logging.getLogger(__name__)


def require_admin_key(
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Rejects the request unless the X-Api-Key header matches ADMIN_API_KEY.
    An unset ADMIN_API_KEY rejects every request.
    """
    if not settings.admin_api_key:
        logger.error("ADMIN_API_KEY is not configured; refusing admin request")
        raise AuthorizationFailure()

    if not x_api_key or not secrets.compare_digest(x_api_key.encode(), settings.admin_api_key.encode()):
        logger.warning("Rejected admin request with missing or invalid API key")
        raise AuthorizationFailure()
