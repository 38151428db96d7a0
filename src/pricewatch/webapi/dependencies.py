"""Shared FastAPI dependencies."""

from typing import Generator

from fastapi import Header, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.logging import get_logger
from ..config.settings import get_settings
from ..ormdb.repositories import PriceAlertRepository

logger = get_logger(__name__)

# Security scheme for Bearer token authentication
security = HTTPBearer()


def verify_auth_token(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """
    Verify the service authentication token.

    Args:
        credentials: The HTTP authorization credentials

    Returns:
        The token if valid

    Raises:
        HTTPException: If token is invalid or not configured
    """
    expected_token = get_settings().endpoint_auth_token
    if not expected_token:
        logger.error("Endpoint auth token not configured")
        raise HTTPException(
            status_code=500, detail="ENDPOINT_AUTH_TOKEN not configured"
        )

    if credentials.credentials != expected_token:
        logger.warning(
            "Invalid authentication attempt",
            provided_token_length=len(credentials.credentials),
        )
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    return credentials.credentials


def get_owner_id(x_owner_id: str = Header(..., min_length=1)) -> str:
    """Identity of the calling user, forwarded by the front end."""
    owner_id = x_owner_id.strip()
    if not owner_id:
        raise HTTPException(status_code=400, detail="X-Owner-Id header is empty")
    return owner_id


def get_alert_repository() -> Generator[PriceAlertRepository, None, None]:
    """Repository scoped to one request."""
    with PriceAlertRepository() as repo:
        yield repo
