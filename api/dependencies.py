# api/dependencies.py
import hmac
import logging
import math
from typing import Optional

from fastapi import HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.sa.database import get_database
from core.services.lending_service import LendingService
from core.settings import settings
from core.utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

borrow_rate_limiter = RateLimiter(
    max_requests=settings.borrow_rate_limit,
    window_seconds=settings.borrow_rate_window,
)


def get_lending_service() -> LendingService:
    return LendingService(get_database())


def require_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> None:
    """Reject requests without the configured `Authorization: Bearer <token>`."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - No Bearer Token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    expected = settings.api_token
    if not expected:
        logger.warning("LIBRARY_API_TOKEN is not set, rejecting authenticated request")
    if not expected or not hmac.compare_digest(credentials.credentials.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - Invalid Token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def throttle_borrow(request: Request) -> None:
    key = request.client.host if request.client else "anonymous"
    if not borrow_rate_limiter.allow(key):
        retry_after = math.ceil(borrow_rate_limiter.retry_after(key))
        logger.warning(f"Borrow rate limit exceeded for {key}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too Many Requests",
            headers={"Retry-After": str(retry_after)},
        )
