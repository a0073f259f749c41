import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException, Request, Response
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt

import config

logger = logging.getLogger("eats_exchange.auth")

cookie_scheme = APIKeyCookie(name=config.TOKEN_COOKIE_NAME, auto_error=False)


# Token helpers

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=config.ACCESS_TOKEN_EXPIRE_HOURS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Return the token's claims, raising JWTError on a bad signature or expiry."""
    return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])


def set_token_cookie(response: Response, token: str):
    response.set_cookie(
        config.TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=True,
        samesite="none",
    )


def clear_token_cookie(response: Response):
    # Stateless: a copy of the token stays valid until it expires
    response.delete_cookie(
        config.TOKEN_COOKIE_NAME,
        httponly=True,
        secure=True,
        samesite="none",
    )


# Guards

def verify_token(request: Request, token: Optional[str] = Depends(cookie_scheme)) -> Dict[str, Any]:
    credentials_exception = HTTPException(status_code=401, detail="Not authorized")
    if not token:
        logger.warning("No credential cookie on %s %s", request.method, request.url.path)
        raise credentials_exception
    try:
        claims = decode_access_token(token)
    except JWTError as exc:
        logger.warning("Rejected credential on %s %s: %s", request.method, request.url.path, exc)
        raise credentials_exception
    logger.debug("Decoded claims %s", claims)
    request.state.user = claims
    return claims


def require_owner(user: Dict[str, Any], email: Optional[str]):
    """Only let a caller read records filed under their own email."""
    if not email:
        raise HTTPException(status_code=403, detail="Email query parameter is required")
    if user.get("email") != email:
        logger.warning("Ownership check failed: %s asked for %s", user.get("email"), email)
        raise HTTPException(status_code=403, detail="Forbidden access")


def policy_guard(enabled: Callable[[], bool]):
    """Guard for a route whose auth requirement is a configuration switch."""

    def guard(request: Request, token: Optional[str] = Depends(cookie_scheme)) -> Optional[Dict[str, Any]]:
        if not enabled():
            return None
        return verify_token(request, token)

    return guard
