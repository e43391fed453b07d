from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.clock import Clock, SystemClock
from app.core.security import decode_token
from app.db.base import SessionLocal
from app.services.events import EventEmitter, build_event_emitter
from app.services.treasury import Treasury, build_treasury

# Tokens are issued by the identity provider; the URL is only advertised in OpenAPI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/token")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(token: str = Depends(oauth2_scheme)) -> str:
    """Get the authenticated principal identifier from the JWT `sub` claim."""
    payload = decode_token(token)
    if payload is None:
        raise _credentials_exception()

    # Validate token type - must be an "access" token
    if payload.get("type") != "access":
        raise _credentials_exception()

    principal = payload.get("sub")
    if not isinstance(principal, str) or not principal:
        raise _credentials_exception()

    return principal


def get_clock() -> Clock:
    return SystemClock()


@lru_cache
def get_treasury() -> Treasury:
    return build_treasury()


@lru_cache
def get_event_emitter() -> EventEmitter:
    return build_event_emitter()
