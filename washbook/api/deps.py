from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from ..config import get_settings
from ..core.clock import Clock, SystemClock
from ..core.security import Actor, decode_token
from ..db.session import get_db
from ..services.notifications import NotificationSender, get_notification_sender

__all__ = [
    "get_db",
    "get_clock",
    "get_notifier",
    "get_current_actor",
    "require_roles",
    "STAFF_ROLES",
    "ALL_ROLES",
]

STAFF_ROLES = ("network_admin", "operator")
ALL_ROLES = ("network_admin", "operator", "driver")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


def get_clock() -> Clock:
    return SystemClock()


def get_notifier() -> NotificationSender:
    return get_notification_sender(get_settings())


def get_current_actor(token: Annotated[str, Depends(oauth2_scheme)]) -> Actor:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )
    try:
        payload = decode_token(token)
    except JWTError as exc:
        raise credentials_exception from exc
    subject = payload.get("sub")
    role = payload.get("role")
    network_id = payload.get("network_id")
    if subject is None or role not in ALL_ROLES or network_id is None:
        raise credentials_exception
    try:
        return Actor(id=str(subject), role=role, network_id=int(network_id))
    except (TypeError, ValueError) as exc:
        raise credentials_exception from exc


def require_roles(*roles: str):
    def dependency(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
        if actor.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return actor

    return dependency
