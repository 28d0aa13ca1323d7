from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ticketbari.core.config import Settings
from ticketbari.core.errors import ForbiddenError, UnauthenticatedError
from ticketbari.core.security import decode_access_token
from ticketbari.db.session import get_db
from ticketbari.models.user import User
from ticketbari.services.payment_gateway import PaymentGateway

# auto_error=False so a missing header surfaces as our 401, not the framework's
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/jwt", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


def get_current_email(
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> str:
    """Return the email claim of a valid bearer token."""
    if not token:
        raise UnauthenticatedError()
    try:
        payload = decode_access_token(settings, token)
    except jwt.PyJWTError:
        raise UnauthenticatedError()
    email = payload.get("email") or payload.get("sub")
    if not email:
        raise UnauthenticatedError()
    return str(email).lower()


def _require_role(role: str):
    def checker(email: str = Depends(get_current_email), db: Session = Depends(get_db)) -> User:
        user = db.query(User).filter(User.email == email).first()
        if not user or user.role != role:
            raise ForbiddenError()
        return user
    return checker


require_admin = _require_role("admin")
require_vendor = _require_role("vendor")


def ensure_self(path_email: str, caller_email: str) -> str:
    """Path-scoped private data is only readable by its owner."""
    if path_email.lower() != caller_email:
        raise ForbiddenError()
    return caller_email
