# =========================================================
# SECURITY
#
# Identity boundary for the inventory service:
# - bcrypt password hashes
# - short lived JWT access tokens (sub = user id)
# - FastAPI dependencies resolving the acting user and
#   enforcing the admin role before stock is touched
# =========================================================

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from inventory_api.core.config import settings
from inventory_api.database import get_db
from inventory_api.models.users import User

logger = logging.getLogger("inventory_api")

TOKEN_TYPE = "access"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


# ---------------- PASSWORDS ----------------

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode(), password_hash.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ---------------- TOKENS ----------------

def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    expires_at = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    claims = {
        "sub": str(user.id),
        "is_admin": user.is_admin,
        "type": TOKEN_TYPE,
        "exp": expires_at,
    }

    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if claims.get("type") != TOKEN_TYPE:
        return None

    return claims


# ---------------- DEPENDENCIES ----------------

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    claims = decode_access_token(token)

    if claims is None:
        raise _unauthorized("Invalid or expired token")

    subject = str(claims.get("sub", ""))

    if not subject.isdigit():
        raise _unauthorized("Invalid token payload")

    user = db.get(User, int(subject))

    if user is None:
        raise _unauthorized("User not found")

    return user


def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    # Role comes from the database row, not the token claim
    if not current_user.is_admin:
        logger.warning(f"User {current_user.id} denied admin-only operation")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )

    return current_user
