import logging

from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_api.database import get_db
from inventory_api.models.users import User
from inventory_api.schemas.user import TokenResponse, UserCreate, UserResponse
from inventory_api.core.security import (
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from inventory_api.core.rate_limiter import limiter

router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = logging.getLogger("inventory_api")

COMMON_PASSWORDS = {
    "password",
    "password123",
    "12345678",
    "qwerty123",
    "admin123",
}


# bcrypt refuses anything longer
BCRYPT_MAX_BYTES = 72


def _reject_weak_password(password: str):
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        reason = f"Password cannot be longer than {BCRYPT_MAX_BYTES} bytes."
    elif password.lower() in COMMON_PASSWORDS:
        reason = "Password is too common. Please choose a stronger password."
    elif password.isdigit():
        reason = "Password cannot be numbers only."
    else:
        return

    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=reason)


# ---------------- SIGNUP ----------------
# New accounts are never admins; see /internal/promote-admin.
@router.post("/signup", status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
def signup(request: Request, user_data: UserCreate, db: Session = Depends(get_db)):
    _reject_weak_password(user_data.password)

    if db.query(User.id).filter(User.email == user_data.email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )

    user = User(email=user_data.email, password_hash=hash_password(user_data.password))

    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Signup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to create account",
        )

    logger.info(f"User {user.id} signed up")

    return {"message": "Account created successfully. Please login."}


# ---------------- LOGIN ----------------
@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.email == form_data.username).first()

    if user is None or not verify_password(form_data.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return TokenResponse(access_token=create_access_token(user))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
