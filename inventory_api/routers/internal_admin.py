# =========================================================
# INTERNAL ADMIN BOOTSTRAP
# Grants the admin role (stock changes, ledger, alerts).
# Guarded by INTERNAL_ADMIN_SECRET sent in a header.
# =========================================================

import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from inventory_api.core.config import settings
from inventory_api.database import get_db
from inventory_api.models.users import User

router = APIRouter(prefix="/internal", tags=["Internal"])

logger = logging.getLogger("inventory_api")


class AdminPromotion(BaseModel):
    email: EmailStr


def _verify_internal_secret(secret: str | None):
    if not secret or not hmac.compare_digest(secret, settings.INTERNAL_ADMIN_SECRET):
        logger.warning("Invalid internal admin secret")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")


@router.post("/promote-admin")
def promote_admin(
    promotion: AdminPromotion,
    x_internal_secret: str | None = Header(None),
    db: Session = Depends(get_db),
):
    _verify_internal_secret(x_internal_secret)

    user = db.query(User).filter(User.email == promotion.email).first()

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if not user.is_admin:
        user.is_admin = True
        db.commit()
        logger.info(f"User {user.id} promoted to admin")

    return {"message": f"{promotion.email} is now admin"}
