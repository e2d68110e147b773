# intern_tracker/routes/auth.py
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import ADMIN
from ..database import get_db
from ..errors import Unauthorized, InvalidToken, Forbidden, NotFound
from ..models import User
from ..schemas import LoginRequest, PasswordChange
from ..security import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


def get_token_from_headers(authorization: Optional[str]) -> Optional[str]:
    """Pull the credential out of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_identity(authorization: Optional[str] = Header(None)) -> Identity:
    token = get_token_from_headers(authorization)
    if not token:
        raise Unauthorized()

    claims = decode_access_token(token)
    if not claims:
        raise InvalidToken()
    try:
        return Identity(user_id=int(claims["sub"]), role=str(claims["role"]))
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()


def require_role(role: str):
    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role != role:
            raise Forbidden()
        return identity
    return dependency


require_admin = require_role(ADMIN)


def public_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "department": user.department,
        "supervisor": user.supervisor,
        "status": user.status,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


@router.post("/login")
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info("Rejected login for %s", credentials.email)
        return JSONResponse({"error": "Invalid email or password"}, status_code=401)

    token = create_access_token(user.id, user.role)
    logger.info("User %s logged in as %s", user.id, user.role)
    return {
        "token": token,
        "user": public_user(user),
        "mustResetPassword": bool(user.must_reset_password),
    }


@router.get("/me")
def me(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == identity.user_id).first()
    if not user:
        raise NotFound("User not found")
    return public_user(user)


@router.post("/change-password")
def change_password(
    data: PasswordChange,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    user = db.query(User).filter(User.id == identity.user_id).first()
    if not user:
        raise NotFound("User not found")
    if not verify_password(data.current_password, user.password_hash):
        return JSONResponse({"error": "Current password is incorrect"}, status_code=401)

    try:
        user.password_hash = hash_password(data.new_password)
        user.must_reset_password = False
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to change password for user %s", user.id)
        return JSONResponse({"error": "Failed to change password"}, status_code=500)

    logger.info("User %s changed password", user.id)
    return {"success": True, "message": "Password changed"}
