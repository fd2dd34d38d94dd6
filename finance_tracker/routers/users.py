# finance_tracker/routers/users.py
# Registration, login, token issuance and the current-user profile

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Any, Dict
import logging

from .. import models, schemas
from ..auth import auth_manager, create_access_token, get_password_hash, log_security_event, verify_password
from ..dependencies import get_current_token, get_current_user, get_db
from ..errors import Conflict, ServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

def serialize_user(user: models.User) -> Dict[str, Any]:
    return {"id": user.id, "name": user.name, "email": user.email}

def _require_fields(data: Dict[str, Any], *fields: str) -> None:
    """Answer 400 when any required field is absent or blank."""
    missing = [field for field in fields if data.get(field) in (None, "")]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required fields: {', '.join(missing)}"
        )

# ===== AUTHENTICATION ENDPOINTS =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user_data: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Register a new user and issue their first token."""
    _require_fields(user_data, "name", "email", "password")
    payload = schemas.parse(schemas.RegisterRequest, user_data)

    try:
        if models.get_user_by_email(db, payload.email) is not None:
            raise Conflict("User already exists")

        user = models.User(
            name=payload.name,
            email=payload.email,
            hashed_password=get_password_hash(payload.password)
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            db.rollback()
            raise Conflict("User already exists")
        db.refresh(user)

        token = create_access_token(db, user)
        logger.info(f"Registered user {user.id}")

        return {
            "message": "User registered successfully",
            "token": token,
            "user": serialize_user(user)
        }

    except ServiceError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Registration failed")
        raise HTTPException(status_code=500, detail=f"Registration failed: {str(e)}")

@router.post("/login")
async def login(user_data: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Authenticate user and return a new bearer token."""
    _require_fields(user_data, "email", "password")
    payload = schemas.parse(schemas.LoginRequest, user_data)

    try:
        user = models.get_user_by_email(db, payload.email)

        if not user or not verify_password(payload.password, user.hashed_password):
            log_security_event("login_failed", payload.email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        return {
            "token": create_access_token(db, user),
            "user": serialize_user(user)
        }

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Login failed")
        raise HTTPException(status_code=500, detail=f"Login failed: {str(e)}")

@router.post("/csrf-token")
async def create_token(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Issue an additional API token for the signed-in user."""
    try:
        token = create_access_token(db, current_user)
    except Exception as e:
        db.rollback()
        logger.exception("Token creation failed")
        raise HTTPException(status_code=500, detail=f"Unable to create token: {str(e)}")

    return {"token": token}

@router.post("/logout")
async def logout(
    api_token: models.ApiToken = Depends(get_current_token),
    db: Session = Depends(get_db)
):
    """Revoke only the token used for this request."""
    user_id = api_token.user_id
    auth_manager.revoke_token(db, api_token)
    logger.info(f"User {user_id} logged out")
    return {"message": "Logged out successfully"}

@router.get("/user")
async def get_current_user_info(current_user: models.User = Depends(get_current_user)):
    """Get current user information."""
    return serialize_user(current_user)
