# finance_tracker/dependencies.py
# Shared FastAPI dependencies for authentication and database

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from . import models
from .auth import auth_manager
from .errors import Unauthenticated

# Missing credentials are reported as 401 below rather than by HTTPBearer
security = HTTPBearer(auto_error=False)

# ===== DATABASE DEPENDENCY =====
def get_db():
    """Database session dependency."""
    db = models.SessionLocal()
    try:
        yield db
    finally:
        db.close()

# ===== AUTHENTICATION DEPENDENCIES =====
async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> models.ApiToken:
    """Resolve the bearer token presented with this request."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return auth_manager.authenticate_token(db, credentials.credentials)
    except Unauthenticated as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

async def get_current_user(
    api_token: models.ApiToken = Depends(get_current_token)
) -> models.User:
    """Get current authenticated user from the bearer token."""
    return api_token.user
