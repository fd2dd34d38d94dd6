# finance_tracker/auth.py
# Password hashing and revocable JWT bearer tokens

from datetime import datetime, timedelta
from typing import Optional
from passlib.context import CryptContext
from jose import JWTError, jwt
from sqlalchemy.orm import Session
import logging
import secrets

from . import models
from .config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from .errors import Unauthenticated

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class AuthManager:
    """Issues, verifies and revokes bearer tokens.

    Each token is a signed JWT whose ``jti`` names an ``ApiToken`` row. Deleting
    the row revokes that one token while the user's other tokens keep working.
    """

    def __init__(self, secret_key: str = SECRET_KEY):
        self.secret_key = secret_key
        self.algorithm = ALGORITHM
        self.access_token_expire_minutes = ACCESS_TOKEN_EXPIRE_MINUTES

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a plaintext password against its hash."""
        return pwd_context.verify(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        """Hash a password for storing."""
        return pwd_context.hash(password)

    def create_access_token(self, db: Session, user: models.User, name: str = "api-token",
                            expires_delta: Optional[timedelta] = None) -> str:
        """Persist a new token record for ``user`` and return the signed JWT."""
        token_id = secrets.token_urlsafe(32)
        db.add(models.ApiToken(id=token_id, name=name, user_id=user.id))
        db.commit()

        now = datetime.utcnow()
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))
        to_encode = {
            "sub": str(user.id),
            "jti": token_id,
            "type": "access",
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> dict:
        """Decode a JWT, checking signature, expiry and token type."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise Unauthenticated("Could not validate credentials")

        if payload.get("type") != "access" or not payload.get("sub") or not payload.get("jti"):
            raise Unauthenticated("Invalid authentication credentials")

        return payload

    def authenticate_token(self, db: Session, token: str) -> models.ApiToken:
        """Resolve a bearer string to its live token record."""
        payload = self.verify_token(token)

        api_token = db.query(models.ApiToken).filter(
            models.ApiToken.id == payload["jti"]
        ).first()
        if api_token is None or str(api_token.user_id) != payload["sub"]:
            raise Unauthenticated("Token has been revoked")

        api_token.last_used_at = datetime.utcnow()
        db.commit()
        return api_token

    def revoke_token(self, db: Session, api_token: models.ApiToken) -> None:
        """Delete a single token record."""
        db.delete(api_token)
        db.commit()

# Global auth manager instance
auth_manager = AuthManager()

# Convenience functions
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return auth_manager.verify_password(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Hash a password."""
    return auth_manager.get_password_hash(password)

def create_access_token(db: Session, user: models.User, name: str = "api-token") -> str:
    """Issue a new bearer token for ``user``."""
    return auth_manager.create_access_token(db, user, name)

def log_security_event(event_type: str, user_email: str, details: dict = None):
    """Log security events for monitoring."""
    logger.warning(f"SECURITY EVENT: {event_type} for {user_email} - {details or {}}")
