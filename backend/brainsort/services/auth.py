"""
Authentication Helpers
Password hashing and session tokens used by the identity gateway.
"""
from datetime import datetime, timedelta
from typing import Optional
import re
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext

from ..config import settings

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def create_access_token(user_id: str, email: str, session_id: str) -> str:
    """Create JWT access token bound to a provider session"""
    expire = datetime.utcnow() + timedelta(days=settings.jwt_expiration_days)
    to_encode = {
        "sub": user_id,
        "email": email,
        "sid": session_id,
        "exp": expire
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode a JWT; None when it is malformed, expired or badly signed"""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        return None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def validate_email(email: str) -> bool:
    return bool(EMAIL_REGEX.match(email))
