"""
Password hashing, JWT issuing and bearer-token dependencies.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import structlog
from fastapi import Depends, Header, HTTPException
from jose import JWTError, jwt
from passlib.context import CryptContext

import config
import database
from schemas import User

logger = structlog.get_logger(__name__)

# Use pbkdf2_sha256 to avoid external bcrypt dependency issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

USER_COLLECTION = "user"
PRIVATE_USER_FIELDS = ("password_hash",)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.utcnow() + (expires_delta or timedelta(days=config.JWT_EXPIRE_DAYS))
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def public_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    return database.serialize(doc, exclude=PRIVATE_USER_FIELDS)


def get_current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authorized, no token")
    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.info("Token verification failed", error=str(e))
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    user = database.get_document(USER_COLLECTION, payload.get("sub"))
    if not user:
        logger.info("No user found for token", user_id=payload.get("sub"))
        raise HTTPException(status_code=401, detail="Not authorized, user not found")
    return user


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if not user.get("is_admin"):
        logger.info("Admin route refused", user_id=str(user["_id"]))
        raise HTTPException(status_code=403, detail="Not authorized as admin")
    return user


def ensure_admin() -> Optional[str]:
    """Seed an admin account from ADMIN_EMAIL/ADMIN_PASSWORD when none exists."""
    users = database.get_collection(USER_COLLECTION)
    if users.find_one({"is_admin": True}):
        return None
    email = config.ADMIN_EMAIL.lower()
    existing = users.find_one({"email": email})
    if existing:
        database.update_document(USER_COLLECTION, existing["_id"], {"is_admin": True})
        logger.info("Promoted existing user to admin", email=email)
        return str(existing["_id"])

    user_id = database.create_document(
        USER_COLLECTION,
        User(
            name=config.ADMIN_NAME,
            email=email,
            password_hash=hash_password(config.ADMIN_PASSWORD),
            is_admin=True,
        ),
    )
    logger.info("Admin user created", email=email, user_id=user_id)
    return user_id
