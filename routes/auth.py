from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

import database
import uploads
from routes import get_or_404
from schemas import AuthResponse, LoginRequest, RegisterRequest, User, UserRoleUpdate
from security import (
    USER_COLLECTION,
    create_access_token,
    get_current_user,
    hash_password,
    public_user,
    require_admin,
    verify_password,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def email_taken(email: str) -> bool:
    return database.get_collection(USER_COLLECTION).find_one({"email": email}) is not None


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(data: RegisterRequest):
    if email_taken(data.email):
        raise HTTPException(status_code=400, detail="User already exists")

    try:
        user_id = database.create_document(
            USER_COLLECTION,
            User(name=data.name, email=data.email, password_hash=hash_password(data.password)),
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists")
    logger.info("User registered", user_id=user_id)
    user = database.get_document(USER_COLLECTION, user_id)
    return AuthResponse(token=create_access_token(user_id), user=public_user(user))


@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest):
    user = database.get_collection(USER_COLLECTION).find_one({"email": data.email})
    if not user or not verify_password(data.password, user["password_hash"]):
        logger.info("Login failed", email=data.email)
        raise HTTPException(status_code=400, detail="Invalid credentials")

    user_id = str(user["_id"])
    user = database.update_document(USER_COLLECTION, user_id, {"last_login": datetime.utcnow()})
    return AuthResponse(token=create_access_token(user_id), user=public_user(user))


@router.get("/me")
def me(user: dict = Depends(get_current_user)):
    return public_user(user)


@router.get("/admin/check")
def admin_check(user: dict = Depends(require_admin)):
    return {"is_admin": True, "user": public_user(user)}


# Users manager
@router.get("/admin/users")
def list_users(_: dict = Depends(require_admin)):
    users = database.get_documents(USER_COLLECTION, sort=[("created_at", 1), ("_id", 1)])
    return [public_user(u) for u in users]


@router.patch("/admin/users/{user_id}")
def update_user_role(user_id: str, data: UserRoleUpdate, admin: dict = Depends(require_admin)):
    get_or_404(USER_COLLECTION, user_id, "User")
    if user_id == str(admin["_id"]) and not data.is_admin:
        raise HTTPException(status_code=400, detail="You cannot remove your own admin access")
    user = database.update_document(USER_COLLECTION, user_id, {"is_admin": data.is_admin})
    logger.info("User role updated", user_id=user_id, is_admin=data.is_admin)
    return public_user(user)


@router.delete("/admin/users/{user_id}")
def delete_user(user_id: str, admin: dict = Depends(require_admin)):
    user = get_or_404(USER_COLLECTION, user_id, "User")
    if user_id == str(admin["_id"]):
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    database.delete_document(USER_COLLECTION, user_id)
    uploads.remove_upload(user.get("profile_image"))
    uploads.remove_upload(user.get("cv_url"))
    logger.info("User deleted", user_id=user_id)
    return {"message": "User deleted successfully"}
