from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response
from pymongo.errors import DuplicateKeyError

import database
import theme
import uploads
from routes import update_replacing_upload
from schemas import AdminProfileUpdate, ProfileUpdate, SocialLinks, ThemeSettings
from security import USER_COLLECTION, get_current_user, hash_password, public_user, require_admin, verify_password

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


def find_admin() -> Optional[Dict[str, Any]]:
    return database.get_collection(USER_COLLECTION).find_one({"is_admin": True}, sort=[("created_at", 1), ("_id", 1)])


def public_profile(admin: Dict[str, Any]) -> Dict[str, Any]:
    """The site owner's public-facing fields, with display defaults."""
    return {
        "name": admin.get("name") or "Admin User",
        "email": admin.get("email") or "",
        "title": admin.get("title") or "Full Stack Developer",
        "location": admin.get("location") or "Location not specified",
        "bio": admin.get("bio") or "No bio available",
        "profile_image": admin.get("profile_image"),
        "interests": admin.get("interests") or [],
        "values": admin.get("values") or [],
        "social_links": admin.get("social_links") or {},
        "years_of_experience": admin.get("years_of_experience") or 0,
        "happy_clients": admin.get("happy_clients") or 0,
        "cv_url": admin.get("cv_url") or "",
        "theme": admin.get("theme") or {},
    }


def apply_profile_update(user: Dict[str, Any], payload: ProfileUpdate) -> Dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if payload.social_links is not None:
        # Networks left out of the request keep their stored value
        sent = payload.social_links.model_dump(exclude_unset=True)
        merged = {**(user.get("social_links") or {}), **sent}
        changes["social_links"] = SocialLinks.model_validate(merged).model_dump()
    if getattr(payload, "values", None) is not None:
        changes["values"] = [value.model_dump() for value in payload.values]
    current_password = changes.pop("current_password", None)
    new_password = changes.pop("new_password", None)

    email = changes.get("email")
    if email and email != user["email"]:
        taken = database.get_collection(USER_COLLECTION).find_one({"email": email, "_id": {"$ne": user["_id"]}})
        if taken:
            raise HTTPException(status_code=400, detail="Email already in use")

    if new_password:
        if not current_password:
            raise HTTPException(status_code=400, detail="Current password is required")
        if not verify_password(current_password, user["password_hash"]):
            raise HTTPException(status_code=400, detail="Current password is incorrect")
        changes["password_hash"] = hash_password(new_password)

    try:
        updated = database.update_document(USER_COLLECTION, str(user["_id"]), changes)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already in use")
    logger.info("Profile updated", user_id=str(user["_id"]), fields=sorted(changes))
    return {"message": "Profile updated successfully", "user": public_user(updated)}


# Public
@router.get("/public-profile")
def get_public_profile():
    admin = find_admin()
    if not admin:
        raise HTTPException(status_code=404, detail="Admin profile not found")
    return public_profile(admin)


@router.get("/theme")
def get_theme():
    admin = find_admin()
    stored = (admin or {}).get("theme") or {}
    resolved = theme.resolve_theme(stored)
    return {
        "preset": stored.get("preset") or "custom",
        "theme": resolved,
        "css_variables": theme.css_variables(resolved),
    }


@router.get("/theme.css")
def get_theme_css():
    admin = find_admin()
    resolved = theme.resolve_theme((admin or {}).get("theme"))
    return Response(content=theme.render_css(resolved), media_type="text/css")


# Own profile
@router.get("/profile")
def get_profile(user: dict = Depends(get_current_user)):
    return public_user(user)


@router.put("/profile")
def update_profile(payload: ProfileUpdate, user: dict = Depends(get_current_user)):
    return apply_profile_update(user, payload)


@router.post("/profile-image")
def upload_profile_image(image: UploadFile = File(...), user: dict = Depends(get_current_user)):
    path = uploads.save_upload(image, "profile_image")
    update_replacing_upload(USER_COLLECTION, str(user["_id"]), {"profile_image": path}, user.get("profile_image"), path, path)
    return {"message": "Profile image updated successfully", "profile_image": path}


# Admin profile
@router.get("/admin-profile")
def get_admin_profile(admin: dict = Depends(require_admin)):
    return public_user(admin)


@router.put("/admin-profile")
def update_admin_profile(payload: AdminProfileUpdate, admin: dict = Depends(require_admin)):
    return apply_profile_update(admin, payload)


@router.post("/cv")
def upload_cv(cv: UploadFile = File(...), admin: dict = Depends(require_admin)):
    path = uploads.save_upload(cv, "cv")
    update_replacing_upload(USER_COLLECTION, str(admin["_id"]), {"cv_url": path}, admin.get("cv_url"), path, path)
    return {"message": "CV uploaded successfully", "cv_url": path}


@router.put("/theme")
def update_theme(payload: ThemeSettings, admin: dict = Depends(require_admin)):
    stored = payload.model_dump(exclude_none=True)
    database.update_document(USER_COLLECTION, str(admin["_id"]), {"theme": stored})
    logger.info("Theme updated", preset=payload.preset)
    resolved = theme.resolve_theme(stored)
    return {"preset": payload.preset, "theme": resolved, "css_variables": theme.css_variables(resolved)}
