from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

import database
import ordering
import uploads
from routes import get_or_404, parse_bool, reorder, stored_fields, update_replacing_upload, validate_or_discard
from schemas import MoveRequest, ReorderItem, Skill
from security import require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/skills", tags=["skills"])

COLLECTION = "skill"
CATEGORY_COLLECTION = "category"


def with_categories(skills: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Serialize skills, embedding {id, name, description, icon} of their category."""
    ids = {database.object_id(s.get("category")) for s in skills}
    ids.discard(None)
    categories = {}
    if ids:
        for cat in database.get_documents(CATEGORY_COLLECTION, {"_id": {"$in": list(ids)}}):
            categories[str(cat["_id"])] = {
                "id": str(cat["_id"]),
                "name": cat.get("name"),
                "description": cat.get("description"),
                "icon": cat.get("icon"),
            }
    out = []
    for skill in skills:
        item = database.serialize(skill)
        item["category"] = categories.get(str(skill.get("category")))
        out.append(item)
    return out


def _check_category(category_id: str) -> None:
    if not database.get_document(CATEGORY_COLLECTION, category_id):
        raise HTTPException(status_code=400, detail="Category not found")


@router.get("")
def list_skills():
    items = database.get_documents(COLLECTION, {"is_active": True}, sort=[("category", 1), ("order", 1)])
    return with_categories(items)


@router.get("/admin")
def list_all_skills(_: dict = Depends(require_admin)):
    items = database.get_documents(COLLECTION, sort=[("category", 1), ("order", 1)])
    return with_categories(items)


@router.post("", status_code=201)
def create_skill(
    name: str = Form(...),
    category: str = Form(...),
    level: str = Form(...),
    order: str = Form("0"),
    is_active: Optional[str] = Form(None),
    icon_source: str = Form("url"),
    icon_url: Optional[str] = Form(None),
    icon: Optional[UploadFile] = File(None),
    _: dict = Depends(require_admin),
):
    _check_category(category)
    icon_path = uploads.resolve_media(icon_source, icon, icon_url, "skill_icon")
    if not icon_path:
        raise HTTPException(status_code=400, detail="Icon is required")
    data = {
        "name": name,
        "category": category,
        "level": level,
        "order": order,
        "is_active": parse_bool(is_active),
        "icon": icon_path,
    }
    skill = validate_or_discard(Skill, data, icon_path if icon_source == "file" else None)

    _id = database.create_document(COLLECTION, skill)
    logger.info("Skill created", skill_id=_id)
    return with_categories([database.get_document(COLLECTION, _id)])[0]


@router.patch("/reorder")
def reorder_skills(body: Dict[str, List[ReorderItem]], _: dict = Depends(require_admin)):
    reorder(COLLECTION, body, "skills")
    return {"message": "Skills reordered successfully"}


@router.post("/admin/move")
def move_skill(data: MoveRequest, _: dict = Depends(require_admin)):
    try:
        items = ordering.apply_move(COLLECTION, data.id, data.to_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Skill not found")
    return with_categories(items)


@router.patch("/{skill_id}")
def update_skill(
    skill_id: str,
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    level: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    icon_source: Optional[str] = Form(None),
    icon_url: Optional[str] = Form(None),
    icon: Optional[UploadFile] = File(None),
    _: dict = Depends(require_admin),
):
    existing = get_or_404(COLLECTION, skill_id, "Skill")
    changes = {
        k: v
        for k, v in {"name": name, "category": category, "level": level, "order": order}.items()
        if v is not None
    }
    if is_active is not None:
        changes["is_active"] = parse_bool(is_active)
    if category is not None:
        _check_category(category)
    merged = {**stored_fields(existing), **changes}
    new_icon = uploads.resolve_media(icon_source, icon, icon_url, "skill_icon")
    if new_icon:
        merged["icon"] = new_icon
    new_upload = new_icon if icon_source == "file" else None
    skill = validate_or_discard(Skill, merged, new_upload)
    updated = update_replacing_upload(COLLECTION, skill_id, skill.model_dump(), existing.get("icon"), new_icon, new_upload)
    logger.info("Skill updated", skill_id=skill_id)
    return with_categories([updated])[0]


@router.delete("/{skill_id}")
def delete_skill(skill_id: str, _: dict = Depends(require_admin)):
    skill = get_or_404(COLLECTION, skill_id, "Skill")
    uploads.remove_upload(skill.get("icon"))
    database.delete_document(COLLECTION, skill_id)
    logger.info("Skill deleted", skill_id=skill_id)
    return {"message": "Skill deleted successfully"}
