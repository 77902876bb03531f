from typing import Dict, List

import structlog
from fastapi import APIRouter, Depends, HTTPException

import database
import ordering
from routes import get_or_404, reorder, stored_fields, validate
from schemas import Experience, ExperienceUpdate, MoveRequest, ReorderItem
from security import require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/experience", tags=["experience"])

COLLECTION = "experience"


@router.get("")
def list_experience():
    items = database.get_documents(COLLECTION, {"is_active": True}, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.get("/admin")
def list_all_experience(_: dict = Depends(require_admin)):
    items = database.get_documents(COLLECTION, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.post("", status_code=201)
def create_experience(experience: Experience, _: dict = Depends(require_admin)):
    _id = database.create_document(COLLECTION, experience)
    logger.info("Experience created", experience_id=_id)
    return database.serialize(database.get_document(COLLECTION, _id))


@router.put("/reorder")
def reorder_experience(body: Dict[str, List[ReorderItem]], _: dict = Depends(require_admin)):
    reorder(COLLECTION, body, "experiences")
    return {"message": "Experiences reordered successfully"}


@router.post("/admin/move")
def move_experience(data: MoveRequest, _: dict = Depends(require_admin)):
    try:
        items = ordering.apply_move(COLLECTION, data.id, data.to_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Experience not found")
    return [database.serialize(it) for it in items]


@router.put("/{experience_id}")
def update_experience(experience_id: str, changes: ExperienceUpdate, _: dict = Depends(require_admin)):
    existing = get_or_404(COLLECTION, experience_id, "Experience")
    merged = validate(Experience, {**stored_fields(existing), **changes.model_dump(exclude_unset=True)})
    updated = database.update_document(COLLECTION, experience_id, merged.model_dump())
    logger.info("Experience updated", experience_id=experience_id)
    return database.serialize(updated)


@router.delete("/{experience_id}")
def delete_experience(experience_id: str, _: dict = Depends(require_admin)):
    get_or_404(COLLECTION, experience_id, "Experience")
    database.delete_document(COLLECTION, experience_id)
    logger.info("Experience deleted", experience_id=experience_id)
    return {"message": "Experience deleted"}
