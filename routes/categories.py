from typing import Dict, List

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

import database
import ordering
from routes import get_or_404, reorder, stored_fields, validate
from schemas import Category, CategoryUpdate, MoveRequest, ReorderItem
from security import require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])

COLLECTION = "category"


def _name_taken(name: str, exclude_id=None) -> bool:
    query = {"name": name}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    return database.get_collection(COLLECTION).find_one(query) is not None


@router.get("")
def list_categories():
    items = database.get_documents(COLLECTION, {"is_active": True}, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.get("/admin")
def list_all_categories(_: dict = Depends(require_admin)):
    items = database.get_documents(COLLECTION, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.post("", status_code=201)
def create_category(category: Category, _: dict = Depends(require_admin)):
    if _name_taken(category.name):
        raise HTTPException(status_code=400, detail="Category already exists")
    category.order = database.get_collection(COLLECTION).count_documents({})
    try:
        _id = database.create_document(COLLECTION, category)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Category already exists")
    logger.info("Category created", category_id=_id)
    return database.serialize(database.get_document(COLLECTION, _id))


@router.put("/admin/reorder")
def reorder_categories(body: Dict[str, List[ReorderItem]], _: dict = Depends(require_admin)):
    reorder(COLLECTION, body, "categories")
    return {"message": "Categories reordered successfully"}


@router.post("/admin/move")
def move_category(data: MoveRequest, _: dict = Depends(require_admin)):
    try:
        items = ordering.apply_move(COLLECTION, data.id, data.to_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Category not found")
    return [database.serialize(it) for it in items]


@router.put("/{category_id}")
def update_category(category_id: str, changes: CategoryUpdate, _: dict = Depends(require_admin)):
    existing = get_or_404(COLLECTION, category_id, "Category")
    merged = validate(Category, {**stored_fields(existing), **changes.model_dump(exclude_unset=True)})
    if merged.name != existing["name"] and _name_taken(merged.name, existing["_id"]):
        raise HTTPException(status_code=400, detail="Category already exists")
    try:
        updated = database.update_document(COLLECTION, category_id, merged.model_dump())
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Category already exists")
    logger.info("Category updated", category_id=category_id)
    return database.serialize(updated)


@router.delete("/{category_id}")
def delete_category(category_id: str, _: dict = Depends(require_admin)):
    get_or_404(COLLECTION, category_id, "Category")
    database.delete_document(COLLECTION, category_id)
    logger.info("Category deleted", category_id=category_id)
    return {"message": "Category deleted successfully"}
