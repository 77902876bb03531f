import json
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

import database
import ordering
import uploads
from routes import get_or_404, parse_bool, reorder, stored_fields, update_replacing_upload, validate_or_discard
from schemas import MoveRequest, Project, ReorderItem
from security import require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])

COLLECTION = "project"
CATEGORY_COLLECTION = "category"


def project_filter(category: Optional[str], technologies: Optional[str]) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if category and category != "all":
        query["category"] = category
    if technologies:
        tech = [t.strip() for t in technologies.split(",") if t.strip()]
        if tech:
            query["technologies"] = {"$in": tech}
    return query


def _json_list(value: Optional[str]) -> Optional[List[str]]:
    """Technologies and features arrive as JSON-encoded lists in multipart forms."""
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid technologies or features format")
    if not isinstance(parsed, list):
        raise HTTPException(status_code=400, detail="Invalid technologies or features format")
    return [str(item).strip() for item in parsed if str(item).strip()]


def _check_category(category_id: str) -> None:
    if not database.get_document(CATEGORY_COLLECTION, category_id):
        raise HTTPException(status_code=400, detail="Category not found")


@router.get("")
def list_projects(category: Optional[str] = None, technologies: Optional[str] = None):
    query = project_filter(category, technologies)
    query["is_active"] = True
    items = database.get_documents(COLLECTION, query, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.get("/admin")
def list_all_projects(
    category: Optional[str] = None,
    technologies: Optional[str] = None,
    _: dict = Depends(require_admin),
):
    items = database.get_documents(COLLECTION, project_filter(category, technologies), sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.post("", status_code=201)
def create_project(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    start_date: str = Form(...),
    end_date: str = Form(...),
    technologies: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    github_url: Optional[str] = Form(None),
    live_url: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    image_source: str = Form("url"),
    image_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _: dict = Depends(require_admin),
):
    _check_category(category)
    data = {
        "title": title,
        "description": description,
        "category": category,
        "start_date": start_date,
        "end_date": end_date,
        "technologies": _json_list(technologies) or [],
        "features": _json_list(features) or [],
        "github_url": github_url,
        "live_url": live_url,
        "order": order if order not in (None, "") else database.get_collection(COLLECTION).count_documents({}),
        "is_active": parse_bool(is_active),
    }

    image_path = uploads.resolve_media(image_source, image, image_url, "project_image")
    if not image_path:
        raise HTTPException(status_code=400, detail="Image is required")
    data["image"] = image_path
    project = validate_or_discard(Project, data, image_path if image_source == "file" else None)

    _id = database.create_document(COLLECTION, project)
    logger.info("Project created", project_id=_id)
    return database.serialize(database.get_document(COLLECTION, _id))


@router.patch("/reorder")
def reorder_projects(body: Dict[str, List[ReorderItem]], _: dict = Depends(require_admin)):
    reorder(COLLECTION, body, "projects")
    return {"message": "Projects reordered successfully"}


@router.post("/admin/move")
def move_project(data: MoveRequest, _: dict = Depends(require_admin)):
    try:
        items = ordering.apply_move(COLLECTION, data.id, data.to_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Project not found")
    return [database.serialize(it) for it in items]


@router.patch("/{project_id}")
def update_project(
    project_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    start_date: Optional[str] = Form(None),
    end_date: Optional[str] = Form(None),
    technologies: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    github_url: Optional[str] = Form(None),
    live_url: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    image_source: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _: dict = Depends(require_admin),
):
    existing = get_or_404(COLLECTION, project_id, "Project")
    fields = {
        "title": title,
        "description": description,
        "category": category,
        "start_date": start_date,
        "end_date": end_date,
        "technologies": _json_list(technologies),
        "features": _json_list(features),
        "github_url": github_url,
        "live_url": live_url,
        "order": order,
    }
    changes = {k: v for k, v in fields.items() if v is not None}
    if is_active is not None:
        changes["is_active"] = parse_bool(is_active)
    if category is not None:
        _check_category(category)

    merged = {**stored_fields(existing), **changes}
    new_image = uploads.resolve_media(image_source, image, image_url, "project_image")
    if new_image:
        merged["image"] = new_image
    new_upload = new_image if image_source == "file" else None
    project = validate_or_discard(Project, merged, new_upload)
    updated = update_replacing_upload(
        COLLECTION, project_id, project.model_dump(), existing.get("image"), new_image, new_upload
    )
    logger.info("Project updated", project_id=project_id)
    return database.serialize(updated)


@router.delete("/{project_id}")
def delete_project(project_id: str, _: dict = Depends(require_admin)):
    project = get_or_404(COLLECTION, project_id, "Project")
    uploads.remove_upload(project.get("image"))
    database.delete_document(COLLECTION, project_id)
    logger.info("Project deleted", project_id=project_id)
    return {"message": "Project deleted successfully"}
