from typing import Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

import database
import ordering
import uploads
from routes import get_or_404, parse_bool, reorder, stored_fields, update_replacing_upload, validate_or_discard
from schemas import Client, MoveRequest, ReorderItem
from security import require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/clients", tags=["clients"])

COLLECTION = "client"


@router.get("")
def list_clients():
    items = database.get_documents(COLLECTION, {"is_active": True}, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.get("/admin")
def list_all_clients(_: dict = Depends(require_admin)):
    items = database.get_documents(COLLECTION, sort=[("order", 1)])
    return [database.serialize(it) for it in items]


@router.post("", status_code=201)
def create_client(
    name: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    logo_source: str = Form("url"),
    logo: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _: dict = Depends(require_admin),
):
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Client name is required")

    logo_path = uploads.resolve_media(logo_source, image, logo, "client_logo") or logo
    if not logo_path:
        raise HTTPException(status_code=400, detail="Client logo is required")

    data = {
        "name": name.strip(),
        "website": website,
        "logo": logo_path,
        "order": database.get_collection(COLLECTION).count_documents({}),
        "is_active": True,
    }
    client = validate_or_discard(Client, data, logo_path if logo_source == "file" else None)
    _id = database.create_document(COLLECTION, client)
    logger.info("Client created", client_id=_id)
    return database.serialize(database.get_document(COLLECTION, _id))


@router.patch("/admin/reorder")
def reorder_clients(body: Dict[str, List[ReorderItem]], _: dict = Depends(require_admin)):
    reorder(COLLECTION, body, "clients")
    return {"message": "Clients reordered successfully"}


@router.post("/admin/move")
def move_client(data: MoveRequest, _: dict = Depends(require_admin)):
    try:
        items = ordering.apply_move(COLLECTION, data.id, data.to_index)
    except KeyError:
        raise HTTPException(status_code=404, detail="Client not found")
    return [database.serialize(it) for it in items]


@router.patch("/{client_id}")
def update_client(
    client_id: str,
    name: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    logo_source: Optional[str] = Form(None),
    logo: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _: dict = Depends(require_admin),
):
    existing = get_or_404(COLLECTION, client_id, "Client")
    merged = stored_fields(existing)
    if name is not None:
        merged["name"] = name.strip()
    if website is not None:
        merged["website"] = website
    if is_active is not None:
        merged["is_active"] = parse_bool(is_active)

    new_logo = uploads.resolve_media(logo_source, image, logo, "client_logo")
    if new_logo:
        merged["logo"] = new_logo
    new_upload = new_logo if logo_source == "file" else None
    client = validate_or_discard(Client, merged, new_upload)
    updated = update_replacing_upload(COLLECTION, client_id, client.model_dump(), existing.get("logo"), new_logo, new_upload)
    logger.info("Client updated", client_id=client_id)
    return database.serialize(updated)


@router.delete("/{client_id}")
def delete_client(client_id: str, _: dict = Depends(require_admin)):
    client = get_or_404(COLLECTION, client_id, "Client")
    uploads.remove_upload(client.get("logo"))
    database.delete_document(COLLECTION, client_id)
    logger.info("Client deleted", client_id=client_id)
    return {"message": "Client deleted successfully"}
