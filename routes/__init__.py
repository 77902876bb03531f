"""
API routers, one per content collection, plus small helpers they share.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel, ValidationError
from pymongo.errors import PyMongoError

import database
import ordering
import uploads

M = TypeVar("M", bound=BaseModel)


def error_message(exc: ValidationError) -> str:
    """First human-readable message from a pydantic error."""
    errors = exc.errors()
    if not errors:
        return "Invalid data"
    err = errors[0]
    msg = err.get("msg", "Invalid data")
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
    return f"{loc}: {msg}" if loc else msg


def validate(model: Type[M], data: Dict[str, Any]) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=error_message(e))


def get_or_404(collection_name: str, doc_id: str, label: str) -> Dict[str, Any]:
    doc = database.get_document(collection_name, doc_id)
    if not doc:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return doc


def stored_fields(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Strip bookkeeping keys so a stored document can be re-validated."""
    return {k: v for k, v in doc.items() if k not in ("_id", "created_at", "updated_at")}


def reorder_entries(body: Dict[str, List[Any]], key: str) -> List[Dict[str, Any]]:
    if key not in body:
        raise HTTPException(status_code=400, detail=f"'{key}' list is required")
    return [item.model_dump() if isinstance(item, BaseModel) else item for item in body[key]]


def reorder(collection_name: str, body: Dict[str, List[Any]], key: str) -> int:
    try:
        return ordering.apply_reorder(collection_name, reorder_entries(body, key))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def parse_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None or value == "":
        return default
    return str(value).lower() in ("true", "1", "yes", "on")


def validate_or_discard(model: Type[M], data: Dict[str, Any], new_upload: Optional[str]) -> M:
    """Validate; if that fails, delete the file that was just uploaded for this request."""
    try:
        return validate(model, data)
    except HTTPException:
        uploads.remove_upload(new_upload)
        raise


def update_replacing_upload(
    collection_name: str,
    doc_id: str,
    changes: Dict[str, Any],
    old_path: Optional[str],
    new_path: Optional[str],
    new_upload: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Write `changes`, then drop the replaced file. A failed write discards the new upload instead."""
    try:
        updated = database.update_document(collection_name, doc_id, changes)
    except PyMongoError:
        uploads.remove_upload(new_upload)
        raise
    if new_path and new_path != old_path:
        uploads.remove_upload(old_path)
    return updated
