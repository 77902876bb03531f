"""
MongoDB access helpers.

`db` is the module-level database handle (None when no DATABASE_URL is set).
Collections are named after the lowercased schema class, e.g. Skill -> "skill".
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import MongoClient, ReturnDocument

import config

logger = structlog.get_logger(__name__)


class DatabaseUnavailable(Exception):
    """Raised when a query is attempted without a configured database."""


def connect(url: Optional[str] = None, name: Optional[str] = None):
    url = url or config.DATABASE_URL
    if not url:
        logger.warning("DATABASE_URL not set, running without a database")
        return None
    client = MongoClient(url, serverSelectionTimeoutMS=5000)
    return client[name or config.DATABASE_NAME]


db = connect()


def get_collection(collection_name: str):
    if db is None:
        raise DatabaseUnavailable("Database not available")
    return db[collection_name]


# collection -> fields that must be unique
UNIQUE_FIELDS = {
    "user": ("email",),
    "category": ("name",),
}


def ensure_indexes() -> None:
    for collection_name, fields in UNIQUE_FIELDS.items():
        for field in fields:
            get_collection(collection_name).create_index(field, unique=True)
    logger.info("Unique indexes ensured", collections=sorted(UNIQUE_FIELDS))


def _as_dict(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return dict(data)


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    """Insert a document with created/updated timestamps, return its id as a string."""
    doc = _as_dict(data)
    now = datetime.utcnow()
    doc["created_at"] = now
    doc["updated_at"] = now
    result = get_collection(collection_name).insert_one(doc)
    return str(result.inserted_id)


def get_documents(
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    sort: Optional[List[tuple]] = None,
) -> List[Dict[str, Any]]:
    cursor = get_collection(collection_name).find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document(collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
    oid = object_id(doc_id)
    if oid is None:
        return None
    return get_collection(collection_name).find_one({"_id": oid})


def update_document(collection_name: str, doc_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Apply `$set` changes and return the updated document, or None if it does not exist."""
    oid = object_id(doc_id)
    if oid is None:
        return None
    changes = dict(changes)
    changes["updated_at"] = datetime.utcnow()
    return get_collection(collection_name).find_one_and_update(
        {"_id": oid}, {"$set": changes}, return_document=ReturnDocument.AFTER
    )


def delete_document(collection_name: str, doc_id: str) -> bool:
    oid = object_id(doc_id)
    if oid is None:
        return False
    return get_collection(collection_name).delete_one({"_id": oid}).deleted_count > 0


def object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize(doc: Optional[Dict[str, Any]], exclude: tuple = ()) -> Optional[Dict[str, Any]]:
    """Normalize a raw document for JSON: `_id` -> `id`, ObjectIds -> strings."""
    if doc is None:
        return None
    out = {}
    for key, value in doc.items():
        if key in exclude:
            continue
        if key == "_id":
            out["id"] = str(value)
        elif isinstance(value, ObjectId):
            out[key] = str(value)
        else:
            out[key] = value
    return out
