"""
Display-order helpers shared by the content managers.
"""

from typing import Any, Dict, List, Tuple

from bson import ObjectId
from pymongo import UpdateMany

import database


def move(items: List[Dict[str, Any]], source_index: int, destination_index: int) -> List[Dict[str, Any]]:
    """Drag-and-drop reorder: splice one item to a new index, then renumber `order` 0..n-1."""
    if not 0 <= source_index < len(items) or not 0 <= destination_index < len(items):
        raise IndexError("Reorder index out of range")
    result = [dict(item) for item in items]
    moved = result.pop(source_index)
    result.insert(destination_index, moved)
    for index, item in enumerate(result):
        item["order"] = index
    return result


def reorder_updates(entries: List[Dict[str, Any]]) -> List[Tuple[ObjectId, int]]:
    """Validate `{id, order}` entries into (ObjectId, order) pairs."""
    updates = []
    for entry in entries:
        oid = database.object_id(entry.get("id"))
        if oid is None:
            raise ValueError(f"Invalid id: {entry.get('id')}")
        order = entry.get("order")
        if not isinstance(order, int) or order < 0:
            raise ValueError("Order cannot be less than 0")
        updates.append((oid, order))
    return updates


def apply_reorder(collection_name: str, entries: List[Dict[str, Any]]) -> int:
    updates = reorder_updates(entries)
    if not updates:
        return 0
    # Filters are on _id, so each operation touches at most one document
    operations = [UpdateMany({"_id": oid}, {"$set": {"order": order}}) for oid, order in updates]
    result = database.get_collection(collection_name).bulk_write(operations, ordered=False)
    return result.modified_count or 0


def apply_move(collection_name: str, doc_id: str, to_index: int) -> List[Dict[str, Any]]:
    """Move one document within the full (admin) ordering and persist the new orders.

    Raises KeyError when the document is not part of the collection.
    """
    docs = database.get_documents(collection_name, sort=[("order", 1)])
    ids = [str(doc["_id"]) for doc in docs]
    if doc_id not in ids:
        raise KeyError(doc_id)
    reordered = move(docs, ids.index(doc_id), min(to_index, len(docs) - 1))
    apply_reorder(collection_name, [{"id": str(doc["_id"]), "order": doc["order"]} for doc in reordered])
    return reordered
