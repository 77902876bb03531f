import structlog
from fastapi import APIRouter, Depends

import database
import mailer
from routes import get_or_404
from schemas import Message
from security import require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])

COLLECTION = "message"


@router.post("", status_code=201)
def submit_message(message: Message):
    message.is_read = False
    _id = database.create_document(COLLECTION, message)
    logger.info("Contact message received", message_id=_id)
    emailed = mailer.send_contact_emails(message.model_dump())
    return {"message": "Message sent successfully", "id": _id, "emailed": emailed}


@router.get("/admin")
def list_messages(_: dict = Depends(require_admin)):
    items = database.get_documents(COLLECTION, sort=[("created_at", -1), ("_id", -1)])
    return [database.serialize(it) for it in items]


@router.patch("/admin/{message_id}/read")
def mark_read(message_id: str, _: dict = Depends(require_admin)):
    get_or_404(COLLECTION, message_id, "Message")
    updated = database.update_document(COLLECTION, message_id, {"is_read": True})
    return database.serialize(updated)


@router.delete("/admin/{message_id}")
def delete_message(message_id: str, _: dict = Depends(require_admin)):
    get_or_404(COLLECTION, message_id, "Message")
    database.delete_document(COLLECTION, message_id)
    logger.info("Contact message deleted", message_id=message_id)
    return {"message": "Message deleted successfully"}
