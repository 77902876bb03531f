from datetime import datetime, timedelta
from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends, Request, Response

import database
from schemas import Analytics
from security import USER_COLLECTION, require_admin

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

COLLECTION = "analytics"

TIME_RANGES = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}
TOP_N = 5


def range_start(time_range: str, now: datetime = None) -> datetime:
    now = now or datetime.utcnow()
    return now - TIME_RANGES.get(time_range, TIME_RANGES["week"])


def _top_by(match: Dict[str, Any], field: str, count_key: str) -> List[Dict[str, Any]]:
    pipeline = [
        {"$match": match},
        {"$group": {"_id": f"${field}", count_key: {"$sum": 1}}},
        {"$sort": {count_key: -1}},
        {"$limit": TOP_N},
    ]
    return list(database.get_collection(COLLECTION).aggregate(pipeline))


def _top_viewed(start: datetime, event_type: str, id_key: str, collection: str, label: str) -> List[Dict[str, Any]]:
    match = {"type": event_type, "created_at": {"$gte": start}, "is_admin": {"$ne": True}}
    out = []
    for row in _top_by(match, f"metadata.{id_key}", "views"):
        doc = database.get_document(collection, row["_id"])
        if doc:
            out.append({label: doc.get(label), "views": row["views"]})
    return out


def summarize(start: datetime) -> Dict[str, Any]:
    events = database.get_collection(COLLECTION)
    visitor_match = {"created_at": {"$gte": start}, "is_admin": {"$ne": True}}

    unique_visitors = events.distinct("visitor_id", visitor_match)

    page_view_paths = events.find({**visitor_match, "type": "pageView"}, {"path": 1})
    page_views = sum(1 for ev in page_view_paths if not (ev.get("path") or "").startswith("/admin"))

    contact_submissions = events.count_documents({"type": "contactSubmission", "created_at": {"$gte": start}})
    resume_downloads = events.count_documents({"type": "resumeDownload", "created_at": {"$gte": start}})

    top_locations = [
        {"country": row["_id"], "count": row["count"]} for row in _top_by(visitor_match, "country", "count")
    ]

    time_stats = list(
        events.aggregate(
            [
                {"$match": {**visitor_match, "type": "pageView", "time_spent": {"$gt": 0}}},
                {"$group": {"_id": None, "average": {"$avg": "$time_spent"}, "total": {"$sum": "$time_spent"}}},
            ]
        )
    )
    time_spent = {"average": 0, "total": 0}
    if time_stats:
        time_spent = {"average": time_stats[0]["average"], "total": time_stats[0]["total"]}

    return {
        "unique_visitors": len(unique_visitors),
        "page_views": page_views,
        "contact_submissions": contact_submissions,
        "resume_downloads": resume_downloads,
        "top_locations": top_locations,
        "top_projects": _top_viewed(start, "projectView", "project_id", "project", "title"),
        "top_skills": _top_viewed(start, "skillView", "skill_id", "skill", "name"),
        "time_spent": time_spent,
    }


@router.post("", status_code=201)
def track_event(event: Analytics, request: Request, response: Response):
    if event.user_id:
        user = database.get_document(USER_COLLECTION, event.user_id)
        if user and user.get("is_admin"):
            response.status_code = 200
            return {"message": "Admin activity not tracked"}

    event.is_admin = False
    if not event.ip and request.client:
        event.ip = request.client.host
    if not event.user_agent:
        event.user_agent = request.headers.get("user-agent")
    database.create_document(COLLECTION, event)
    return {"message": "Analytics event tracked successfully"}


@router.get("")
def get_analytics(time_range: str = "week", _: dict = Depends(require_admin)):
    logger.info("Fetching analytics", time_range=time_range)
    return summarize(range_start(time_range))
