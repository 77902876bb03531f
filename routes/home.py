from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter

import database
from routes.settings import find_admin, public_profile
from routes.skills import with_categories

router = APIRouter(prefix="/api/home", tags=["home"])

DAYS_PER_YEAR = 365


def years_since_earliest(experiences: List[Dict[str, Any]], now: Optional[datetime] = None) -> int:
    starts = [e["start_date"] for e in experiences if e.get("start_date")]
    if not starts:
        return 0
    now = now or datetime.utcnow()
    return max(0, (now - min(starts)).days // DAYS_PER_YEAR)


@router.get("")
def get_home():
    """Everything the public home page needs in one call."""
    admin = find_admin()
    categories = database.get_documents("category", {"is_active": True}, sort=[("order", 1)])
    skills = database.get_documents("skill", {"is_active": True}, sort=[("order", 1)])
    experiences = database.get_documents("experience", {"is_active": True})

    stats = {
        "years_of_experience": years_since_earliest(experiences),
        "projects_completed": database.get_collection("project").count_documents({"is_active": True}),
        "happy_clients": database.get_collection("client").count_documents({"is_active": True}),
    }
    return {
        "profile": public_profile(admin) if admin else None,
        "categories": [database.serialize(c) for c in categories],
        "skills": with_categories(skills),
        "stats": stats,
    }
