from datetime import datetime, timezone

from fastapi import APIRouter

from fc_planner.config import get_settings
from fc_planner.services.ingestion_service import SOURCE_NAMES, SOURCE_SETTING_NAMES

router = APIRouter(tags=["Health"])


def _input_status(settings):
    if settings.SOURCE_WORKBOOK:
        return {"mode": "workbook", "missing": []}
    missing = [
        source
        for source in SOURCE_NAMES
        if not (getattr(settings, SOURCE_SETTING_NAMES[source]) or "").strip()
    ]
    return {"mode": "sources", "missing": missing}


@router.get("/health")
def health_check():
    settings = get_settings()
    inputs = _input_status(settings)
    return {
        "status": "ok" if not inputs["missing"] else "degraded",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "inputs": inputs,
        "time": datetime.now(timezone.utc).isoformat(),
    }
