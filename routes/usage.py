"""
Route handlers for admin usage reporting.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Header, status
from fastapi.responses import JSONResponse

from auth import AuthError, PermissionDeniedError, auth_error_response, require_admin
from config import Config
from utils.constants import INTERNAL_ERROR
from utils.logger import app_logger
from utils.usage_store import get_usage_store

router = APIRouter()


def _is_date_only(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_date_param(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse an ISO date/datetime query value; None when missing or invalid.

    With end_of_day, a date without a time part means the last instant of that day.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if end_of_day and _is_date_only(value):
        parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    return parsed


@router.get("/api/usage-ranking")
async def usage_ranking(authorization: Optional[str] = Header(None)):
    """Callers ordered by running total tokens. Admin only."""
    try:
        await require_admin(authorization)
    except (AuthError, PermissionDeniedError) as e:
        return auth_error_response(e)

    try:
        ranking = get_usage_store().get_ranking()
        return {"ranking": [totals.to_dict() for totals in ranking]}
    except Exception as e:
        app_logger.error(f"Usage ranking error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR}
        )


@router.get("/api/usage-report")
async def usage_report(
    start: Optional[str] = None,
    end: Optional[str] = None,
    authorization: Optional[str] = Header(None)
):
    """Usage within [start, end] grouped by caller and by optimizer. Admin only."""
    try:
        await require_admin(authorization)
    except (AuthError, PermissionDeniedError) as e:
        return auth_error_response(e)

    now = datetime.now(timezone.utc)
    start_date = parse_date_param(start) or now - timedelta(days=Config.USAGE_REPORT_DEFAULT_DAYS)
    end_date = parse_date_param(end, end_of_day=True) or now

    try:
        by_user, by_optimizer = get_usage_store().get_report(start_date.timestamp(), end_date.timestamp())
        return {
            "ranking": by_user,
            "optimizers": by_optimizer,
            "start": start_date.isoformat(),
            "end": end_date.isoformat(),
        }
    except Exception as e:
        app_logger.error(f"Usage report error: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR}
        )
