"""
date_time_helper.py

Helper functions for conversion and formatting of date and time values.
Storage is always UTC ISO8601; display uses the configured timezone
([General] display_timezone).

All features and modules should use ONLY these helpers for date/time logic.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from core.config.config_service import config_service

# Local timezone for display
LOCAL_TZ = ZoneInfo(config_service.general.display_timezone)


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string (YYYY-MM-DDTHH:MM:SS+00:00).
    Used for logging and DB storage.
    """
    return utc_now().replace(microsecond=0).isoformat()


def to_utc_iso(value: datetime) -> str:
    """Serialize a datetime for storage; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_utc_iso(text: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp back into an aware UTC datetime."""
    if not text:
        return None
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_to_local_str(utc_iso: str) -> str:
    """
    Formats a UTC ISO8601 timestamp as a localized, human-readable string for display.

    :param utc_iso: UTC time as ISO string (from DB/logs)
    :return: String in format "YYYY.MM.DD HH:mm:ss" (local time)
    """
    dt_utc = parse_utc_iso(utc_iso)
    dt_local = dt_utc.astimezone(LOCAL_TZ)
    return dt_local.strftime("%Y.%m.%d %H:%M:%S")
