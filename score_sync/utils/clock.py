from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

UTC7_ZONE_NAME = "Asia/Bangkok"
UTC7_OFFSET = timedelta(hours=7)


def resolve_utc7_zone(zone_name: str = UTC7_ZONE_NAME) -> tzinfo:
    """Named zone when the host has tz data for it, a fixed +07:00 offset otherwise."""
    try:
        return ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        logger.debug("time zone %s unavailable (%s), using fixed +07:00 offset", zone_name, exc)
        return timezone(UTC7_OFFSET)


def format_timestamp(*, use_utc7: bool = False, now: datetime | None = None, zone_name: str = UTC7_ZONE_NAME) -> str:
    """ISO-8601 timestamp for ``created_at``, in UTC or UTC+7 civil time."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    if use_utc7:
        return moment.astimezone(resolve_utc7_zone(zone_name)).isoformat()
    return moment.astimezone(timezone.utc).isoformat()


class TimestampClock:
    def __init__(self, use_utc7: bool = False, zone_name: str = UTC7_ZONE_NAME):
        self.use_utc7 = use_utc7
        self.zone_name = zone_name

    def __call__(self) -> str:
        return format_timestamp(use_utc7=self.use_utc7, zone_name=self.zone_name)
