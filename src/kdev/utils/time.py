from datetime import datetime, timedelta, timezone
from typing import Optional


def format_age(age: timedelta) -> str:
    """Formats an age the way kubectl does, e.g. '45s', '12m', '3h', '2d'."""
    seconds = max(int(age.total_seconds()), 0)
    if seconds >= 86400:
        return f"{seconds // 86400}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    if seconds >= 60:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def age_since(created: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Age of a resource from its creation timestamp."""
    if created is None:
        return "Unknown"
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return format_age(now - created)
