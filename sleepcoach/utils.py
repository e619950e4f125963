from __future__ import annotations
from datetime import datetime, timezone
from dateutil import parser as dtp


def to_dt(x: str) -> datetime:
    dt = dtp.isoparse(x)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)
