# Rev 0.2.0
# Display-only helpers; nothing in services/ depends on these.
from __future__ import annotations
from datetime import datetime, timezone


def format_currency(amount: float) -> str:
    """'₱1,234.50'; negatives as '-₱12.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}₱{abs(amount):,.2f}"


def _local(ts_ms: int) -> datetime:
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).astimezone()


def format_date(ts_ms: int | None) -> str:
    """'Oct 14, 2025' or '—'."""
    if not ts_ms:
        return "—"
    return _local(ts_ms).strftime("%b %d, %Y")


def format_datetime(ts_ms: int | None) -> str:
    if not ts_ms:
        return "—"
    return _local(ts_ms).strftime("%b %d, %Y %H:%M")
