"""Today's date, injectable so that rotation and key dating are testable.

Production code uses utc_today. Tests pass a callable returning a fixed date.
"""

from datetime import date, datetime, timezone


def utc_today() -> date:
    return datetime.now(timezone.utc).date()
