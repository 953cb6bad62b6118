"""Retention rules for daily pools.

Retention counts distinct stored daily pools, not calendar days elapsed, so a
gap in creation (server downtime) never causes extra deletions.
"""

from typing import Iterable, List

from padpool.domain.pool_rules import is_daily_identifier
from padpool.models.dc_models import ServerDataMode

KEEP_INDEFINITELY = -1


def effective_days_to_keep(days_to_keep: int) -> int | None:
    """Return how many daily pools are kept, or None when kept indefinitely."""
    if days_to_keep == KEEP_INDEFINITELY:
        return None
    return max(1, days_to_keep)


def select_identifiers_to_delete(
    identifiers: Iterable[str], mode: ServerDataMode, days_to_keep: int
) -> List[str]:
    """Select the oldest daily pools that exceed the retention window

    Args:
        identifiers (Iterable[str]): Stored pool identifiers
        mode (ServerDataMode): Configured server data mode
        days_to_keep (int): -1 keeps everything, 0 and 1 keep only the newest pool

    Returns:
        List[str]: Identifiers to delete, oldest first
    """
    if mode != ServerDataMode.daily:
        return []
    keep = effective_days_to_keep(days_to_keep)
    if keep is None:
        return []

    daily = sorted(i for i in identifiers if is_daily_identifier(i))
    delete_count = len(daily) - keep
    if delete_count <= 0:
        return []
    return daily[:delete_count]
