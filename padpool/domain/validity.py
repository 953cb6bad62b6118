from padpool.domain.retention import effective_days_to_keep
from padpool.models.dc_models import ServerDataMode


def describe_validity(mode: ServerDataMode, days_to_keep: int, pool_date: str) -> str:
    """Describe how long a key encoded against pool_date stays usable."""
    if mode == ServerDataMode.single:
        return "valid indefinitely (using single server file)"

    keep = effective_days_to_keep(days_to_keep)
    if keep is None:
        return f"valid indefinitely (using server data from {pool_date})"
    if keep == 1:
        return f"valid for 1 day (using server data from {pool_date})"
    return f"valid for {keep} days (using server data from {pool_date})"
