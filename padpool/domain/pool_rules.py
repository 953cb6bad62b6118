"""Pool identifier and file naming rules.

Identifiers are either the fixed single-pool constant or a UTC calendar date
in ``YYYY-MM-DD`` form. Date identifiers sort chronologically under plain
string ordering, which retention relies on.
"""

import re
from datetime import date, datetime

from padpool.models.dc_models import ServerDataMode

POOL_SIZE = 1024 * 1024 * 10
SINGLE_POOL_IDENTIFIER = "single"
SINGLE_POOL_FILENAME = "server_data.bin"
DAILY_POOL_PREFIX = "server_data_"
POOL_SUFFIX = ".bin"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_daily_identifier(identifier: str) -> bool:
    """Return True if the identifier is a real calendar date in YYYY-MM-DD form."""
    if not _DATE_PATTERN.match(identifier):
        return False
    try:
        datetime.strptime(identifier, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def date_identifier(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def current_identifier(mode: ServerDataMode, today: date) -> str:
    """Return the identifier of the pool that should exist right now.

    Args:
        mode (ServerDataMode): Configured server data mode
        today (date): Current UTC date

    Returns:
        str: The fixed identifier in single mode, today's date in daily mode
    """
    if mode == ServerDataMode.single:
        return SINGLE_POOL_IDENTIFIER
    return date_identifier(today)


def resolve_identifier(mode: ServerDataMode, requested: str) -> str | None:
    """Map a caller supplied date to a pool identifier.

    Single mode ignores the requested value. Daily mode accepts only
    well-formed dates and returns None for anything else.
    """
    if mode == ServerDataMode.single:
        return SINGLE_POOL_IDENTIFIER
    if not is_daily_identifier(requested):
        return None
    return requested


def filename_for(identifier: str) -> str:
    if identifier == SINGLE_POOL_IDENTIFIER:
        return SINGLE_POOL_FILENAME
    return f"{DAILY_POOL_PREFIX}{identifier}{POOL_SUFFIX}"


def identifier_from_filename(filename: str) -> str | None:
    """Inverse of filename_for. Returns None for files that are not pools."""
    if filename == SINGLE_POOL_FILENAME:
        return SINGLE_POOL_IDENTIFIER
    if not (filename.startswith(DAILY_POOL_PREFIX) and filename.endswith(POOL_SUFFIX)):
        return None
    identifier = filename[len(DAILY_POOL_PREFIX):-len(POOL_SUFFIX)]
    if not is_daily_identifier(identifier):
        return None
    return identifier
