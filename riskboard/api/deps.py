# riskboard/api/deps.py
from datetime import datetime
from typing import Optional

from fastapi import Query

from riskboard.core.errors import InvalidInput


def get_now(
    as_of: Optional[str] = Query(
        None,
        description="Evaluate as of this local date/time instead of the server clock (YYYY-MM-DD or ISO datetime).",
    ),
) -> datetime:
    """The single place a request reads the wall clock."""
    if not as_of:
        return datetime.now()
    try:
        moment = datetime.fromisoformat(as_of.strip())
    except ValueError:
        raise InvalidInput(f"Invalid as_of value: {as_of!r}", field="as_of", value=as_of) from None
    # naive local time; a zone suffix is dropped, not converted
    return moment.replace(tzinfo=None)
