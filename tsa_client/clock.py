"""
Timestamp and nonce defaults for signed requests.

Both helpers are pure functions of the system clock and RNG, so they can be
called from any number of threads at once.
"""

import datetime
import uuid
from email.utils import format_datetime
from typing import Optional


def rfc2616_date(moment: Optional[datetime.datetime] = None) -> str:
    """
    Format a moment as an RFC 2616 date, e.g. ``Tue, 10 Jan 2012 19:36:42 GMT``.

    Day and month names are always English regardless of the process locale.

    Args:
        moment: Time to format; naive values are taken to be UTC.
            Defaults to now.

    Returns:
        RFC 2616 formatted date string in GMT
    """
    if moment is None:
        moment = datetime.datetime.now(datetime.timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    else:
        moment = moment.astimezone(datetime.timezone.utc)

    return format_datetime(moment.replace(microsecond=0), usegmt=True)


def new_nonce() -> str:
    """Generate a random UUID4 nonce for a single request."""
    return str(uuid.uuid4())
