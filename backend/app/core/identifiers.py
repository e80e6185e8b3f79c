"""
Record identifier helpers.

Records are keyed by 32-character lowercase hex ids. Tracking ids are
short human-readable codes printed on parcel labels.
"""

import re
import uuid
from datetime import datetime

from backend.app.core.exceptions import InvalidIdentifierError

_RECORD_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def generate_id() -> str:
    return uuid.uuid4().hex


def parse_record_id(value: str) -> str:
    """
    Validate a record id coming from a request.

    Raises:
        InvalidIdentifierError: 400 if the value is not a well-formed id
    """
    candidate = (value or "").strip().lower()
    if not _RECORD_ID_PATTERN.match(candidate):
        raise InvalidIdentifierError(value)
    return candidate


def generate_tracking_id(now: datetime = None) -> str:
    """Build a tracking id like PCL-20250101-1A2B3C."""
    now = now or datetime.utcnow()
    return f"PCL-{now:%Y%m%d}-{uuid.uuid4().hex[:6].upper()}"
