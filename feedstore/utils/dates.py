# Copyright 2025 thestill.me
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Timestamp conversion between feed text and stored epoch seconds.

Entries arrive with textual dates (Atom uses ISO-8601, RSS uses RFC 2822)
and are stored as integer epoch seconds. On read they are rendered back as
ISO-8601 in UTC.
"""

import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional, Union

Timestamp = Union[str, int, float, datetime]


def now_epoch() -> int:
    """Current time as integer epoch seconds."""
    return int(time.time())


def is_numeric(value: Any) -> bool:
    """True for ints/floats and strings that hold a plain number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


# Range datetime.fromtimestamp() can render: 0001-01-01 .. 9999-12-31 UTC
MIN_EPOCH = -62135596800
MAX_EPOCH = 253402300799


def _checked_epoch(seconds: float) -> int:
    try:
        epoch = int(seconds)
    except (OverflowError, ValueError) as e:
        raise ValueError(f"Timestamp out of range: {seconds!r}") from e
    if not MIN_EPOCH <= epoch <= MAX_EPOCH:
        raise ValueError(f"Timestamp out of range: {seconds!r}")
    return epoch


def _to_epoch(dt: datetime) -> int:
    # Naive datetimes are taken to be UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return _checked_epoch(dt.timestamp())


def parse_timestamp(value: Optional[Timestamp]) -> int:
    """
    Parse a feed timestamp into epoch seconds.

    Accepts ISO-8601 text (including a trailing ``Z``), RFC 2822 text,
    datetime objects and values that are already numeric.

    Args:
        value: Timestamp to parse

    Returns:
        Epoch seconds

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None:
        raise ValueError("Timestamp is missing")

    if isinstance(value, datetime):
        return _to_epoch(value)

    if is_numeric(value):
        return _checked_epoch(float(value))

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Unparseable timestamp: {value!r}")

    text = value.strip()

    # ISO-8601 (Atom)
    try:
        return _to_epoch(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    # RFC 2822 (RSS)
    try:
        return _to_epoch(parsedate_to_datetime(text))
    except (TypeError, ValueError, OverflowError):
        pass

    raise ValueError(f"Unparseable timestamp: {value!r}")


def parse_optional_timestamp(value: Optional[Timestamp]) -> int:
    """Like parse_timestamp, but an empty value becomes the 0 sentinel."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    return parse_timestamp(value)


def format_timestamp(value: Any) -> Any:
    """
    Render a stored epoch value as ISO-8601 text in UTC.

    Values that are no longer numeric (already formatted) are returned
    unchanged, so formatting twice leaves the text intact. Numbers that no
    datetime can represent give None.
    """
    if not is_numeric(value):
        return value
    try:
        return datetime.fromtimestamp(_checked_epoch(float(value)), tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return None
