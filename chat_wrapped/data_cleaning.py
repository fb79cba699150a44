"""
Data Cleaning Module

Line normalization, system message detection, content tagging and the
filter stage that selects the working set of messages for analysis.
"""

import re
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .constants import (
    BIDI_CONTROL_CHARS,
    SYSTEM_MESSAGE_PHRASES,
    SYSTEM_MESSAGE_SHAPES,
    MEDIA_MARKERS,
    DELETED_MARKERS,
    EDITED_MARKERS,
)
from .exceptions import ConfigurationError
from .models import Message


_BIDI_PATTERN = re.compile('[' + ''.join(BIDI_CONTROL_CHARS) + ']')

# Phrases match as whole words ("Cleft" is not "left"), shapes are regexes
_SYSTEM_PATTERN = re.compile('|'.join(
    [rf"(?<!\w){re.escape(phrase)}(?!\w)" for phrase in SYSTEM_MESSAGE_PHRASES]
    + SYSTEM_MESSAGE_SHAPES
))


class TimeWindow(str, Enum):
    """Time range selector for the filter stage."""
    ALL = 'all'
    WEEK = 'week'
    MONTH = 'month'
    YEAR = 'year'

    @classmethod
    def parse(cls, value) -> 'TimeWindow':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown time window: {value!r}. "
                f"Use one of {[w.value for w in cls]}"
            ) from None


def normalize_line(line: str) -> str:
    """Remove bidirectional control marks and surrounding whitespace."""
    return _BIDI_PATTERN.sub('', line).strip()


def is_system_message(sender: str) -> bool:
    """
    Check whether a header's sender field is really a system event.

    Group creation, member changes, subject/icon/description edits and the
    encryption, disappearing-message and security-code notices all arrive in
    the sender position of a header line.
    """
    return bool(_SYSTEM_PATTERN.search(sender))


def detect_content_flags(content: str) -> Dict[str, bool]:
    """
    Tag a message body as media placeholder, deleted or edited.

    The three flags are independent of each other.
    """
    return {
        'is_media': any(marker in content for marker in MEDIA_MARKERS),
        'is_deleted': any(marker in content for marker in DELETED_MARKERS),
        'is_edited': any(marker in content for marker in EDITED_MARKERS),
    }


def window_start(window, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Lower bound of a time window relative to now, at local midnight.

    Weeks start on Sunday. Returns None for the all-time window.
    """
    window = TimeWindow.parse(window)
    if window is TimeWindow.ALL:
        return None

    now = now or datetime.now()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if window is TimeWindow.WEEK:
        days_since_sunday = (midnight.weekday() + 1) % 7
        return midnight - timedelta(days=days_since_sunday)
    if window is TimeWindow.MONTH:
        return midnight.replace(day=1)
    return midnight.replace(month=1, day=1)


def filter_messages(
    messages: Iterable[Message],
    window=TimeWindow.ALL,
    allowed_senders: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None
) -> List[Message]:
    """
    Select the working subset of messages for analysis.

    Args:
        messages: Parsed messages, already sorted by timestamp
        window: 'all', 'week', 'month' or 'year' (or a TimeWindow)
        allowed_senders: Participant allow-list; None keeps every sender
        now: Reference time for the window boundary (defaults to now)

    Returns:
        New list with the qualifying messages, in their original order
    """
    start = window_start(window, now)
    allowed = set(allowed_senders) if allowed_senders is not None else None

    return [
        msg for msg in messages
        if (start is None or msg.timestamp >= start)
        and (allowed is None or msg.sender in allowed)
    ]
