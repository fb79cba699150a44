"""Shared test helpers for chat_wrapped tests.

Regular functions and sample transcripts (not fixtures) that can be
imported by any test module.
"""

import io
import zipfile
from datetime import datetime, timedelta

from chat_wrapped.data_cleaning import detect_content_flags
from chat_wrapped.models import Message
from chat_wrapped.nlp_analysis import count_links, extract_emojis, extract_words


GRIN = '\U0001F600'
HEART_EYES = '\U0001F60D'
LRM = '\U0000200E'

# Fixed reference time: Wednesday 17 January 2024, noon
NOW = datetime(2024, 1, 17, 12, 0)

# 15/01/2024 is a Monday; day > 12 so the dates are unambiguous
ANDROID_CHAT = (
    "15/01/2024, 09:00 - Messages and calls are end-to-end encrypted. Tap to learn more.\n"
    "15/01/2024, 09:01 - Alice created group \"Trip: 2024\"\n"
    f"15/01/2024, 09:05 - Alice: Good morning everyone! {GRIN}\n"
    "15/01/2024, 09:06 - Bob: morning lol\n"
    "check this https://example.com/a\n"
    "15/01/2024, 09:08 - Bob: <Media omitted>\n"
    f"16/01/2024, 23:30 - Alice: sorry sorry haha {GRIN}{GRIN}\n"
)

IOS_CHAT = (
    f"{LRM}[15/08/2024, 10:00:00] Alice: hey\n"
    "[15/08/2024, 10:02:30] Bob: hi there\n"
    f"[8/16/24, 9:15:00 PM] Alice: {LRM}image omitted\n"
)


def make_message(sender: str, timestamp: datetime, content: str = 'hello there', **overrides) -> Message:
    """Build a Message the way the parser would for a single-line body."""
    words = extract_words(content)
    fields = dict(
        timestamp=timestamp,
        sender=sender,
        content=content,
        link_count=count_links(content),
        emojis=extract_emojis(content),
        words=words,
        char_count=len(content),
        word_count=len(words),
    )
    fields.update(detect_content_flags(content))
    fields.update(overrides)
    return Message(**fields)


def minutes_after(start: datetime, minutes: float) -> datetime:
    return start + timedelta(minutes=minutes)


def zip_bytes(entries) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def patch_central_directory(data: bytes, offset: int, value: int) -> bytes:
    """Overwrite a 2-byte field of the first central directory header."""
    start = data.index(b"PK\x01\x02") + offset
    patched = bytearray(data)
    patched[start:start + 2] = value.to_bytes(2, 'little')
    return bytes(patched)


def encrypted_chat_zip() -> bytes:
    """A zip whose chat entry claims to be password protected."""
    # general purpose flag bit 0 = encrypted
    return patch_central_directory(zip_bytes({"chat.txt": b"hi"}), 8, 0x1)
