"""
Data Extraction Module

Handles loading WhatsApp chat exports and reconstructing messages from them.
Supports both zip and txt files, and both the iOS ("[date, time] sender:")
and Android ("date, time - sender:") header styles.
"""

import io
import logging
import re
import warnings
import zlib
from datetime import date, datetime, time
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Union
from zipfile import BadZipFile, ZipFile, ZipInfo

import pandas as pd

from .data_cleaning import normalize_line, is_system_message, detect_content_flags
from .exceptions import ChatTextNotFoundError, InvalidArchiveError, UnsupportedFileError
from .models import Message, ParsedChat
from .nlp_analysis import count_links, extract_emojis, extract_words

logger = logging.getLogger(__name__)

# [25/08/2024, 10:00:00] Alice: body   or   25/08/24, 10:00 pm - Alice: body
HEADER_PATTERN = re.compile(
    r"^\[?(\d{1,2}[/-]\d{1,2}[/-](?:\d{4}|\d{2})),?\s"
    r"(\d{1,2}:\d{2}(?::\d{2})?(?:\s?[AaPp][Mm])?)\]?\s-?\s?"
    r"([^:]+):\s(.*)$"
)
DATE_PARTS_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})")


def read_chat_archive(data: bytes) -> str:
    """
    Extract the chat text from a zipped WhatsApp export.

    The first .txt entry that is neither a directory nor macOS metadata is
    used (exports normally contain exactly one).

    Raises:
        InvalidArchiveError: If data is not a readable zip archive, or the
            chat entry is encrypted or uses an unsupported compression
        ChatTextNotFoundError: If the archive has no .txt entry
    """
    try:
        with ZipFile(io.BytesIO(data), "r") as zip_file:
            txt_entries = [info for info in zip_file.infolist() if _is_chat_entry(info)]
            if not txt_entries:
                raise ChatTextNotFoundError(
                    f"No .txt file found in archive. Entries: {zip_file.namelist()}"
                )
            with zip_file.open(txt_entries[0], "r") as file:
                raw = file.read()
    except (BadZipFile, zlib.error, EOFError) as e:
        raise InvalidArchiveError(f"Not a valid zip archive: {e}") from e
    except (RuntimeError, NotImplementedError) as e:
        # Password-protected entry or a compression method zipfile lacks
        raise InvalidArchiveError(f"Cannot extract chat from archive: {e}") from e

    logger.debug(f"Read chat entry {txt_entries[0].filename} from archive")
    return _decode(raw)


def read_chat_text(file_path: Union[str, Path]) -> str:
    """
    Unified loader supporting both .zip and .txt files.

    A path without an extension is tried as .zip first, then as .txt.

    Args:
        file_path: Path to the WhatsApp export file

    Returns:
        Decoded chat text

    Raises:
        FileNotFoundError: If the file doesn't exist
        UnsupportedFileError: If the file is neither .zip nor .txt
        InvalidArchiveError / ChatTextNotFoundError: See read_chat_archive
    """
    path = Path(file_path)

    if not path.suffix:
        for candidate in (path.with_suffix('.zip'), path.with_suffix('.txt')):
            if candidate.exists():
                path = candidate
                break

    if not path.exists():
        raise FileNotFoundError(
            f"{path} not found. Please provide a valid WhatsApp export file."
        )

    suffix = path.suffix.lower()
    if suffix == '.zip':
        return read_chat_archive(path.read_bytes())
    if suffix == '.txt':
        return _decode(path.read_bytes())
    raise UnsupportedFileError(f"Unsupported file type: {path.name}. Use .zip or .txt")


def load_chat(file_path: Union[str, Path], now: Optional[datetime] = None) -> ParsedChat:
    """Read an export from disk and parse it."""
    return parse_chat(read_chat_text(file_path), now=now)


def parse_message_header(line: str) -> Optional[Dict[str, str]]:
    """
    Match a normalized line against the message header pattern.

    Returns:
        Dictionary with date, time, sender and message fields, or None when
        the line is not a header (i.e. it is a continuation line)
    """
    match = HEADER_PATTERN.match(line)
    if not match:
        return None
    return {
        'date': match.group(1),
        'time': match.group(2),
        'sender': match.group(3).strip(),
        'message': match.group(4).strip(),
    }


def parse_timestamp(date_text: str, time_text: str, now: Optional[datetime] = None) -> datetime:
    """
    Parse header date and time with the day/month swap heuristic.

    Month-first is the default. A leading group above 12 cannot be a month,
    so it is swapped into the day position before parsing. Otherwise the
    month-first reading is tried and, if that is not a valid date, the
    swapped reading. Ambiguous dates such as 03/04/2024 therefore resolve
    month-first (4 March), which is wrong for day-first locales.

    Date and clock parts are resolved separately, each through a cache
    keyed on the raw header text.

    Falls back to now (wall clock if not given) when nothing parses.
    """
    day = _resolve_date(date_text.strip())
    clock = _resolve_clock(time_text.strip())

    if day is None or clock is None:
        logger.warning(f"Unparsable date {date_text + ' ' + time_text!r}, using current time")
        return now or datetime.now()
    return datetime.combine(day, clock)


@lru_cache(maxsize=16384)
def _resolve_date(date_text: str) -> Optional[date]:
    text = date_text.replace('-', '/')

    parts = DATE_PARTS_PATTERN.match(text)
    if parts:
        swapped = DATE_PARTS_PATTERN.sub(r"\2/\1/\3", text, count=1)
        if int(parts.group(1)) > 12:
            parsed = _to_datetime(swapped)
        else:
            parsed = _to_datetime(text)
            if parsed is None:
                parsed = _to_datetime(swapped)
    else:
        parsed = _to_datetime(text)

    return parsed.date() if parsed is not None else None


@lru_cache(maxsize=65536)
def _resolve_clock(time_text: str) -> Optional[time]:
    # Narrow no-break spaces before AM/PM collapse to a plain space
    parsed = _to_datetime(re.sub(r"\s+", " ", time_text))
    return parsed.time() if parsed is not None else None


def parse_chat(text: str, now: Optional[datetime] = None) -> ParsedChat:
    """
    Reconstruct messages from the raw text of a chat export.

    Lines that do not start with a header are appended to the message in
    progress; lines before the first header are dropped. System event
    headers are discarded along with any lines that follow them.

    Args:
        text: Full decoded export
        now: Fallback timestamp for unparsable dates

    Returns:
        ParsedChat with messages sorted by timestamp and participants in
        first-seen order
    """
    messages: List[Message] = []
    participants: Dict[str, None] = {}
    current_message: Optional[Message] = None
    dropped = 0

    for raw_line in text.split('\n'):
        line = normalize_line(raw_line)
        if not line:
            continue

        header = parse_message_header(line)

        if header is not None:
            # This is a new message - save the previous one if it exists
            if current_message is not None:
                messages.append(current_message)
                current_message = None

            if is_system_message(header['sender']):
                logger.debug(f"Skipped system message: {header['sender']}")
                continue

            participants.setdefault(header['sender'], None)
            current_message = _start_message(header, now)

        elif current_message is not None:
            _append_continuation(current_message, line)
        else:
            dropped += 1

    if current_message is not None:
        messages.append(current_message)

    if dropped:
        logger.debug(f"Dropped {dropped} unattributable lines")

    messages.sort(key=lambda msg: msg.timestamp)
    logger.info(f"Parsed {len(messages)} messages from {len(participants)} participants")

    return ParsedChat(messages=messages, participants=list(participants))


def _start_message(header: Dict[str, str], now: Optional[datetime]) -> Message:
    content = header['message']
    words = extract_words(content)
    return Message(
        timestamp=parse_timestamp(header['date'], header['time'], now=now),
        sender=header['sender'],
        content=content,
        link_count=count_links(content),
        emojis=extract_emojis(content),
        words=words,
        char_count=len(content),
        word_count=len(words),
        **detect_content_flags(content),
    )


def _append_continuation(message: Message, line: str) -> None:
    words = extract_words(line)
    message.content += '\n' + line
    message.emojis.extend(extract_emojis(line))
    message.words.extend(words)
    message.link_count += count_links(line)
    # +1 for the joining newline
    message.char_count += len(line) + 1
    message.word_count += len(words)


def _to_datetime(text: str) -> Optional[datetime]:
    with warnings.catch_warnings():
        # pandas warns when it has to guess a day-first format
        warnings.simplefilter('ignore', UserWarning)
        parsed = pd.to_datetime(text, dayfirst=False, errors='coerce')
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def _is_chat_entry(info: ZipInfo) -> bool:
    return (
        info.filename.lower().endswith('.txt')
        and not info.is_dir()
        and '__MACOSX' not in info.filename
    )


def _decode(raw: bytes) -> str:
    # utf-8-sig strips the BOM some exports start with
    return raw.decode('utf-8-sig', errors='replace')
