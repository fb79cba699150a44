"""
Chat Statistics Module

The aggregation engine: one ordered pass over the filtered messages that
fills per-participant counters, temporal histograms, vocabulary and emoji
tables and conversational flow metrics, followed by timeline gap filling
and streak computation.
"""

import logging
from collections import namedtuple
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .constants import (
    STARTER_GAP_MINUTES,
    DOUBLE_TEXT_MINUTES,
    NIGHT_OWL_HOURS,
    EARLY_BIRD_HOURS,
)
from .models import (
    ChatAggregate,
    FrequencyEntry,
    Message,
    ParticipantStat,
    Streaks,
    TimelineBucket,
)
from .nlp_analysis import is_counted_word, is_positive, is_negative, is_apology, is_laugh

logger = logging.getLogger(__name__)


FlowEvent = namedtuple('FlowEvent', ['kind', 'sender', 'minutes'])

STARTER = 'starter'
REPLY = 'reply'
DOUBLE_TEXT = 'double_text'


def gap_minutes(previous: datetime, current: datetime) -> int:
    """Whole minutes between two timestamps, truncated toward zero."""
    return int((current - previous).total_seconds() / 60)


class ConversationFlow:
    """
    Classifies each message against the previous qualifying message.

    State is only the previous message. observe() consumes the next message
    and returns at most one FlowEvent:

    - gap > 240 min: the sender started a new conversation
    - otherwise, different sender: a reply, with the gap as its latency
    - otherwise, same sender within 5 min: a double text
    - otherwise nothing
    """

    def __init__(self):
        self.previous: Optional[Message] = None

    def observe(self, message: Message) -> Optional[FlowEvent]:
        previous, self.previous = self.previous, message
        if previous is None:
            return None

        minutes = gap_minutes(previous.timestamp, message.timestamp)
        if minutes > STARTER_GAP_MINUTES:
            return FlowEvent(STARTER, message.sender, minutes)
        if message.sender != previous.sender:
            return FlowEvent(REPLY, message.sender, minutes)
        if minutes < DOUBLE_TEXT_MINUTES:
            return FlowEvent(DOUBLE_TEXT, message.sender, minutes)
        return None


def _count_frequency(table: Dict[str, FrequencyEntry], key: str, sender: str) -> None:
    entry = table.get(key)
    if entry is None:
        entry = table[key] = FrequencyEntry(key=key)
    entry.total += 1
    entry.breakdown[sender] = entry.breakdown.get(sender, 0) + 1


def aggregate(
    messages: Sequence[Message],
    allowed_senders: Optional[Iterable[str]],
    vocab_length: int = 0,
    now: Optional[datetime] = None
) -> Optional[ChatAggregate]:
    """
    Run the single ordered aggregation pass.

    Args:
        messages: Filtered messages, sorted by timestamp
        allowed_senders: Selected participants, in display order. None
            selects every sender, in first-seen order
        vocab_length: 0 counts words of 3+ characters, N > 0 only words of
            exactly N characters
        now: Reference time for the current streak (defaults to now)

    Returns:
        ChatAggregate, or None when there are no messages to analyze
    """
    if not messages:
        return None

    if allowed_senders is None:
        allowed_senders = (msg.sender for msg in messages)
    participants = list(dict.fromkeys(allowed_senders))
    stats = {name: ParticipantStat(name=name) for name in participants}
    starters = {name: 0 for name in participants}
    reply_times: Dict[str, List[int]] = {name: [] for name in participants}

    # rows: weekday (Sunday = 0), columns: hour
    activity = np.zeros((7, 24), dtype=int)
    timeline_map: Dict[date, Dict[str, int]] = {}
    daily_counts: Dict[date, int] = {}
    word_frequencies: Dict[str, FrequencyEntry] = {}
    emoji_frequencies: Dict[str, FrequencyEntry] = {}

    flow = ConversationFlow()
    total = 0

    for msg in messages:
        p = stats.get(msg.sender)
        if p is None:
            continue
        total += 1

        # Basic counts
        p.messages += 1
        p.media += int(msg.is_media)
        p.links += msg.link_count
        p.deleted += int(msg.is_deleted)
        p.edited += int(msg.is_edited)
        p.emojis += len(msg.emojis)
        p.longest_msg = max(p.longest_msg, msg.char_count)

        # Temporal
        hour = msg.timestamp.hour
        weekday = (msg.timestamp.weekday() + 1) % 7
        activity[weekday, hour] += 1

        if hour in NIGHT_OWL_HOURS:
            p.night_owl += 1
        elif hour in EARLY_BIRD_HOURS:
            p.early_bird += 1

        day = msg.date
        day_counts = timeline_map.setdefault(day, {})
        day_counts[msg.sender] = day_counts.get(msg.sender, 0) + 1
        daily_counts[day] = daily_counts.get(day, 0) + 1

        # Vocabulary and keywords
        if not msg.is_media:
            for word in msg.words:
                if not is_counted_word(word, vocab_length):
                    continue
                p.words += 1
                _count_frequency(word_frequencies, word, msg.sender)

                if is_positive(word):
                    p.sentiment.pos += 1
                if is_negative(word):
                    p.sentiment.neg += 1
                if is_apology(word):
                    p.sorry_count += 1
                if is_laugh(word):
                    p.laugh_count += 1

        for emoji in msg.emojis:
            _count_frequency(emoji_frequencies, emoji, msg.sender)

        # Conversational flow
        event = flow.observe(msg)
        if event is None:
            continue
        if event.kind == STARTER:
            starters[event.sender] += 1
        elif event.kind == REPLY:
            reply_times[event.sender].append(event.minutes)
        elif event.kind == DOUBLE_TEXT:
            p.double_texts += 1

    if total == 0:
        return None

    logger.debug(f"Aggregated {total} messages across {len(participants)} participants")

    return ChatAggregate(
        total_messages=total,
        participants=participants,
        participant_stats=stats,
        timeline=fill_timeline(timeline_map, participants),
        hourly_counts=activity.sum(axis=0).tolist(),
        weekday_counts=activity.sum(axis=1).tolist(),
        activity_matrix=activity.tolist(),
        daily_counts=daily_counts,
        word_frequencies=word_frequencies,
        emoji_frequencies=emoji_frequencies,
        starters=starters,
        reply_times=reply_times,
        streaks=compute_streaks(daily_counts.keys(), now=now),
    )


def fill_timeline(
    timeline_map: Dict[date, Dict[str, int]],
    participants: List[str]
) -> List[TimelineBucket]:
    """
    One bucket per calendar day from the first to the last active day.

    Days without messages and participants without messages on a day get
    explicit zero counts.
    """
    if not timeline_map:
        return []

    days = pd.date_range(min(timeline_map), max(timeline_map), freq='D')
    timeline = []
    for day in days:
        day = day.date()
        counts = timeline_map.get(day, {})
        timeline.append(TimelineBucket(
            date=day,
            counts={name: counts.get(name, 0) for name in participants},
        ))
    return timeline


def compute_streaks(active_days: Iterable[date], now: Optional[datetime] = None) -> Streaks:
    """
    Longest and current runs of consecutive active calendar days.

    The current streak is only kept if the last active day is today or
    yesterday, otherwise it is 0.
    """
    days = sorted(set(active_days))
    if not days:
        return Streaks()

    longest = 0
    run = 0
    last_day = None
    for day in days:
        if last_day is not None and (day - last_day).days == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
        last_day = day
    longest = max(longest, run)

    today = (now or datetime.now()).date()
    current = run if (today - last_day).days <= 1 else 0

    return Streaks(longest=longest, current=current)
