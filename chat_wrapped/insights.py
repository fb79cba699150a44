"""
Insights Module

Turns a ChatAggregate into the display-ready WrappedReport: top word and
emoji lists, average reply times, the superlative awards, the next message
milestone and the trailing one-year activity heatmap.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from .chat_stats import aggregate
from .constants import TOP_N, MILESTONE_STEP, HEATMAP_DAYS, HEATMAP_LEVELS, NO_WINNER
from .data_cleaning import TimeWindow, filter_messages
from .models import (
    Award,
    ChatAggregate,
    FrequencyEntry,
    HeatmapCell,
    Message,
    Milestone,
    ParticipantStat,
    ReplyStat,
    WrappedReport,
)


# key, icon, title, counter, description template
COUNTER_AWARDS = [
    ('yapper', '\N{CHEERING MEGAPHONE}', 'The Yapper',
     lambda p: p.words, 'Sent {value:,} words total.'),
    ('night_owl', '\N{OWL}', 'Night Owl',
     lambda p: p.night_owl, 'Most active between 12 AM - 5 AM.'),
    ('media_mogul', '\N{CAMERA WITH FLASH}', 'Media Mogul',
     lambda p: p.media, 'Spams photos and videos the most.'),
    ('double_texter', '\N{MOBILE PHONE}', 'Double Texter',
     lambda p: p.double_texts, 'Sends multiple messages in a row.'),
    ('novelist', '\N{SCROLL}', 'Novelist',
     lambda p: p.longest_msg, 'Wrote the single longest text message.'),
    ('laughing_stock', '\N{FACE WITH TEARS OF JOY}', 'Laughing Stock',
     lambda p: p.laugh_count, "Uses 'haha', 'lol', 'rofl' the most."),
    ('apologist', '\N{FACE WITH PLEADING EYES}', 'The Apologist',
     lambda p: p.sorry_count, "Says 'sorry' way too much."),
    ('link_lord', '\N{LINK SYMBOL}', 'Link Lord',
     lambda p: p.links, 'Shares the most URLs.'),
]


def top_entries(table: Dict[str, FrequencyEntry], n: int = TOP_N) -> List[FrequencyEntry]:
    """Highest totals first; ties keep discovery order."""
    return sorted(table.values(), key=lambda entry: entry.total, reverse=True)[:n]


def reply_statistics(reply_times: Dict[str, List[int]]) -> List[ReplyStat]:
    """Mean reply latency per sender, 0 for senders who never replied."""
    return [
        ReplyStat(
            name=name,
            samples=len(samples),
            average_minutes=sum(samples) / len(samples) if samples else 0.0,
        )
        for name, samples in reply_times.items()
    ]


def next_milestone(total_messages: int, step: int = MILESTONE_STEP) -> int:
    """Smallest multiple of step that is >= total_messages."""
    return -(-total_messages // step) * step


def heatmap_level(count: int) -> int:
    for threshold, level in HEATMAP_LEVELS:
        if count > threshold:
            return level
    return 0


def build_heatmap(daily_counts: Dict[date, int], now: Optional[datetime] = None) -> List[HeatmapCell]:
    """
    One cell per day from 365 days ago through today.

    Independent of the active time window; days without messages are 0.
    """
    today = (now or datetime.now()).date()
    days = pd.date_range(today - timedelta(days=HEATMAP_DAYS), today, freq='D')
    cells = []
    for day in days:
        day = day.date()
        count = daily_counts.get(day, 0)
        cells.append(HeatmapCell(date=day, count=count, level=heatmap_level(count)))
    return cells


def _first_max(candidates: Sequence, score: Callable):
    # max() keeps the first of equal maxima, i.e. a stable descending sort
    return max(candidates, key=score) if candidates else None


def _counter_award(stats: List[ParticipantStat], key, icon, title, counter, template) -> Award:
    winner = _first_max(stats, counter)
    value = counter(winner) if winner is not None else 0
    return Award(
        key=key,
        icon=icon,
        title=title,
        winner=winner.name if winner is not None else NO_WINNER,
        value=value,
        description=template.format(value=value),
    )


def _ghost_award(reply_stats: List[ReplyStat]) -> Award:
    # Only senders who actually replied are ranked
    repliers = [r for r in reply_stats if r.samples]
    ghost = min(repliers, key=lambda r: r.average_minutes) if repliers else None
    minutes = ghost.average_minutes if ghost is not None else 0.0
    return Award(
        key='ghost',
        icon='\N{GHOST}',
        title='The Ghost',
        winner=ghost.name if ghost is not None else NO_WINNER,
        value=minutes,
        description=f"Takes ~{int(minutes + 0.5)}m to reply.",
    )


def _instigator_award(starters: Dict[str, int]) -> Award:
    names = list(starters)
    winner = _first_max(names, starters.get)
    value = starters[winner] if winner is not None else 0
    return Award(
        key='instigator',
        icon='\N{FIRECRACKER}',
        title='Instigator',
        winner=winner if winner is not None else NO_WINNER,
        value=value,
        description='Revives dead chats after hours of silence.',
    )


def compute_awards(aggregate_result: ChatAggregate, reply_stats: List[ReplyStat]) -> List[Award]:
    """The ten superlative awards, in display order."""
    stats = list(aggregate_result.participant_stats.values())
    counter_awards = [_counter_award(stats, *entry) for entry in COUNTER_AWARDS]

    # Ghost and Yapper lead, Instigator follows Night Owl
    return [
        _ghost_award(reply_stats),
        counter_awards[0],
        counter_awards[1],
        _instigator_award(aggregate_result.starters),
        *counter_awards[2:],
    ]


def postprocess(aggregate_result: ChatAggregate, now: Optional[datetime] = None) -> WrappedReport:
    """
    Derive display-ready metrics from an aggregation pass.

    Args:
        aggregate_result: Output of chat_stats.aggregate
        now: Reference time for the heatmap window (defaults to now)

    Returns:
        WrappedReport
    """
    reply_stats = reply_statistics(aggregate_result.reply_times)
    total = aggregate_result.total_messages

    return WrappedReport(
        total_messages=total,
        participants=list(aggregate_result.participants),
        participant_stats=list(aggregate_result.participant_stats.values()),
        timeline=aggregate_result.timeline,
        hourly_counts=aggregate_result.hourly_counts,
        weekday_counts=aggregate_result.weekday_counts,
        activity_matrix=aggregate_result.activity_matrix,
        heatmap=build_heatmap(aggregate_result.daily_counts, now=now),
        starters=dict(aggregate_result.starters),
        reply_stats=reply_stats,
        top_words=top_entries(aggregate_result.word_frequencies),
        top_emojis=top_entries(aggregate_result.emoji_frequencies),
        streaks=aggregate_result.streaks,
        milestone=Milestone(current=total, next=next_milestone(total)),
        awards=compute_awards(aggregate_result, reply_stats),
    )


def analyze_chat(
    messages: Sequence[Message],
    allowed_senders: Optional[Sequence[str]],
    window=TimeWindow.ALL,
    vocab_length: int = 0,
    now: Optional[datetime] = None
) -> Optional[WrappedReport]:
    """
    Filter, aggregate and post-process in one call.

    allowed_senders=None selects everyone. Returns None when the selection
    contains no messages.
    """
    filtered = filter_messages(messages, window, allowed_senders, now=now)
    result = aggregate(filtered, allowed_senders, vocab_length=vocab_length, now=now)
    if result is None:
        return None
    return postprocess(result, now=now)
