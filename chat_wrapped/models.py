"""
Data Model Module

Dataclasses shared by the parser, the aggregation pass and the report
builder. Data only; the pipeline stages own all of the logic.
"""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Dict, List, Optional
import uuid

import pandas as pd


def _new_message_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Message:
    """One reconstructed chat message, including its continuation lines."""
    timestamp:   datetime
    sender:      str
    content:     str
    is_media:    bool = False
    is_deleted:  bool = False
    is_edited:   bool = False
    link_count:  int = 0
    emojis:      List[str] = field(default_factory=list)
    words:       List[str] = field(default_factory=list)
    char_count:  int = 0
    word_count:  int = 0
    id:          str = field(default_factory=_new_message_id)

    @property
    def date(self) -> date:
        return self.timestamp.date()


@dataclass
class ParsedChat:
    """Parser output: messages sorted by timestamp, senders in first-seen order."""
    messages:     List[Message] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)


@dataclass
class SentimentCounts:
    pos:     int = 0
    neg:     int = 0
    neutral: int = 0        # reserved, never incremented


@dataclass
class ParticipantStat:
    """Running counters for one sender during a single aggregation pass."""
    name:         str
    messages:     int = 0
    words:        int = 0
    media:        int = 0
    emojis:       int = 0
    links:        int = 0
    deleted:      int = 0
    edited:       int = 0
    sentiment:    SentimentCounts = field(default_factory=SentimentCounts)
    night_owl:    int = 0   # 00:00 - 04:59
    early_bird:   int = 0   # 05:00 - 08:59
    double_texts: int = 0
    sorry_count:  int = 0
    laugh_count:  int = 0
    longest_msg:  int = 0   # max char_count


@dataclass
class FrequencyEntry:
    """Word or emoji frequency. total always equals sum(breakdown.values())."""
    key:       str
    total:     int = 0
    breakdown: Dict[str, int] = field(default_factory=dict)


@dataclass
class TimelineBucket:
    date:   date
    counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class HeatmapCell:
    date:  date
    count: int
    level: int


@dataclass
class ReplyStat:
    name:            str
    samples:         int
    average_minutes: float


@dataclass
class Streaks:
    longest: int = 0
    current: int = 0


@dataclass
class Milestone:
    current: int
    next:    int


@dataclass
class Award:
    key:         str
    icon:        str
    title:       str
    winner:      str
    value:       float
    description: str


@dataclass
class ChatAggregate:
    """Raw output of the single aggregation pass over a filtered selection."""
    total_messages:    int
    participants:      List[str]
    participant_stats: Dict[str, ParticipantStat]
    timeline:          List[TimelineBucket]
    hourly_counts:     List[int]
    weekday_counts:    List[int]
    activity_matrix:   List[List[int]]
    daily_counts:      Dict[date, int]
    word_frequencies:  Dict[str, FrequencyEntry]
    emoji_frequencies: Dict[str, FrequencyEntry]
    starters:          Dict[str, int]
    reply_times:       Dict[str, List[int]]
    streaks:           Streaks


@dataclass
class WrappedReport:
    """Display-ready result handed to the presentation layer."""
    total_messages:    int
    participants:      List[str]
    participant_stats: List[ParticipantStat]
    timeline:          List[TimelineBucket]
    hourly_counts:     List[int]
    weekday_counts:    List[int]
    activity_matrix:   List[List[int]]
    heatmap:           List[HeatmapCell]
    starters:          Dict[str, int]
    reply_stats:       List[ReplyStat]
    top_words:         List[FrequencyEntry]
    top_emojis:        List[FrequencyEntry]
    streaks:           Streaks
    milestone:         Milestone
    awards:            List[Award]

    def to_dict(self) -> Dict:
        """JSON-serialisable view with dates rendered as ISO strings."""
        data = asdict(self)
        for bucket in data['timeline']:
            bucket['date'] = bucket['date'].isoformat()
        for cell in data['heatmap']:
            cell['date'] = cell['date'].isoformat()
        return data

    def timeline_frame(self) -> pd.DataFrame:
        """Daily message counts, one row per day and one column per participant."""
        if not self.timeline:
            return pd.DataFrame(columns=self.participants)
        frame = pd.DataFrame(
            [bucket.counts for bucket in self.timeline],
            index=pd.DatetimeIndex([bucket.date for bucket in self.timeline], name='date'),
        )
        return frame.reindex(columns=self.participants, fill_value=0)

    def get_award(self, key: str) -> Optional[Award]:
        for award in self.awards:
            if award.key == key:
                return award
        return None
