"""
Chat Wrapped Package

Parses WhatsApp chat exports (txt or zip, iOS and Android formats) and
summarizes them: per-participant statistics, activity patterns, top words
and emojis, conversation flow metrics, streaks and awards.
"""

__version__ = "1.0.0"

from .chat_analyzer import ChatAnalyzer
from .config import AnalysisConfig, load_config
from .data_extraction import load_chat, parse_chat, read_chat_text, read_chat_archive
from .data_cleaning import TimeWindow, filter_messages
from .chat_stats import aggregate
from .insights import postprocess, analyze_chat
from .models import Message, ParsedChat, ChatAggregate, WrappedReport

__all__ = [
    "ChatAnalyzer",
    "AnalysisConfig",
    "load_config",
    "load_chat",
    "parse_chat",
    "read_chat_text",
    "read_chat_archive",
    "TimeWindow",
    "filter_messages",
    "aggregate",
    "postprocess",
    "analyze_chat",
    "Message",
    "ParsedChat",
    "ChatAggregate",
    "WrappedReport",
]
