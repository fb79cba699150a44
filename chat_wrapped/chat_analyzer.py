"""
Main Chat Analyzer Class

Orchestrator class that combines the pipeline stages for easy use.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from .config import AnalysisConfig
from .data_cleaning import filter_messages
from .data_extraction import read_chat_text, parse_chat
from .chat_stats import aggregate
from .insights import postprocess
from .models import ParsedChat, WrappedReport

logger = logging.getLogger(__name__)

MESSAGE_COLUMNS = [
    'id', 'timestamp', 'sender', 'content', 'is_media', 'is_deleted',
    'is_edited', 'link_count', 'emoji_count', 'char_count', 'word_count',
]


class ChatAnalyzer:
    """
    Main analyzer class for WhatsApp chat exports.

    Provides a unified interface for loading, parsing, filtering and
    summarizing a chat. Every call to analyze() recomputes the report from
    the parsed messages; nothing from a previous selection is reused.
    """

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        config: Optional[AnalysisConfig] = None,
        now: Optional[datetime] = None
    ):
        """
        Initialize the analyzer.

        Args:
            file_path: Path to WhatsApp export file (zip or txt)
            config: Analysis settings (defaults to AnalysisConfig())
            now: Fixed reference time for windows, streaks and the heatmap
        """
        self.file_path = file_path
        self.config = config or AnalysisConfig()
        self.now = now
        self.chat: Optional[ParsedChat] = None
        self.report: Optional[WrappedReport] = None

    @classmethod
    def from_text(
        cls,
        text: str,
        config: Optional[AnalysisConfig] = None,
        now: Optional[datetime] = None
    ) -> 'ChatAnalyzer':
        """Build an analyzer from already decoded export text."""
        analyzer = cls(config=config, now=now)
        analyzer.chat = parse_chat(text, now=now)
        return analyzer

    @property
    def participants(self) -> List[str]:
        if self.chat is None:
            raise ValueError("Must call load_and_parse() first")
        return list(self.chat.participants)

    def load_and_parse(self) -> ParsedChat:
        """
        Load and parse the chat file.

        Returns:
            ParsedChat with sorted messages and participants
        """
        if self.file_path is None:
            raise ValueError("No file_path given; use ChatAnalyzer.from_text() for raw text")

        self.chat = parse_chat(read_chat_text(self.file_path), now=self.now)
        return self.chat

    def analyze(
        self,
        time_window=None,
        participants: Optional[List[str]] = None,
        vocab_length: Optional[int] = None
    ) -> Optional[WrappedReport]:
        """
        Run filter, aggregation and post-processing.

        Arguments override the corresponding config values for this run.

        Returns:
            WrappedReport, or None when the selection has no messages
        """
        if self.chat is None:
            self.load_and_parse()

        window = time_window if time_window is not None else self.config.time_window
        selected = participants if participants is not None else \
            self.config.resolve_participants(self.chat.participants)
        length = vocab_length if vocab_length is not None else self.config.vocab_length

        filtered = filter_messages(self.chat.messages, window, selected, now=self.now)
        result = aggregate(filtered, selected, vocab_length=length, now=self.now)

        if result is None:
            logger.info("No messages in the current selection")
            self.report = None
            return None

        self.report = postprocess(result, now=self.now)
        return self.report

    def get_dataframe(self) -> pd.DataFrame:
        """
        Get the parsed messages as a DataFrame.

        Returns:
            DataFrame with one row per message, columns MESSAGE_COLUMNS
        """
        if self.chat is None:
            raise ValueError("Must call load_and_parse() first")

        rows = [
            {
                'id': msg.id,
                'timestamp': msg.timestamp,
                'sender': msg.sender,
                'content': msg.content,
                'is_media': msg.is_media,
                'is_deleted': msg.is_deleted,
                'is_edited': msg.is_edited,
                'link_count': msg.link_count,
                'emoji_count': len(msg.emojis),
                'char_count': msg.char_count,
                'word_count': msg.word_count,
            }
            for msg in self.chat.messages
        ]
        df = pd.DataFrame(rows, columns=MESSAGE_COLUMNS)
        df['timestamp'] = pd.to_datetime(df['timestamp'])
        return df

    def export_results(
        self,
        output_path: Union[str, Path],
        format: str = 'json'
    ) -> None:
        """
        Export analysis results to file.

        Args:
            output_path: Path to output file
            format: 'json' for the report, 'csv' for the message table
        """
        if format == 'json':
            if self.report is None:
                raise ValueError("Must call analyze() first")
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(self.report.to_dict(), f, indent=2, ensure_ascii=False)
        elif format == 'csv':
            self.get_dataframe().to_csv(output_path, index=False)
        else:
            raise ValueError(f"Unknown format: {format}. Use 'json' or 'csv'")
