"""
Configuration Module

Analysis settings: time window, participant allow-list, vocabulary mode and
log level. Values come from explicit arguments first, then CHAT_WRAPPED_*
environment variables (a .env file is loaded if present), then defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from dotenv import find_dotenv, load_dotenv

from .data_cleaning import TimeWindow
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = 'CHAT_WRAPPED_'

DEFAULT_CONFIG = {
    'time_window': TimeWindow.ALL,
    'participants': None,
    'vocab_length': 0,
    'log_level': 'WARNING',
}


@dataclass
class AnalysisConfig:
    """
    Settings consumed by the analysis pipeline.

    participants=None selects every participant found in the chat.
    vocab_length=0 counts words of 3+ characters, N > 0 only words of
    exactly N characters.
    """
    time_window: TimeWindow = TimeWindow.ALL
    participants: Optional[List[str]] = None
    vocab_length: int = 0
    log_level: str = 'WARNING'

    def __post_init__(self):
        self.time_window = TimeWindow.parse(self.time_window)
        self.vocab_length = parse_vocab_length(self.vocab_length)
        self.log_level = parse_log_level(self.log_level)
        if self.participants is not None:
            self.participants = [p for p in self.participants if p]

    def resolve_participants(self, available: List[str]) -> List[str]:
        """Selected participants, defaulting to everyone available."""
        if self.participants is None:
            return list(available)
        return list(self.participants)


def parse_vocab_length(value) -> int:
    try:
        length = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Word length must be an integer, got {value!r}") from None
    if length < 0:
        raise ConfigurationError(f"Word length must be 0 or positive, got {length}")
    return length


def parse_log_level(value: str) -> str:
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log level: {value!r}")
    return level


def parse_participants(value: str) -> Optional[List[str]]:
    """Comma separated names; blank means everyone."""
    names = [name.strip() for name in value.split(',')]
    names = [name for name in names if name]
    return names or None


def load_config(env_file: Optional[Union[str, Path]] = None, **overrides) -> AnalysisConfig:
    """
    Build an AnalysisConfig from overrides, environment and defaults.

    Args:
        env_file: .env file to load; defaults to the nearest .env from the
            working directory, if any
        **overrides: Field values that take precedence (None is ignored)

    Returns:
        Validated AnalysisConfig

    Raises:
        ConfigurationError: If any value is invalid
    """
    dotenv_path = env_file or find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)
        logger.debug(f"Loaded environment from {dotenv_path}")

    values = dict(DEFAULT_CONFIG)

    env_window = os.getenv(f'{ENV_PREFIX}TIME_WINDOW')
    if env_window:
        values['time_window'] = env_window
    env_length = os.getenv(f'{ENV_PREFIX}WORD_LENGTH')
    if env_length:
        values['vocab_length'] = env_length
    env_participants = os.getenv(f'{ENV_PREFIX}PARTICIPANTS')
    if env_participants:
        values['participants'] = parse_participants(env_participants)
    env_level = os.getenv(f'{ENV_PREFIX}LOG_LEVEL')
    if env_level:
        values['log_level'] = env_level

    unknown = set(overrides) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigurationError(f"Unknown config options: {sorted(unknown)}")
    values.update({key: value for key, value in overrides.items() if value is not None})

    return AnalysisConfig(**values)
