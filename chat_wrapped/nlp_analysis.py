"""
NLP Analysis Module

Text processing for chat messages: emoji and URL extraction, word
tokenization and fixed keyword classification. No statistical sentiment
model is involved, only the keyword tables in constants.py.
"""

import re
from typing import List

from .constants import (
    EMOJI_RANGES,
    PUNCTUATION_CHARS,
    POSITIVE_WORDS,
    NEGATIVE_WORDS,
    SORRY_WORDS,
    LAUGH_WORDS,
    DEFAULT_MIN_WORD_LENGTH,
)


URL_PATTERN = re.compile(r"https?://\S+")
EMOJI_PATTERN = re.compile(
    '[' + ''.join(f"{start}-{end}" for start, end in EMOJI_RANGES) + ']'
)
PUNCTUATION_PATTERN = re.compile('[' + re.escape(PUNCTUATION_CHARS) + ']')
# Variation selector, zero-width joiner and keycap that glue emoji sequences
EMOJI_JOINER_PATTERN = re.compile("[\U0000FE0F\U0000200D\U000020E3]")


def count_links(text: str) -> int:
    """Number of http(s) URLs in text."""
    return len(URL_PATTERN.findall(text))


def extract_emojis(text: str) -> List[str]:
    """
    Extract emoji glyphs in order of appearance.

    Duplicates are kept, so a glyph used three times yields three entries.
    """
    return EMOJI_PATTERN.findall(text)


def extract_words(text: str) -> List[str]:
    """
    Tokenize text into cleaned lowercase words.

    URLs are removed first, then punctuation, then the remainder is split on
    whitespace. Empty tokens and emoji-only tokens are dropped.

    Args:
        text: Message body or continuation line

    Returns:
        List of tokens in order of appearance
    """
    cleaned = URL_PATTERN.sub('', text.lower())
    cleaned = PUNCTUATION_PATTERN.sub('', cleaned)
    return [w for w in cleaned.split() if w and not is_emoji_token(w)]


def is_emoji_token(token: str) -> bool:
    """True when token is made only of emoji glyphs and their joiners."""
    if not EMOJI_PATTERN.search(token):
        return False
    return not EMOJI_JOINER_PATTERN.sub('', EMOJI_PATTERN.sub('', token))


def is_counted_word(word: str, vocab_length: int = 0) -> bool:
    """
    Apply the vocabulary filter.

    vocab_length > 0 keeps only words of exactly that length, otherwise words
    of at least DEFAULT_MIN_WORD_LENGTH characters are kept.
    """
    if vocab_length > 0:
        return len(word) == vocab_length
    return len(word) >= DEFAULT_MIN_WORD_LENGTH


def is_positive(word: str) -> bool:
    return word in POSITIVE_WORDS


def is_negative(word: str) -> bool:
    return word in NEGATIVE_WORDS


def is_apology(word: str) -> bool:
    return word in SORRY_WORDS


def is_laugh(word: str) -> bool:
    return word in LAUGH_WORDS
