"""
Constants Module

Keyword lists, marker substrings and thresholds used by the parser and the
analytics passes. Kept in one place so they can be tested and extended
without touching the pipeline code.
"""

# Bumped whenever a table below changes in a way that alters results
TABLES_VERSION = "2"

# Bidirectional control marks that WhatsApp sprinkles into exports
BIDI_CONTROL_CHARS = (
    '\u200e', '\u200f',
    '\u202a', '\u202b', '\u202c', '\u202d', '\u202e',
    '\u2066', '\u2067', '\u2068', '\u2069',
)

# Matched against the sender field of a header line
SYSTEM_MESSAGE_PHRASES = [
    'Messages and calls are end-to-end encrypted',
    'created group',
    'added you',
    'removed you',
    "joined using this group's invite link",
    'changed the subject',
    'changed the group description',
    "changed this group's icon",
    "deleted this group's icon",
    'disappearing messages',
    'security code changed',
]

# Member changes are matched by shape rather than by the bare verb, so a
# contact saved as "Ben left wing" keeps their messages. "Alice added Bob"
# is not recognised; such lines rarely carry a colon in real exports.
SYSTEM_MESSAGE_SHAPES = [
    r"^You (?:added|removed) \S",
    r"\S left$",
]

MEDIA_MARKERS = [
    '<Media omitted>',
    'image omitted',
    'video omitted',
    'audio omitted',
    'document omitted',
    'sticker omitted',
    'GIF omitted',
]

DELETED_MARKERS = [
    'You deleted this message',
    'This message was deleted',
]

EDITED_MARKERS = [
    '<This message was edited>',
]

POSITIVE_WORDS = frozenset([
    'good', 'love', 'happy', 'great', 'haha', 'lol', 'thanks', 'best', 'awesome', 'nice',
])
NEGATIVE_WORDS = frozenset([
    'bad', 'sad', 'hate', 'angry', 'no', 'sorry', 'stupid', 'worst', 'miss', 'boring',
])
SORRY_WORDS = frozenset(['sorry', 'maaf', 'galti', 'apology'])
LAUGH_WORDS = frozenset(['haha', 'lol', 'lmao', 'rofl', 'hehe', 'xd'])

PUNCTUATION_CHARS = '.,!?;:"()[]{}*~_'

# Emoji code blocks: pictographs, emoticons, transport, misc symbols,
# dingbats, supplemental symbols, regional indicators, legacy singles
EMOJI_RANGES = [
    ('\U0001F300', '\U0001F9FF'),
    ('\U0001F600', '\U0001F64F'),
    ('\U0001F680', '\U0001F6FF'),
    ('\u2600', '\u26FF'),
    ('\u2700', '\u27BF'),
    ('\U0001F900', '\U0001F9FF'),
    ('\U0001F1E0', '\U0001F1FF'),
    ('\U0001F004', '\U0001F004'),
    ('\U0001F0CF', '\U0001F0CF'),
    ('\U0001F170', '\U0001F251'),
]

# Conversational flow, in whole minutes
STARTER_GAP_MINUTES = 240
DOUBLE_TEXT_MINUTES = 5

NIGHT_OWL_HOURS = range(0, 5)
EARLY_BIRD_HOURS = range(5, 9)

DEFAULT_MIN_WORD_LENGTH = 3

TOP_N = 12
MILESTONE_STEP = 5000
HEATMAP_DAYS = 365

# (exclusive lower bound, level), checked in order
HEATMAP_LEVELS = [(100, 4), (50, 3), (20, 2), (0, 1)]

WEEKDAY_LABELS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']

NO_WINNER = 'N/A'
