"""
Command-line interface for chat_wrapped.

USAGE:
  chat-wrapped "WhatsApp Chat with Alice.zip"
  chat-wrapped chat.txt --window year --participant Alice --participant Bob
  chat-wrapped chat.txt --word-length 5 --output report.json
  chat-wrapped chat.txt --messages-csv messages.csv

All processing is local; the chat never leaves your machine.
"""

import argparse
import logging
import sys
from pathlib import Path

from .chat_analyzer import ChatAnalyzer
from .config import load_config
from .constants import WEEKDAY_LABELS
from .data_cleaning import TimeWindow
from .exceptions import ChatWrappedError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_DATA = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='chat-wrapped',
        description='Chat Wrapped - statistics and awards for WhatsApp chat exports',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'chat_file',
        type=Path,
        help='WhatsApp export (.txt or .zip)',
    )
    parser.add_argument(
        '--window', '-w',
        choices=[w.value for w in TimeWindow],
        default=None,
        help='Time window to analyze (default: all)',
    )
    parser.add_argument(
        '--participant', '-p',
        action='append',
        dest='participants',
        default=None,
        help='Participant to include; repeat for several (default: everyone)',
    )
    parser.add_argument(
        '--word-length', '-l',
        type=int,
        default=None,
        help='Count only words of exactly this length (default: 0 = 3+ chars)',
    )
    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=None,
        help='Write the full report as JSON to this path',
    )
    parser.add_argument(
        '--messages-csv',
        type=Path,
        default=None,
        help='Write the parsed message table as CSV to this path',
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable debug logging',
    )
    return parser


def format_summary(report) -> str:
    """Plain-text summary of a WrappedReport."""
    lines = [
        f"Messages: {report.total_messages:,} (next milestone {report.milestone.next:,})",
        f"Participants: {', '.join(report.participants)}",
        f"Streaks: longest {report.streaks.longest} days, current {report.streaks.current} days",
    ]

    busiest_hour = max(range(24), key=lambda h: report.hourly_counts[h])
    busiest_day = max(range(7), key=lambda d: report.weekday_counts[d])
    lines.append(f"Busiest hour: {busiest_hour:02d}:00, busiest day: {WEEKDAY_LABELS[busiest_day]}")

    lines.append("")
    lines.append("Per participant:")
    for p in report.participant_stats:
        lines.append(
            f"  {p.name}: {p.messages:,} messages, {p.words:,} words, "
            f"{p.media} media, {p.emojis} emojis, {p.links} links"
        )

    if report.top_words:
        lines.append("")
        lines.append("Top words: " + ', '.join(f"{e.key} ({e.total})" for e in report.top_words))
    if report.top_emojis:
        lines.append("Top emojis: " + ' '.join(f"{e.key} {e.total}" for e in report.top_emojis))

    lines.append("")
    lines.append("Awards:")
    for award in report.awards:
        lines.append(f"  {award.icon} {award.title}: {award.winner} - {award.description}")

    return '\n'.join(lines)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(
            time_window=args.window,
            participants=args.participants,
            vocab_length=args.word_length,
        )
    except ChatWrappedError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format='%(asctime)s %(levelname)-8s %(name)s: %(message)s',
    )

    analyzer = ChatAnalyzer(args.chat_file, config=config)
    try:
        analyzer.load_and_parse()
    except (ChatWrappedError, FileNotFoundError) as e:
        print(f"Could not read chat: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.messages_csv:
        analyzer.export_results(args.messages_csv, format='csv')
        logger.info(f"Wrote message table to {args.messages_csv}")

    report = analyzer.analyze()
    if report is None:
        print("No messages match the current selection.", file=sys.stderr)
        return EXIT_NO_DATA

    if args.output:
        analyzer.export_results(args.output, format='json')
        print(f"Report written to {args.output}")
    else:
        print(format_summary(report))

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
