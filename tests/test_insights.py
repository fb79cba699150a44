"""Tests for the derived metrics: top lists, awards, milestone and heatmap."""

from datetime import date, datetime

from chat_wrapped.chat_stats import aggregate
from chat_wrapped.insights import (
    analyze_chat,
    build_heatmap,
    compute_awards,
    heatmap_level,
    next_milestone,
    postprocess,
    reply_statistics,
    top_entries,
)
from chat_wrapped.models import FrequencyEntry, ReplyStat
from helpers import GRIN, NOW, make_message, minutes_after


AWARD_KEYS = [
    'ghost', 'yapper', 'night_owl', 'instigator', 'media_mogul',
    'double_texter', 'novelist', 'laughing_stock', 'apologist', 'link_lord',
]


def _report(android_chat):
    return postprocess(aggregate(android_chat.messages, ["Alice", "Bob"], now=NOW), now=NOW)


# ── top_entries ────────────────


class TestTopEntries:
    def test_sorted_by_total_with_stable_ties(self):
        table = {
            key: FrequencyEntry(key=key, total=total, breakdown={"A": total})
            for key, total in [("a", 1), ("b", 2), ("c", 2), ("d", 1)]
        }
        assert [e.key for e in top_entries(table)] == ["b", "c", "a", "d"]

    def test_limits_to_twelve(self):
        table = {str(i): FrequencyEntry(key=str(i), total=i, breakdown={"A": i}) for i in range(1, 20)}
        top = top_entries(table)
        assert len(top) == 12
        assert top[0].key == "19"

    def test_report_lists(self, android_chat):
        report = _report(android_chat)
        assert [e.key for e in report.top_words][:2] == ["morning", "sorry"]
        assert [e.key for e in report.top_emojis] == [GRIN]


# ── reply_statistics ────────────────


class TestReplyStatistics:
    def test_mean_and_zero_default(self):
        stats = reply_statistics({"A": [2, 4, 9], "B": []})
        assert stats == [
            ReplyStat(name="A", samples=3, average_minutes=5.0),
            ReplyStat(name="B", samples=0, average_minutes=0.0),
        ]


# ── next_milestone / heatmap ────────────────


class TestNextMilestone:
    def test_rounds_up_to_multiple_of_5000(self):
        assert next_milestone(1) == 5000
        assert next_milestone(4999) == 5000
        assert next_milestone(5000) == 5000
        assert next_milestone(5001) == 10000


class TestHeatmap:
    def test_levels(self):
        assert [heatmap_level(c) for c in [0, 1, 20, 21, 50, 51, 100, 101]] == [0, 1, 1, 2, 2, 3, 3, 4]

    def test_trailing_year_ending_today(self):
        cells = build_heatmap({date(2024, 1, 15): 3, date(2023, 6, 1): 150}, now=NOW)
        assert len(cells) == 366
        assert cells[0].date == date(2023, 1, 17)
        assert cells[-1].date == date(2024, 1, 17)
        by_day = {cell.date: cell for cell in cells}
        assert (by_day[date(2024, 1, 15)].count, by_day[date(2024, 1, 15)].level) == (3, 1)
        assert by_day[date(2023, 6, 1)].level == 4
        assert by_day[date(2024, 1, 16)].count == 0

    def test_ignores_days_outside_window(self):
        cells = build_heatmap({date(2020, 1, 1): 10}, now=NOW)
        assert sum(cell.count for cell in cells) == 0


# ── awards ────────────────


class TestAwards:
    def test_ten_awards_in_order(self, android_chat):
        report = _report(android_chat)
        assert [a.key for a in report.awards] == AWARD_KEYS

    def test_winners(self, android_chat):
        report = _report(android_chat)
        winners = {a.key: a.winner for a in report.awards}
        assert winners == {
            'ghost': "Bob",
            'yapper': "Alice",
            'night_owl': "Alice",
            'instigator': "Alice",
            'media_mogul': "Bob",
            'double_texter': "Bob",
            'novelist': "Bob",
            'laughing_stock': "Alice",
            'apologist': "Alice",
            'link_lord': "Bob",
        }

    def test_descriptions(self, android_chat):
        report = _report(android_chat)
        assert report.get_award('yapper').description == "Sent 6 words total."
        assert report.get_award('ghost').description == "Takes ~1m to reply."

    def test_ties_go_to_first_participant(self):
        messages = [make_message("Bob", NOW), make_message("Alice", minutes_after(NOW, 1))]
        result = aggregate(messages, ["Alice", "Bob"], now=NOW)
        awards = {a.key: a for a in compute_awards(result, reply_statistics(result.reply_times))}
        assert awards['night_owl'].winner == "Alice"
        assert awards['novelist'].winner == "Alice"

    def test_ghost_is_fastest_replier(self):
        t0 = datetime(2024, 1, 10, 10, 0)
        messages = [
            make_message("Alice", t0),
            make_message("Bob", minutes_after(t0, 30)),
            make_message("Carol", minutes_after(t0, 32)),
            make_message("Alice", minutes_after(t0, 40)),
        ]
        result = aggregate(messages, ["Alice", "Bob", "Carol", "Dave"], now=NOW)
        ghost = compute_awards(result, reply_statistics(result.reply_times))[0]
        assert (ghost.winner, ghost.value) == ("Carol", 2.0)

    def test_ghost_without_replies(self):
        result = aggregate([make_message("Alice", NOW)], ["Alice"], now=NOW)
        ghost = compute_awards(result, reply_statistics(result.reply_times))[0]
        assert ghost.winner == "N/A"
        assert ghost.description == "Takes ~0m to reply."


# ── postprocess / analyze_chat ────────────────


class TestPostprocess:
    def test_report_shape(self, android_chat):
        report = _report(android_chat)
        assert report.total_messages == 4
        assert report.participants == ["Alice", "Bob"]
        assert [p.name for p in report.participant_stats] == ["Alice", "Bob"]
        assert report.milestone.current == 4
        assert report.milestone.next == 5000
        assert report.starters == {"Alice": 1, "Bob": 0}
        assert len(report.heatmap) == 366
        assert len(report.timeline) == 2

    def test_idempotent(self, android_chat):
        assert _report(android_chat) == _report(android_chat)

    def test_to_dict_is_json_ready(self, android_chat):
        data = _report(android_chat).to_dict()
        assert data['timeline'][0] == {'date': '2024-01-15', 'counts': {'Alice': 1, 'Bob': 2}}
        assert data['heatmap'][-1]['date'] == '2024-01-17'
        assert data['streaks'] == {'longest': 2, 'current': 2}
        assert data['participant_stats'][0]['sentiment'] == {'pos': 2, 'neg': 2, 'neutral': 0}

    def test_timeline_frame(self, android_chat):
        frame = _report(android_chat).timeline_frame()
        assert list(frame.columns) == ["Alice", "Bob"]
        assert frame["Bob"].tolist() == [2, 0]
        assert frame.index[0].date() == date(2024, 1, 15)


class TestAnalyzeChat:
    def test_runs_the_whole_pipeline(self, android_chat):
        report = analyze_chat(android_chat.messages, ["Alice"], window='all', now=NOW)
        assert report.total_messages == 2
        assert report.participants == ["Alice"]

    def test_everyone_when_no_allow_list(self, android_chat):
        report = analyze_chat(android_chat.messages, None, now=NOW)
        assert report.total_messages == 4
        assert report.participants == ["Alice", "Bob"]
        assert report.get_award('yapper').winner == "Alice"

    def test_no_data(self, android_chat):
        # Nothing in the chat falls inside the current week of a much later date
        later = datetime(2024, 6, 5)
        assert analyze_chat(android_chat.messages, ["Alice", "Bob"], window='week', now=later) is None
