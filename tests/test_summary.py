"""
Unit tests for ranking and the plain-text marks summary.
"""

import math
from datetime import datetime

import pytest

import config
from core.models import RankedStudent
from core.summary import (
    cohort_from_record,
    find_mark_record,
    format_date,
    format_summary,
    rank_students,
    render_summary,
)
from utils.error_handler import InvalidScore

SAMPLE_STUDENTS = [
    {"name": "Priya Joshi", "score": 95},
    {"name": "Rahul Sharma", "score": 92},
    {"name": "Sneha Deshmukh", "score": 88},
    {"name": "Aryan Patil", "score": 85},
]


class TestRankStudents:

    def test_rank_when_unsorted_then_orders_by_score_descending(self):
        ranked = rank_students([
            {"name": "A", "score": 10},
            {"name": "B", "score": 30},
            {"name": "C", "score": 20},
        ])

        assert [s.name for s in ranked] == ["B", "C", "A"]
        assert [s.rank for s in ranked] == [1, 2, 3]

    def test_rank_when_scores_tie_then_input_order_breaks_ties(self):
        ranked = rank_students([
            {"name": "First", "score": 50},
            {"name": "Top", "score": 90},
            {"name": "Second", "score": 50},
            {"name": "Third", "score": 50},
        ])

        assert ranked == [
            RankedStudent("Top", 90, 1),
            RankedStudent("First", 50, 2),
            RankedStudent("Second", 50, 3),
            RankedStudent("Third", 50, 4),
        ]

    def test_rank_when_any_cohort_then_ranks_are_contiguous_and_scores_non_increasing(self):
        scores = [3, 7, 7, 1, 9, 0, 7, 2.5]
        ranked = rank_students([{"name": f"S{i}", "score": s} for i, s in enumerate(scores)])

        assert [s.rank for s in ranked] == list(range(1, len(scores) + 1))
        assert all(a.score >= b.score for a, b in zip(ranked, ranked[1:]))

    def test_rank_when_empty_then_returns_empty(self):
        assert rank_students([]) == []

    @pytest.mark.parametrize("bad", [None, "95", math.nan, math.inf, True])
    def test_rank_when_score_invalid_then_raises(self, bad):
        with pytest.raises(InvalidScore):
            rank_students([{"name": "Ok", "score": 10}, {"name": "Bad", "score": bad}])

    def test_rank_when_score_key_missing_then_raises(self):
        with pytest.raises(InvalidScore) as exc_info:
            rank_students([{"name": "No Score"}])

        assert exc_info.value.student == "No Score"

    def test_rank_does_not_mutate_input(self):
        students = [{"name": "A", "score": 1}, {"name": "B", "score": 2}]
        snapshot = [dict(s) for s in students]

        rank_students(students)

        assert students == snapshot


class TestFormatDate:

    def test_format_date_when_single_digit_day_then_zero_padded(self):
        assert format_date(datetime(2024, 3, 5)) == "05 Mar 2024"

    def test_format_date_when_december_then_uses_fixed_abbreviation(self):
        assert format_date(datetime(1999, 12, 31)) == "31 Dec 1999"


class TestFormatSummary:

    def test_format_summary_when_sample_cohort_then_matches_layout_exactly(self, as_of):
        message = format_summary("6th Standard", "Science (Unit Test 1)", SAMPLE_STUDENTS, as_of=as_of)

        expected = "\n".join([
            f"*{config.INSTITUTION_NAME}*",
            "*Date:* 29 Jul 2024",
            "---------------------------------",
            "*Marks Summary*",
            "*Class:* 6th Standard",
            "*Subject:* Science (Unit Test 1)",
            "",
            "*Top Rankers:*",
            "- Priya Joshi (*95*)",
            "- Rahul Sharma (*92*)",
            "- Sneha Deshmukh (*88*)",
            "---------------------------------",
            "*Rank | Student Name | Marks*",
            "---------------------------------",
            "1.  | Priya Joshi   | *95*",
            "2.  | Rahul Sharma  | *92*",
            "3.  | Sneha Deshmukh| *88*",
            "4.  | Aryan Patil   | *85*",
            "---------------------------------",
            "*Total Students:* 4",
            "---------------------------------",
        ])
        assert message == expected

    def test_format_summary_separator_is_33_hyphens_and_no_trailing_newline(self, as_of):
        message = format_summary("6th", "Math", SAMPLE_STUDENTS, as_of=as_of)

        assert message.endswith("-" * 33)
        assert not message.endswith("\n")
        assert "-" * 34 not in message

    def test_format_summary_when_empty_then_renders_empty_sections(self, as_of):
        message = format_summary("6th Standard", "Math", [], as_of=as_of)
        lines = message.split("\n")

        top = lines.index("*Top Rankers:*")
        assert lines[top + 1] == config.SEPARATOR
        header = lines.index("*Rank | Student Name | Marks*")
        assert lines[header + 1] == config.SEPARATOR
        assert lines[header + 2] == config.SEPARATOR
        assert lines[-2] == "*Total Students:* 0"

    def test_format_summary_when_fewer_than_three_then_lists_all_as_top(self, as_of):
        message = format_summary("7th", "English", [{"name": "Solo", "score": 12}], as_of=as_of)
        lines = message.split("\n")

        top = lines.index("*Top Rankers:*")
        assert lines[top + 1] == "- Solo (*12*)"
        assert lines[top + 2] == config.SEPARATOR

    def test_format_summary_when_name_too_long_then_not_truncated(self, as_of):
        long_name = "Venkataraghavan Subramaniam Iyer"
        message = format_summary("6th", "Math", [{"name": long_name, "score": 70}], as_of=as_of)

        assert f"1.  | {long_name}| *70*" in message.split("\n")

    def test_format_summary_when_many_students_then_rank_column_overflows(self, as_of):
        students = [{"name": f"S{i}", "score": 100 - i} for i in range(1000)]
        lines = format_summary("6th", "Math", students, as_of=as_of).split("\n")

        assert "10. | S9            | *91*" in lines
        assert "1000.| S999          | *-899*" in lines
        assert lines[-2] == "*Total Students:* 1000"

    def test_format_summary_when_float_scores_then_whole_numbers_lose_fraction(self, as_of):
        message = format_summary("6th", "Math", [{"name": "A", "score": 95.0}, {"name": "B", "score": 92.5}], as_of=as_of)

        assert "- A (*95*)" in message
        assert "- B (*92.5*)" in message

    def test_format_summary_when_invalid_score_then_raises(self, as_of):
        with pytest.raises(InvalidScore):
            format_summary("6th", "Math", [{"name": "A", "score": math.nan}], as_of=as_of)

    def test_format_summary_when_as_of_omitted_then_uses_today(self):
        message = format_summary("6th", "Math", [])

        assert message.split("\n")[1] == f"*Date:* {format_date(datetime.now())}"


class TestRenderSummary:

    def test_render_summary_uses_given_ranking_as_is(self, as_of):
        ranked = [RankedStudent("Zed", 1, 1), RankedStudent("Amy", 99, 2)]

        lines = render_summary("6th", "Math", ranked, as_of, institution_name="Test School").split("\n")

        assert lines[0] == "*Test School*"
        assert lines.index("1.  | Zed           | *1*") < lines.index("2.  | Amy           | *99*")


class TestCohortHelpers:

    def test_find_mark_record_when_present_then_returns_first_match(self, make_record):
        records = [
            make_record("e1", "c1", "s1", ("a", "A", 1)),
            make_record("e1", "c1", "s2", ("a", "A", 2)),
            make_record("e1", "c1", "s2", ("a", "A", 3)),
        ]

        assert find_mark_record(records, "e1", "c1", "s2") is records[1]
        assert find_mark_record(records, "e2", "c1", "s2") is None

    def test_cohort_from_record_keeps_order_and_passes_missing_scores_through(self, make_record):
        record = make_record("e1", "c1", "s1", ("a", "Asha", 40), ("b", "Bala", None))

        assert cohort_from_record(record) == [
            {"name": "Asha", "score": 40},
            {"name": "Bala", "score": None},
        ]
