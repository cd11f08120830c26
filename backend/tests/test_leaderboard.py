"""Leaderboard builder tests."""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ceo_metrics.leaderboard import build_leaderboard, initials


class TestBuildLeaderboard:

    def test_top_five_sorted_descending(self):
        revenue = {f"Rep {i}": float(i * 100) for i in range(1, 9)}
        board = build_leaderboard(revenue)
        assert len(board) == 5
        assert [e.name for e in board] == ["Rep 8", "Rep 7", "Rep 6", "Rep 5", "Rep 4"]
        assert [e.rank for e in board] == [1, 2, 3, 4, 5]
        assert all(a.revenue > b.revenue for a, b in zip(board, board[1:]))

    def test_leader_is_100_percent(self):
        board = build_leaderboard({"Ana": 3333.33, "Bob": 1000})
        assert board[0].percent_of_leader == 100
        assert board[1].percent_of_leader == 30

    def test_percent_rounds_half_up(self):
        board = build_leaderboard({"Ana": 200, "Bob": 1})   # 0.5% -> 1
        assert board[1].percent_of_leader == 1

    def test_non_positive_excluded(self):
        board = build_leaderboard({"Ana": 100, "Zero": 0, "Refund": -50})
        assert [e.name for e in board] == ["Ana"]

    def test_empty(self):
        assert build_leaderboard({}) == []
        assert build_leaderboard({"Zero": 0}) == []

    def test_ties_keep_input_order(self):
        board = build_leaderboard({"Ana": 500, "Bob": 500, "Cy": 900})
        assert [e.name for e in board] == ["Cy", "Ana", "Bob"]

    def test_custom_size(self):
        assert len(build_leaderboard({"a": 1, "b": 2, "c": 3}, size=2)) == 2


@pytest.mark.parametrize("name,expected", [
    ("Ana Maria Ruiz", "AR"),
    ("bob", "BO"),
    ("Unknown", "UN"),
    ("", "??"),
    ("   ", "??"),
])
def test_initials(name, expected):
    assert initials(name) == expected
