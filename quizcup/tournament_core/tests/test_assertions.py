"""
Tests for the fluent assertion interface.
"""

import unittest

from quizcup.tournament_core.assertions import assert_tournament
from quizcup.tournament_core.builder import TournamentBuilder
from quizcup.tournament_core.structure import ParticipantStatus
from quizcup.tournament_core.tests.test_utils import (
    create_simple_knockout,
    create_simple_round_robin,
)


class TestTournamentAssertions(unittest.TestCase):
    """Test the fluent assertion interface for tournament standings."""

    def test_round_robin_assertions(self):
        tournament = create_simple_round_robin(4)

        assert_tournament(tournament).order("Team 1", "Team 2", "Team 3", "Team 4")
        assert_tournament(tournament).team("Team 1").assert_().played(3).wins(3).losses(
            0
        ).points(9).position(1)
        assert_tournament(tournament).team("Team 4").assert_().wins(0).points(0).position(4)

    def test_knockout_assertions(self):
        tournament = create_simple_knockout(8)

        # Seeds 1 and 2 meet in the final; the slot 1 team always wins
        assert_tournament(tournament).team("Team 1").assert_().wins_knockout_tournament().in_round(
            3
        ).bracket_position(3, 1, 1)
        assert_tournament(tournament).team("Team 2").assert_().eliminated_in_round(
            3
        ).status(ParticipantStatus.ELIMINATED)
        assert_tournament(tournament).team("Team 8").assert_().eliminated_in_round(
            1
        ).bracket_position(1, 1, 2)

    def test_assertion_failures(self):
        tournament = create_simple_round_robin(4)

        with self.assertRaises(AssertionError):
            assert_tournament(tournament).team("Team 1").assert_().wins(2)

        with self.assertRaises(AssertionError):
            assert_tournament(tournament).team("Team 9")

        with self.assertRaises(AssertionError):
            assert_tournament(tournament).order("Team 2")

        with self.assertRaises(AssertionError):
            assert_tournament(tournament).team("Team 4").assert_().wins_knockout_tournament()

    def test_in_round_for_unreached_round(self):
        tournament = (
            TournamentBuilder().teams("A", "B", "C", "D").start().win("A", "D").build()
        )
        assert_tournament(tournament).team("A").assert_().in_round(2)
        with self.assertRaises(AssertionError):
            assert_tournament(tournament).team("B").assert_().in_round(2)


if __name__ == "__main__":
    unittest.main()
