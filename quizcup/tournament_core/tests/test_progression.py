"""
Tests for result submission, winner propagation and match reopening.
"""

import unittest

from quizcup.tournament_core.builder import TournamentBuilder
from quizcup.tournament_core.exceptions import (
    DrawNotAllowedException,
    InvalidBracketStateException,
    InvalidScoreException,
    InvalidTransitionException,
    MatchNotFoundException,
)
from quizcup.tournament_core.knockout import destination_of
from quizcup.tournament_core.progression import (
    calculate_current_round,
    reopen_match,
    submit_result,
)
from quizcup.tournament_core.structure import (
    MatchStatus,
    ParticipantStatus,
    TournamentStatus,
)


def knockout(*names, auto_complete=False):
    return (
        TournamentBuilder()
        .single_elimination(auto_complete=auto_complete)
        .teams(*names)
        .start()
    )


class SubmitResultTests(unittest.TestCase):
    def test_winner_and_loser_recorded(self):
        tournament = knockout("A", "B", "C", "D").build()
        match = tournament.match_at(1, 1)  # A vs D

        updated, outcome = submit_result(tournament, match.id, 7, 12)

        self.assertEqual(outcome.winner_id, "D")
        self.assertEqual(outcome.loser_id, "A")
        played = updated.match(match.id)
        self.assertEqual(played.status, MatchStatus.COMPLETED)
        self.assertEqual((played.team1_score, played.team2_score), (7, 12))
        self.assertEqual((played.winner_id, played.loser_id), ("D", "A"))
        self.assertEqual(updated.participant("A").status, ParticipantStatus.ELIMINATED)

        # The original value is untouched
        self.assertEqual(tournament.match(match.id).status, MatchStatus.PENDING)
        self.assertEqual(tournament.participant("A").status, ParticipantStatus.ACTIVE)

    def test_propagation_slot_follows_match_index(self):
        """Winner of (r, i) lands in slot1 (i even) or slot2 (i odd) of (r+1, i//2)."""
        builder = knockout(*[f"T{i}" for i in range(1, 17)])
        tournament = builder.build()

        for round_number in range(1, tournament.total_rounds):
            for match in tournament.round_matches(round_number):
                tournament, outcome = submit_result(tournament, match.id, 3, 1)
                dest = tournament.match_at(round_number + 1, match.index // 2 + 1)
                expected_slot = 1 if match.index % 2 == 0 else 2
                self.assertEqual(
                    dest.slot(expected_slot).participant_id, outcome.winner_id
                )
                self.assertEqual(
                    destination_of(match.round, match.match_number),
                    (dest.round, dest.match_number, expected_slot),
                )

    def test_draw_rejected_without_mutation(self):
        tournament = knockout("A", "B").build()
        match = tournament.match_at(1, 1)
        with self.assertRaises(DrawNotAllowedException) as cm:
            submit_result(tournament, match.id, 9, 9)
        self.assertEqual(cm.exception.code, "DRAW_NOT_ALLOWED")
        self.assertEqual(tournament.match(match.id).status, MatchStatus.PENDING)

    def test_unassigned_slot_rejected(self):
        tournament = knockout("A", "B", "C", "D").build()
        final = tournament.match_at(2, 1)
        with self.assertRaises(InvalidBracketStateException):
            submit_result(tournament, final.id, 5, 3)

    def test_bye_match_rejected(self):
        tournament = knockout("A", "B", "C").build()
        bye = tournament.match_at(1, 1)
        self.assertEqual(bye.status, MatchStatus.BYE)
        with self.assertRaises(InvalidBracketStateException):
            submit_result(tournament, bye.id, 5, 3)

    def test_unknown_match(self):
        tournament = knockout("A", "B").build()
        with self.assertRaises(MatchNotFoundException) as cm:
            submit_result(tournament, "missing", 5, 3)
        self.assertTrue(cm.exception.is_structural)

    def test_invalid_scores(self):
        tournament = knockout("A", "B").build()
        match = tournament.match_at(1, 1)
        for bad in (-1, 2.5, "3", None, True):
            with self.assertRaises(InvalidScoreException):
                submit_result(tournament, match.id, bad, 1)

    def test_requires_in_progress(self):
        tournament = knockout("A", "B").end().build()
        with self.assertRaises(InvalidTransitionException):
            submit_result(tournament, tournament.match_at(1, 1).id, 2, 1)

    def test_winner_and_loser_always_distinct_and_paired(self):
        tournament = knockout(*[f"T{i}" for i in range(1, 12)]).build()
        while True:
            playable = [
                m for m in tournament.matches if m.is_playable and not m.is_decided
            ]
            if not playable:
                break
            for match in playable:
                tournament, outcome = submit_result(
                    tournament, match.id, match.match_number, match.match_number + 2
                )
                self.assertNotEqual(outcome.winner_id, outcome.loser_id)

        for match in tournament.matches:
            if match.is_completed:
                self.assertIsNotNone(match.winner_id)
                self.assertIsNotNone(match.loser_id)
                self.assertNotEqual(match.winner_id, match.loser_id)
            else:
                self.assertIsNone(match.loser_id)

    def test_round_robin_never_eliminates(self):
        tournament = (
            TournamentBuilder()
            .round_robin()
            .teams("A", "B", "C", "D")
            .start()
            .result("A", "B", 3, 1)
            .build()
        )
        self.assertEqual(tournament.participant("B").status, ParticipantStatus.ACTIVE)
        # No propagation: later rounds keep their fixtures
        self.assertTrue(all(m.is_playable for m in tournament.matches))


class ResubmissionTests(unittest.TestCase):
    def test_resubmission_overwrites_and_repropagates(self):
        builder = knockout("A", "B", "C", "D").win("A", "D")
        tournament = builder.build()
        first = tournament.match_at(1, 1)
        self.assertEqual(tournament.match_at(2, 1).slot1.participant_id, "A")

        tournament, outcome = submit_result(tournament, first.id, 2, 8)

        self.assertEqual(outcome.winner_id, "D")
        self.assertEqual(tournament.match_at(2, 1).slot1.participant_id, "D")
        self.assertEqual(tournament.participant("A").status, ParticipantStatus.ELIMINATED)
        self.assertEqual(tournament.participant("D").status, ParticipantStatus.ACTIVE)

    def test_resubmission_blocked_when_downstream_decided(self):
        builder = knockout("A", "B", "C", "D").win("A", "D").win("B", "C").win("A", "B")
        tournament = builder.build()
        first = tournament.match_at(1, 1)

        with self.assertRaises(InvalidBracketStateException):
            submit_result(tournament, first.id, 2, 8)

        # Same winner, corrected scores, is still accepted
        tournament, outcome = submit_result(tournament, first.id, 11, 4)
        self.assertEqual(outcome.winner_id, "A")
        self.assertEqual(tournament.match(first.id).team1_score, 11)


class ReopenMatchTests(unittest.TestCase):
    def test_reopen_cascades_downstream(self):
        builder = (
            knockout("A", "B", "C", "D", "E", "F", "G", "H")
            .win("A", "H")
            .win("D", "E")
            .win("B", "G")
            .win("C", "F")
            .win("A", "D")
            .win("B", "C")
        )
        tournament = builder.build()
        self.assertEqual(tournament.match_at(3, 1).participant_ids(), ["A", "B"])

        tournament = reopen_match(tournament, tournament.match_at(1, 1).id)

        opening = tournament.match_at(1, 1)
        semi = tournament.match_at(2, 1)
        final = tournament.match_at(3, 1)
        self.assertEqual(opening.status, MatchStatus.PENDING)
        self.assertIsNone(opening.winner_id)
        self.assertIsNone(opening.team1_score)
        self.assertEqual(semi.status, MatchStatus.PENDING)
        self.assertTrue(semi.slot1.is_unassigned)
        self.assertEqual(semi.slot2.participant_id, "D")
        self.assertTrue(final.slot1.is_unassigned)
        self.assertEqual(final.slot2.participant_id, "B")

        self.assertEqual(tournament.participant("D").status, ParticipantStatus.ACTIVE)
        self.assertEqual(tournament.participant("H").status, ParticipantStatus.ACTIVE)
        self.assertEqual(tournament.current_round, 1)

    def test_reopen_requires_result(self):
        tournament = knockout("A", "B", "C", "D").build()
        with self.assertRaises(InvalidBracketStateException):
            reopen_match(tournament, tournament.match_at(1, 1).id)

    def test_reopen_bye_rejected(self):
        tournament = knockout("A", "B", "C").build()
        with self.assertRaises(InvalidBracketStateException):
            reopen_match(tournament, tournament.match_at(1, 1).id)

    def test_reopen_round_robin(self):
        builder = TournamentBuilder().round_robin().teams("A", "B", "C", "D").start()
        builder.result("A", "B", 5, 2)
        builder.reopen("A", "B")
        tournament = builder.build()
        match = builder.find_match("A", "B")
        self.assertEqual(match.status, MatchStatus.PENDING)
        self.assertEqual(tournament.current_round, 1)


class CompletionTests(unittest.TestCase):
    def test_current_round_advances(self):
        builder = knockout("A", "B", "C", "D")
        self.assertEqual(builder.build().current_round, 1)
        builder.win("A", "D").win("B", "C")
        self.assertEqual(builder.build().current_round, 2)
        builder.win("A", "B")
        tournament = builder.build()
        self.assertEqual(calculate_current_round(tournament), 2)
        self.assertEqual(tournament.status, TournamentStatus.IN_PROGRESS)

    def test_auto_complete_on_final(self):
        tournament = (
            knockout("A", "B", "C", auto_complete=True)
            .win("B", "C")
            .win("A", "B")
            .build()
        )
        self.assertEqual(tournament.status, TournamentStatus.COMPLETED)


if __name__ == "__main__":
    unittest.main()
