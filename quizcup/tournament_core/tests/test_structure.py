"""
Tests for the tournament structure types.
"""

import unittest

from quizcup.tournament_core.structure import (
    Match,
    MatchStatus,
    Participant,
    Slot,
    SlotKind,
    Tournament,
)


class SlotTests(unittest.TestCase):
    def test_constructors(self):
        self.assertTrue(Slot.unassigned().is_unassigned)
        self.assertTrue(Slot.bye().is_bye)
        slot = Slot.assigned("A")
        self.assertTrue(slot.is_assigned)
        self.assertEqual(slot.participant_id, "A")

    def test_participant_only_on_assigned_slots(self):
        with self.assertRaises(ValueError):
            Slot(SlotKind.ASSIGNED)
        with self.assertRaises(ValueError):
            Slot(SlotKind.BYE, "A")
        with self.assertRaises(ValueError):
            Slot(SlotKind.UNASSIGNED, "A")


class MatchTests(unittest.TestCase):
    def setUp(self):
        self.match = Match(
            id="1-3",
            round=1,
            match_number=3,
            slot1=Slot.assigned("A"),
            slot2=Slot.assigned("B"),
            team1_score=12,
            team2_score=7,
            winner_id="A",
            loser_id="B",
            status=MatchStatus.COMPLETED,
        )

    def test_scores_by_participant(self):
        self.assertEqual(self.match.index, 2)
        self.assertEqual(self.match.score_for("B"), 7)
        self.assertEqual(self.match.score_against("B"), 12)
        self.assertEqual(self.match.opponent_of("A"), "B")
        self.assertIsNone(self.match.opponent_of("C"))
        self.assertIsNone(self.match.score_for("C"))

    def test_cleared(self):
        cleared = self.match.cleared()
        self.assertEqual(cleared.status, MatchStatus.PENDING)
        self.assertIsNone(cleared.winner_id)
        self.assertIsNone(cleared.loser_id)
        self.assertIsNone(cleared.team1_score)
        self.assertEqual(cleared.participant_ids(), ["A", "B"])
        # Immutable: original unchanged
        self.assertTrue(self.match.is_completed)

    def test_with_slot(self):
        match = Match(id=1, round=2, match_number=1)
        self.assertFalse(match.is_playable)
        match = match.with_slot(1, Slot.assigned("A")).with_slot(2, Slot.assigned("B"))
        self.assertTrue(match.is_playable)
        self.assertTrue(match.involves("B"))
        with self.assertRaises(ValueError):
            match.with_slot(3, Slot.bye())


class TournamentTests(unittest.TestCase):
    def test_lookup_and_replace(self):
        matches = (
            Match(id="1-1", round=1, match_number=1),
            Match(id="1-2", round=1, match_number=2),
            Match(id="2-1", round=2, match_number=1),
        )
        tournament = Tournament(
            participants=(Participant(id="A", team_ref="A", name="Alpha"),),
            matches=matches,
        )
        self.assertEqual(tournament.participant("A").display_name, "Alpha")
        self.assertIsNone(tournament.participant("Z"))
        self.assertEqual(tournament.match("1-2").match_number, 2)
        self.assertEqual(tournament.match_at(2, 1).id, "2-1")
        self.assertEqual([r.number for r in tournament.rounds], [1, 2])

        updated = tournament.with_matches(
            [matches[1].with_slot(1, Slot.assigned("A"))]
        )
        self.assertEqual(updated.match_at(1, 2).slot1.participant_id, "A")
        self.assertTrue(tournament.match_at(1, 2).slot1.is_unassigned)
        self.assertEqual([m.id for m in updated.matches], ["1-1", "1-2", "2-1"])


if __name__ == "__main__":
    unittest.main()
