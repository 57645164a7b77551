from django.test import TestCase

from quizcup.tournament.builder import TournamentBuilder
from quizcup.tournament.db_to_structure import slot_to_structure, tournament_to_structure
from quizcup.tournament.models import Match
from quizcup.tournament.structure_to_db import save_structure
from quizcup.tournament_core.progression import submit_result
from quizcup.tournament_core.structure import (
    MatchStatus,
    Slot,
    TiebreakRule,
    TournamentFormat,
    TournamentStatus,
)


class SlotConversionTests(TestCase):
    def test_slot_kinds(self):
        self.assertEqual(slot_to_structure("assigned", 7), Slot.assigned(7))
        self.assertEqual(slot_to_structure("bye", None), Slot.bye())
        self.assertEqual(slot_to_structure("unassigned", None), Slot.unassigned())


class TournamentToStructureTests(TestCase):
    def setUp(self):
        self.builder = (
            TournamentBuilder("Pub Quiz Cup")
            .single_elimination()
            .teams("A", "B", "C", "D")
            .start()
            .win("A", "D")
            .build()
        )

    def test_ids_are_primary_keys(self):
        structure = tournament_to_structure(self.builder.tournament)

        self.assertEqual(structure.id, self.builder.tournament.id)
        self.assertEqual(structure.format, TournamentFormat.SINGLE_ELIMINATION)
        self.assertEqual(structure.status, TournamentStatus.IN_PROGRESS)
        self.assertEqual(structure.total_rounds, 2)
        self.assertEqual(
            [p.id for p in structure.participants],
            [self.builder.participant(name).id for name in "ABCD"],
        )
        self.assertEqual(
            [(m.round, m.match_number) for m in structure.matches],
            [(1, 1), (1, 2), (2, 1)],
        )

        first = structure.match_at(1, 1)
        row = self.builder.match("A", "D")
        self.assertEqual(first.id, row.id)
        self.assertEqual(first.status, MatchStatus.COMPLETED)
        self.assertEqual(first.winner_id, self.builder.participant("A").id)
        self.assertEqual((first.team1_score, first.team2_score), (10, 5))

        final = structure.match_at(2, 1)
        self.assertEqual(final.slot1, Slot.assigned(self.builder.participant("A").id))
        self.assertEqual(final.slot2, Slot.unassigned())

    def test_empty_tiebreak_rules_use_default_chain(self):
        tournament = self.builder.tournament
        tournament.tiebreaker_rules = []
        tournament.save()

        structure = tournament_to_structure(tournament)
        self.assertEqual(structure.tiebreak_rules[0], TiebreakRule.POINTS)
        self.assertEqual(len(structure.tiebreak_rules), 4)


class SaveStructureTests(TestCase):
    def test_engine_changes_are_written_back(self):
        builder = (
            TournamentBuilder()
            .single_elimination()
            .teams("A", "B", "C", "D")
            .start()
            .build()
        )
        tournament = builder.tournament
        semi = builder.match("B", "C")

        structure, outcome = submit_result(
            tournament_to_structure(tournament), semi.id, 4, 11
        )
        saved = save_structure(tournament, structure)

        c = builder.participant("C")
        self.assertEqual(outcome.winner_id, c.id)
        self.assertEqual(saved["participants"][c.id], c)

        semi.refresh_from_db()
        self.assertEqual(semi.status, "completed")
        self.assertEqual(semi.winner, c)
        self.assertIsNotNone(semi.completed_at)

        final = Match.objects.get(tournament=tournament, round=2)
        self.assertEqual(final.slot2, c)
        self.assertEqual(final.slot2_kind, "assigned")

        b = builder.participant("B")
        b.refresh_from_db()
        self.assertEqual(b.status, "eliminated")

    def test_unchanged_structure_keeps_completion_time(self):
        builder = (
            TournamentBuilder()
            .single_elimination()
            .teams("A", "B")
            .start()
            .win("B", "A")
            .build()
        )
        tournament = builder.tournament
        final = builder.match("A", "B")
        completed_at = final.completed_at

        save_structure(tournament, tournament_to_structure(tournament))

        final.refresh_from_db()
        self.assertEqual(final.completed_at, completed_at)
        self.assertEqual(Match.objects.filter(tournament=tournament).count(), 1)
