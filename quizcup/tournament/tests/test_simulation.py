import random

from django.test import TestCase

from quizcup.tournament import services
from quizcup.tournament.builder import TournamentBuilder, simulate_quiz_result
from quizcup.tournament.models import Match


class SimulateQuizResultTests(TestCase):
    def test_never_a_draw(self):
        random.seed(4545)
        for seed1, seed2 in [(1, 2), (5, 6), (None, None), (1, 16)]:
            for _ in range(50):
                score1, score2 = simulate_quiz_result(seed1, seed2, questions=10)
                self.assertNotEqual(score1, score2)
                self.assertGreaterEqual(min(score1, score2), 0)
                self.assertLessEqual(max(score1, score2), 11)


class SimulateResultsTests(TestCase):
    def test_knockout_is_played_to_the_final(self):
        random.seed(1)
        builder = (
            TournamentBuilder("Simulated Cup")
            .single_elimination()
            .teams("A", "B", "C", "D", "E", "F")
            .start()
            .simulate_results()
        )
        tournament = builder.tournament

        final = Match.objects.get(tournament=tournament, round=3)
        self.assertEqual(final.status, "completed")
        self.assertIsNotNone(final.winner_id)
        self.assertFalse(
            Match.objects.filter(tournament=tournament, status="pending").exists()
        )
        self.assertEqual(tournament.status, "in_progress")
        self.assertEqual(
            tournament.participant_set.exclude(status="eliminated").count(), 1
        )

    def test_auto_complete(self):
        random.seed(2)
        builder = (
            TournamentBuilder()
            .single_elimination(auto_complete=True)
            .teams("A", "B", "C", "D")
            .start()
            .simulate_results()
        )
        self.assertEqual(builder.tournament.status, "completed")

    def test_max_rounds(self):
        random.seed(3)
        builder = (
            TournamentBuilder()
            .single_elimination()
            .teams("A", "B", "C", "D", "E", "F", "G", "H")
            .start()
            .simulate_results(max_rounds=1)
        )
        matches = Match.objects.filter(tournament=builder.tournament)
        self.assertEqual(matches.filter(round=1, status="completed").count(), 4)
        self.assertEqual(matches.filter(round=2, status="pending").count(), 2)
        self.assertEqual(builder.tournament.current_round, 2)

    def test_round_robin_standings(self):
        random.seed(5)
        builder = (
            TournamentBuilder()
            .round_robin()
            .teams("A", "B", "C", "D", "E")
            .start()
            .simulate_results()
        )
        tournament = builder.tournament
        self.assertEqual(
            Match.objects.filter(tournament=tournament, status="completed").count(), 10
        )

        standings = services.get_standings(tournament.id)
        self.assertEqual([entry.position for entry in standings], [1, 2, 3, 4, 5])
        for entry in standings:
            self.assertEqual(entry.matches_played, 4)
        self.assertEqual(sum(entry.matches_won for entry in standings), 10)
        self.assertEqual(
            sum(entry.tournament_points for entry in standings), 10 * 3
        )

    def test_partial_results_before_simulation(self):
        random.seed(6)
        builder = (
            TournamentBuilder()
            .single_elimination()
            .teams("A", "B", "C", "D")
            .start()
            .win("D", "A")
            .simulate_results()
        )
        a = builder.participant("A")
        a.refresh_from_db()
        self.assertEqual(a.status, "eliminated")
        self.assertEqual(builder.match("D", "A").winner, builder.participant("D"))
