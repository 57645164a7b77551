"""
Management command to seed a quiz tournament:
- Configurable number of teams and format
- Faker generated team names, seeded in registration order
- Bracket or schedule generated on start
- Optional simulated results for every round
"""

import random

from django.core.management.base import BaseCommand, CommandError
from faker import Faker

from quizcup.tournament import services
from quizcup.tournament.builder import simulate_tournament
from quizcup.tournament_core.exceptions import TournamentException
from quizcup.tournament_core.knockout import calculate_bye_count, get_round_name
from quizcup.tournament_core.scoring import SCORING_PRESETS


class Command(BaseCommand):
    help = "Seed a quiz tournament with generated teams and optional results"

    def add_arguments(self, parser):
        parser.add_argument(
            "--teams",
            type=int,
            default=8,
            help="Number of teams (default: 8)",
        )
        parser.add_argument(
            "--format",
            choices=["single_elimination", "round_robin"],
            default="single_elimination",
            help="Tournament format (default: single_elimination)",
        )
        parser.add_argument(
            "--scoring",
            choices=sorted(SCORING_PRESETS),
            default="3-1-0",
            help="Points for a win, draw and loss (default: 3-1-0)",
        )
        parser.add_argument(
            "--name",
            type=str,
            default=None,
            help="Tournament name (default: generated)",
        )
        parser.add_argument(
            "--play",
            action="store_true",
            help="Simulate results for every playable match",
        )
        parser.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Random seed for reproducible team names and results",
        )

    def handle(self, *args, **options):
        teams_count = options["teams"]
        tournament_format = options["format"]
        scoring = SCORING_PRESETS[options["scoring"]]

        if options["seed"] is not None:
            random.seed(options["seed"])
            Faker.seed(options["seed"])
        fake = Faker()

        if teams_count < 2:
            raise CommandError(f"A tournament needs at least 2 teams, got {teams_count}")

        name = options["name"] or f"{fake.city()} Quiz Cup"
        self.stdout.write(self.style.WARNING(f"Creating {name}..."))
        self.stdout.write(f"  - {teams_count} teams")
        self.stdout.write(f"  - Format: {tournament_format.replace('_', ' ')}")
        self.stdout.write(f"  - Scoring: {options['scoring']}")

        try:
            tournament = services.create_tournament(
                name,
                format=tournament_format,
                min_teams=2,
                max_teams=max(teams_count, 2),
                points_per_win=scoring.points_per_win,
                points_per_draw=scoring.points_per_draw,
                points_per_loss=scoring.points_per_loss,
                description=fake.sentence(),
                settings={
                    "rounds_per_match": 3,
                    "time_per_round": 60,
                    "categories": sorted(set(fake.words(nb=4))),
                },
            )
            services.open_registration(tournament.id)

            generator = QuizTeamGenerator(fake)
            for seed in range(1, teams_count + 1):
                team_name = generator.generate_team_name()
                services.register_team(
                    tournament.id, f"team-{seed}", name=team_name, seed=seed
                )

            tournament = services.start_tournament(tournament.id)
        except TournamentException as e:
            raise CommandError(f"Error creating tournament: {e} ({e.code})")

        self.stdout.write(self.style.SUCCESS(f"✓ Created tournament: {tournament.name}"))
        self.stdout.write(f"  - Tournament ID: {tournament.id}")
        self.stdout.write(f"  - Rounds: {tournament.total_rounds}")
        if tournament.is_elimination:
            self.stdout.write(f"  - Byes: {calculate_bye_count(teams_count)}")

        if options["play"]:
            self._play(tournament)
            tournament.refresh_from_db()
            self.stdout.write(
                self.style.SUCCESS(f"✓ Simulated results (status: {tournament.status})")
            )
            if tournament.is_elimination:
                self._print_final_positions(tournament)
            else:
                self._print_standings(tournament)

    def _play(self, tournament):
        for round_number, played in simulate_tournament(tournament):
            if tournament.is_elimination:
                label = get_round_name(round_number, tournament.total_rounds)
            else:
                label = f"Round {round_number}"
            self.stdout.write(f"  - {label}: {played} matches played")

    def _print_standings(self, tournament):
        names = {p.id: str(p) for p in tournament.participant_set.all()}
        self.stdout.write("\nStandings:")
        for entry in services.get_standings(tournament.id)[:8]:
            self.stdout.write(
                f"  {entry.position:2d}. {names[entry.participant_id]} "
                f"({entry.matches_won}-{entry.matches_lost}, "
                f"{entry.tournament_points} pts, {entry.points_difference:+d})"
            )

    def _print_final_positions(self, tournament):
        self.stdout.write("\nFinal positions:")
        for position, participant in services.get_final_positions(tournament.id)[:8]:
            self.stdout.write(f"  {position:2d}. {participant}")


class QuizTeamGenerator:
    """Generate unique quiz team names."""

    def __init__(self, fake):
        self.fake = fake
        self.used_names = set()

    def generate_team_name(self):
        """Generate a unique pub quiz style team name."""
        patterns = [
            lambda: f"The {self.fake.color_name()} {self.fake.word().title()}s",
            lambda: f"{self.fake.last_name()}'s Know-It-Alls",
            lambda: f"Quiz {self.fake.word().title()}",
            lambda: f"{self.fake.city()} Brainiacs",
        ]
        base_name = random.choice(patterns)()

        # Ensure uniqueness
        attempts = 0
        team_name = base_name
        while team_name in self.used_names and attempts < 50:
            attempts += 1
            team_name = f"{base_name} {attempts}"

        self.used_names.add(team_name)
        return team_name
