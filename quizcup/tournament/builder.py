"""
Tournament builder that extends the core builder with database persistence.

This module provides a TournamentBuilder that wraps tournament_core.builder
and adds database persistence capabilities for testing and seeding.
"""

import random
from typing import List, Optional, Tuple

from quizcup.tournament_core.builder import TournamentBuilder as CoreTournamentBuilder
from quizcup.tournament.structure_to_db import structure_to_db


def simulate_quiz_result(
    seed1: Optional[int] = None,
    seed2: Optional[int] = None,
    questions: int = 30,
) -> Tuple[int, int]:
    """Simulate the scores of a quiz match.

    Better seeded teams answer more questions correctly on average. Ties are
    settled by a tiebreak question, so the scores are never equal.

    Args:
        seed1: Seed of the slot 1 team (None for unseeded)
        seed2: Seed of the slot 2 team (None for unseeded)
        questions: Number of questions asked in the match

    Returns:
        (team1_score, team2_score)
    """

    def strength(seed):
        if seed is None:
            return 0.5
        return max(0.3, 0.8 - 0.03 * (seed - 1))

    score1 = sum(1 for _ in range(questions) if random.random() < strength(seed1))
    score2 = sum(1 for _ in range(questions) if random.random() < strength(seed2))

    if score1 == score2:
        if random.random() < 0.5:
            score1 += 1
        else:
            score2 += 1
    return score1, score2


class TournamentBuilder:
    """Fluent interface for building tournaments with database persistence.

    Teams and results are described through the core builder; build() then
    writes the resulting structure to the database. Results can also be
    simulated afterwards through the service layer.
    """

    def __init__(self, name: str = "Test Tournament"):
        self.core_builder = CoreTournamentBuilder(name)
        self._db_objects = None
        self._tournament_fields = {}

    # Core builder delegation methods

    def single_elimination(self, auto_complete: bool = False) -> "TournamentBuilder":
        self.core_builder.single_elimination(auto_complete=auto_complete)
        return self

    def round_robin(self, **kwargs) -> "TournamentBuilder":
        self.core_builder.round_robin(**kwargs)
        return self

    def team_limits(self, min_teams: int, max_teams: int) -> "TournamentBuilder":
        self.core_builder.team_limits(min_teams, max_teams)
        return self

    def details(self, **fields) -> "TournamentBuilder":
        """Extra Tournament model fields (description, settings, start_date)."""
        self._tournament_fields.update(fields)
        return self

    def team(self, name: str, seed: Optional[int] = None) -> "TournamentBuilder":
        self.core_builder.team(name, seed=seed)
        return self

    def teams(self, *names: str) -> "TournamentBuilder":
        self.core_builder.teams(*names)
        return self

    def start(self) -> "TournamentBuilder":
        self.core_builder.start()
        return self

    def result(self, team1: str, team2: str, score1: int, score2: int) -> "TournamentBuilder":
        self.core_builder.result(team1, team2, score1, score2)
        return self

    def win(self, winner: str, loser: str) -> "TournamentBuilder":
        self.core_builder.win(winner, loser)
        return self

    def build(self) -> "TournamentBuilder":
        """Build database objects and return self for chaining."""
        if self._db_objects is None:
            self._db_objects = structure_to_db(
                self.core_builder.build(), **self._tournament_fields
            )
        return self

    # Database-specific methods

    @property
    def tournament(self):
        """The persisted Tournament row."""
        self.build()
        return self._db_objects["tournament"]

    def participant(self, team_name: str):
        self.build()
        return self._db_objects["participants"][team_name]

    def match(self, team1: str, team2: str):
        """The persisted Match row between two teams."""
        self.build()
        core_match = self.core_builder.find_match(team1, team2)
        return self._db_objects["matches"][core_match.id]

    def simulate_results(self, max_rounds: Optional[int] = None) -> "TournamentBuilder":
        """Play every ready match with simulated scores, round by round."""
        simulate_tournament(self.tournament, max_rounds=max_rounds)
        self.tournament.refresh_from_db()
        return self


def simulate_tournament(tournament, max_rounds: Optional[int] = None) -> List[Tuple[int, int]]:
    """Submit simulated results for every ready match, round by round.

    Results go through the service layer, so winners are propagated and
    history is recorded exactly as for real results.

    Returns:
        List of (round_number, matches_played)
    """
    from quizcup.tournament import services
    from quizcup.tournament.models import Match

    tournament.refresh_from_db()
    last_round = tournament.total_rounds
    if max_rounds is not None:
        last_round = min(last_round, max_rounds)

    played = []
    for round_number in range(1, last_round + 1):
        ready = (
            Match.objects.filter(
                tournament=tournament,
                round=round_number,
                status="pending",
                slot1_kind="assigned",
                slot2_kind="assigned",
            )
            .select_related("slot1", "slot2")
            .order_by("match_number")
        )
        count = 0
        for match in ready:
            score1, score2 = simulate_quiz_result(match.slot1.seed, match.slot2.seed)
            services.submit_result(match.id, score1, score2)
            count += 1
        played.append((round_number, count))
    return played
