"""
Builder for creating tournament structures with a fluent API.

This module provides a builder class for creating tournament_core structures
and playing results into them without database dependencies. It is mainly
used by tests to describe a whole competition in a few lines:

    tournament = (
        TournamentBuilder("Pub Quiz Cup")
        .round_robin(points_per_win=3)
        .teams("A", "B", "C", "D")
        .start()
        .result("A", "B", 10, 8)
        .build()
    )
"""

from typing import Optional, Sequence

from quizcup.tournament_core.lifecycle import (
    create_tournament,
    end_tournament,
    open_registration,
    register_participant,
    start_tournament,
)
from quizcup.tournament_core.progression import reopen_match, submit_result
from quizcup.tournament_core.scoring import ScoringSystem
from quizcup.tournament_core.structure import (
    Match,
    Tournament,
    TournamentFormat,
    TournamentStatus,
)


class TournamentBuilder:
    """Builder for creating tournament structures easily."""

    def __init__(self, name: str = "Test Tournament"):
        self._name = name
        self._format = TournamentFormat.SINGLE_ELIMINATION
        self._min_teams = 2
        self._max_teams = 64
        self._scoring = ScoringSystem()
        self._tiebreak_rules: Optional[Sequence] = None
        self._auto_complete = False
        self.tournament: Optional[Tournament] = None

    def single_elimination(self, auto_complete: bool = False) -> "TournamentBuilder":
        self._format = TournamentFormat.SINGLE_ELIMINATION
        self._auto_complete = auto_complete
        return self

    def round_robin(
        self,
        points_per_win: int = 3,
        points_per_draw: int = 1,
        points_per_loss: int = 0,
        tiebreak_rules: Optional[Sequence] = None,
    ) -> "TournamentBuilder":
        self._format = TournamentFormat.ROUND_ROBIN
        self._scoring = ScoringSystem(points_per_win, points_per_draw, points_per_loss)
        self._tiebreak_rules = tiebreak_rules
        return self

    def team_limits(self, min_teams: int, max_teams: int) -> "TournamentBuilder":
        self._min_teams = min_teams
        self._max_teams = max_teams
        return self

    def _ensure_registration_open(self):
        if self.tournament is None:
            self.tournament = create_tournament(
                name=self._name,
                format=self._format,
                min_teams=self._min_teams,
                max_teams=self._max_teams,
                scoring=self._scoring,
                tiebreak_rules=self._tiebreak_rules,
                auto_complete=self._auto_complete,
            )
        if self.tournament.status == TournamentStatus.DRAFT:
            self.tournament = open_registration(self.tournament)

    def team(self, name: str, seed: Optional[int] = None) -> "TournamentBuilder":
        """Register a team; its name is also its participant ID."""
        self._ensure_registration_open()
        self.tournament = register_participant(self.tournament, name, seed=seed, name=name)
        return self

    def teams(self, *names: str) -> "TournamentBuilder":
        for name in names:
            self.team(name)
        return self

    def start(self) -> "TournamentBuilder":
        self._ensure_registration_open()
        self.tournament = start_tournament(self.tournament)
        return self

    def find_match(self, team1: str, team2: str) -> Match:
        """Find the playable or played match between two teams."""
        for match in self.tournament.matches:
            if set(match.participant_ids()) == {team1, team2}:
                return match
        raise ValueError(f"No match between {team1} and {team2}")

    def result(self, team1: str, team2: str, score1: int, score2: int) -> "TournamentBuilder":
        """Record team1 scoring score1 and team2 scoring score2 in their match."""
        match = self.find_match(team1, team2)
        if match.slot1.participant_id == team1:
            team1_score, team2_score = score1, score2
        else:
            team1_score, team2_score = score2, score1
        self.tournament, _ = submit_result(
            self.tournament, match.id, team1_score, team2_score
        )
        return self

    def win(self, winner: str, loser: str) -> "TournamentBuilder":
        """Record a simple win for a knockout walkthrough."""
        return self.result(winner, loser, 10, 5)

    def reopen(self, team1: str, team2: str) -> "TournamentBuilder":
        self.tournament = reopen_match(self.tournament, self.find_match(team1, team2).id)
        return self

    def end(self) -> "TournamentBuilder":
        self.tournament = end_tournament(self.tournament)
        return self

    def build(self) -> Tournament:
        if self.tournament is None:
            self._ensure_registration_open()
        return self.tournament
