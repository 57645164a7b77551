"""
Fluent assertion interface for testing tournament standings and brackets.

This module provides a clean, fluent way to assert tournament results for
testing purposes. It works with the pure Python tournament_core structures:

    assert_tournament(tournament).team("A").assert_().position(1).wins(2)
"""

from typing import List, Optional
from dataclasses import dataclass

from quizcup.tournament_core.knockout import get_knockout_winner
from quizcup.tournament_core.structure import (
    ParticipantId,
    ParticipantStatus,
    StandingEntry,
    Tournament,
)
from quizcup.tournament_core.tiebreaks import calculate_standings


# Use the built-in AssertionError for proper test framework integration


@dataclass
class StandingsAssertion:
    """Fluent interface for asserting tournament standings."""

    tournament: Tournament
    participant_id: Optional[ParticipantId] = None
    _standings: Optional[List[StandingEntry]] = None

    def __post_init__(self):
        """Calculate standings once on initialization."""
        if self._standings is None:
            self._standings = calculate_standings(self.tournament)

    def _name(self) -> str:
        participant = self.tournament.participant(self.participant_id)
        return participant.display_name if participant else f"ID:{self.participant_id}"

    def _entry(self) -> StandingEntry:
        if self.participant_id is None:
            raise AssertionError("No team selected for assertion")
        for entry in self._standings:
            if entry.participant_id == self.participant_id:
                return entry
        raise AssertionError(f"Team {self.participant_id!r} not found in standings")

    def team(self, participant_id: ParticipantId) -> "CompetitorAssertion":
        """Select a team by participant ID for assertions."""
        if self.tournament.participant(participant_id) is None:
            raise AssertionError(f"Team '{participant_id}' not found in tournament")
        return CompetitorAssertion(
            tournament=self.tournament,
            participant_id=participant_id,
            _standings=self._standings,
        )

    def order(self, *participant_ids: ParticipantId) -> "StandingsAssertion":
        """Assert the leading positions of the standings, top first."""
        actual = [e.participant_id for e in self._standings[: len(participant_ids)]]
        if actual != list(participant_ids):
            raise AssertionError(
                f"Expected standings to start {list(participant_ids)}, got {actual}"
            )
        return self


class CompetitorAssertion(StandingsAssertion):
    """Assertions for a specific team."""

    def assert_(self) -> "CompetitorResultAssertion":
        """Start a chain of assertions for this team."""
        return CompetitorResultAssertion(
            tournament=self.tournament,
            participant_id=self.participant_id,
            _standings=self._standings,
        )


class CompetitorResultAssertion(StandingsAssertion):
    """Fluent interface for asserting a team's results."""

    def _check(self, label: str, expected, actual) -> "CompetitorResultAssertion":
        if actual != expected:
            raise AssertionError(f"{self._name()} expected {expected} {label}, got {actual}")
        return self

    def played(self, expected: int) -> "CompetitorResultAssertion":
        return self._check("matches played", expected, self._entry().matches_played)

    def wins(self, expected: int) -> "CompetitorResultAssertion":
        return self._check("wins", expected, self._entry().matches_won)

    def losses(self, expected: int) -> "CompetitorResultAssertion":
        return self._check("losses", expected, self._entry().matches_lost)

    def points(self, expected: int) -> "CompetitorResultAssertion":
        """Assert the tournament points."""
        return self._check("points", expected, self._entry().tournament_points)

    def points_for(self, expected: int) -> "CompetitorResultAssertion":
        return self._check("points for", expected, self._entry().points_for)

    def points_against(self, expected: int) -> "CompetitorResultAssertion":
        return self._check("points against", expected, self._entry().points_against)

    def points_difference(self, expected: int) -> "CompetitorResultAssertion":
        return self._check(
            "points difference", expected, self._entry().points_difference
        )

    def position(self, expected: int) -> "CompetitorResultAssertion":
        """Assert the final position in standings."""
        return self._check("position", expected, self._entry().position)

    def status(self, expected: ParticipantStatus) -> "CompetitorResultAssertion":
        participant = self.tournament.participant(self.participant_id)
        return self._check("status", expected, participant.status)

    def in_round(self, round_number: int) -> "CompetitorResultAssertion":
        """Assert that the team has a slot in some match of a round."""
        for match in self.tournament.round_matches(round_number):
            if match.involves(self.participant_id):
                return self
        raise AssertionError(f"{self._name()} did not reach round {round_number}")

    def eliminated_in_round(self, round_number: int) -> "CompetitorResultAssertion":
        """Assert that the team lost a completed match in a round."""
        for match in self.tournament.round_matches(round_number):
            if match.is_completed and match.loser_id == self.participant_id:
                return self
        raise AssertionError(
            f"{self._name()} was not eliminated in round {round_number}"
        )

    def bracket_position(self, round_number: int, match_number: int, slot: int) -> "CompetitorResultAssertion":
        """Assert the team occupies a given slot of a given match."""
        match = self.tournament.match_at(round_number, match_number)
        if match is None:
            raise AssertionError(
                f"Round {round_number} match {match_number} not found in tournament"
            )
        actual = match.slot(slot).participant_id
        if actual != self.participant_id:
            raise AssertionError(
                f"{self._name()} not in slot {slot} of round {round_number} "
                f"match {match_number} (found {actual!r})"
            )
        return self

    def wins_knockout_tournament(self) -> "CompetitorResultAssertion":
        """Assert that the team wins the entire knockout tournament."""
        winner_id = get_knockout_winner(self.tournament)
        if winner_id != self.participant_id:
            raise AssertionError(
                f"{self._name()} did not win tournament (winner: {winner_id or 'No winner'})"
            )
        return self


def assert_tournament(tournament: Tournament) -> StandingsAssertion:
    """Entry point for tournament assertions."""
    return StandingsAssertion(tournament)
