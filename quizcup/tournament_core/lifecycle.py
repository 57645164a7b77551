"""
Tournament lifecycle: status transitions, registration and generation.

The tournament moves draft -> registration_open -> in_progress -> completed,
and can be cancelled from any other state. Entering in_progress generates
the complete match structure (bracket or round robin schedule) exactly once;
if the participant guard fails nothing is generated and the status stays
unchanged.
"""

from typing import Dict, FrozenSet, List, Optional, Sequence
from dataclasses import replace

from quizcup.tournament_core.exceptions import (
    DuplicateParticipantException,
    InsufficientParticipantsException,
    InvalidBracketStateException,
    InvalidConfigurationException,
    InvalidTransitionException,
    RegistrationClosedException,
    TournamentFullException,
)
from quizcup.tournament_core.knockout import create_knockout_bracket
from quizcup.tournament_core.progression import refresh_tournament_state
from quizcup.tournament_core.round_robin import create_round_robin_schedule
from quizcup.tournament_core.scoring import ScoringSystem, STANDARD_SCORING
from quizcup.tournament_core.structure import (
    Match,
    MatchStatus,
    Participant,
    ParticipantId,
    Tournament,
    TournamentFormat,
    TournamentStatus,
)
from quizcup.tournament_core.tiebreaks import normalize_tiebreak_rules

ALLOWED_TRANSITIONS: Dict[TournamentStatus, FrozenSet[TournamentStatus]] = {
    TournamentStatus.DRAFT: frozenset(
        {TournamentStatus.REGISTRATION_OPEN, TournamentStatus.CANCELLED}
    ),
    TournamentStatus.REGISTRATION_OPEN: frozenset(
        {TournamentStatus.IN_PROGRESS, TournamentStatus.CANCELLED}
    ),
    TournamentStatus.IN_PROGRESS: frozenset(
        {TournamentStatus.COMPLETED, TournamentStatus.CANCELLED}
    ),
    TournamentStatus.COMPLETED: frozenset({TournamentStatus.CANCELLED}),
    TournamentStatus.CANCELLED: frozenset(),
}


def can_transition(current: TournamentStatus, target: TournamentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def _transition(tournament: Tournament, target: TournamentStatus) -> Tournament:
    if not can_transition(tournament.status, target):
        raise InvalidTransitionException(
            f"Cannot move tournament from {tournament.status.value} to {target.value}"
        )
    return replace(tournament, status=target)


def create_tournament(
    name: str = "",
    format=TournamentFormat.SINGLE_ELIMINATION,
    min_teams: int = 2,
    max_teams: int = 16,
    scoring: ScoringSystem = STANDARD_SCORING,
    tiebreak_rules: Optional[Sequence] = None,
    auto_complete: bool = False,
    id=None,
) -> Tournament:
    """Create a validated tournament in draft status."""
    try:
        format = TournamentFormat(format)
    except ValueError:
        raise InvalidConfigurationException(f"Unsupported tournament format: {format}")

    try:
        rules = tuple(normalize_tiebreak_rules(tiebreak_rules))
    except ValueError as e:
        raise InvalidConfigurationException(str(e))
    if len(set(rules)) != len(rules):
        raise InvalidConfigurationException("Tiebreak rules must not repeat")

    if min_teams < 2:
        raise InvalidConfigurationException("A tournament needs at least 2 teams")
    if max_teams < min_teams:
        raise InvalidConfigurationException(
            f"max_teams ({max_teams}) is less than min_teams ({min_teams})"
        )

    return Tournament(
        id=id,
        name=name,
        format=format,
        status=TournamentStatus.DRAFT,
        min_teams=min_teams,
        max_teams=max_teams,
        scoring=scoring,
        tiebreak_rules=rules,
        auto_complete=auto_complete,
    )


def open_registration(tournament: Tournament) -> Tournament:
    return _transition(tournament, TournamentStatus.REGISTRATION_OPEN)


def register_participant(
    tournament: Tournament,
    team_ref: str,
    seed: Optional[int] = None,
    name: str = "",
    participant_id: Optional[ParticipantId] = None,
) -> Tournament:
    """Add a team to a tournament that is open for registration.

    The team reference doubles as the participant ID unless one is given.
    """
    if tournament.status != TournamentStatus.REGISTRATION_OPEN:
        raise RegistrationClosedException(
            f"Registration is not open (status: {tournament.status.value})"
        )
    if any(p.team_ref == team_ref for p in tournament.participants):
        raise DuplicateParticipantException(f"Team {team_ref} is already registered")
    if tournament.participant_count >= tournament.max_teams:
        raise TournamentFullException(
            f"Tournament is full ({tournament.max_teams} teams)"
        )
    if seed is not None:
        if seed < 1:
            raise InvalidConfigurationException(f"Seed must be positive, got {seed}")
        if any(p.seed == seed for p in tournament.participants):
            raise InvalidConfigurationException(f"Seed {seed} is already taken")

    participant = Participant(
        id=team_ref if participant_id is None else participant_id,
        team_ref=team_ref,
        seed=seed,
        name=name,
    )
    return replace(tournament, participants=tournament.participants + (participant,))


def generate_matches(tournament: Tournament):
    """Generate the match structure for the tournament's format.

    Returns:
        (matches, total_rounds)
    """
    if tournament.format == TournamentFormat.SINGLE_ELIMINATION:
        return create_knockout_bracket(tournament.participants)
    elif tournament.format == TournamentFormat.ROUND_ROBIN:
        return create_round_robin_schedule(tournament.participants)
    raise InvalidConfigurationException(
        f"Unsupported tournament format: {tournament.format}"
    )


def start_tournament(tournament: Tournament) -> Tournament:
    """Close registration, generate all matches and move to in_progress."""
    if not can_transition(tournament.status, TournamentStatus.IN_PROGRESS):
        raise InvalidTransitionException(
            f"Cannot start a tournament in status {tournament.status.value}"
        )
    if tournament.matches:
        raise InvalidBracketStateException("Matches have already been generated")
    if tournament.participant_count < tournament.min_teams:
        raise InsufficientParticipantsException(
            f"{tournament.participant_count} teams registered, "
            f"at least {tournament.min_teams} required"
        )

    matches, total_rounds = generate_matches(tournament)
    started = replace(
        tournament,
        status=TournamentStatus.IN_PROGRESS,
        matches=tuple(matches),
        total_rounds=total_rounds,
        current_round=1,
    )
    return refresh_tournament_state(started)


def end_tournament(tournament: Tournament) -> Tournament:
    return _transition(tournament, TournamentStatus.COMPLETED)


def cancel_tournament(tournament: Tournament) -> Tournament:
    return _transition(tournament, TournamentStatus.CANCELLED)


def _counts_for_progress(match: Match) -> bool:
    return not (match.status == MatchStatus.BYE and match.winner_id is None)


def tournament_progress(tournament: Tournament) -> float:
    """Percentage of matches that have been decided."""
    relevant = [m for m in tournament.matches if _counts_for_progress(m)]
    if not relevant:
        return 0.0
    decided = sum(1 for m in relevant if m.is_decided)
    return decided * 100.0 / len(relevant)


def upcoming_matches(tournament: Tournament, limit: int = 5) -> List[Match]:
    """Matches ready to be played, in schedule order."""
    ready = [
        m
        for m in tournament.matches
        if m.status in (MatchStatus.PENDING, MatchStatus.IN_PROGRESS) and m.is_playable
    ]
    ready.sort(key=lambda m: (m.round, m.match_number))
    return ready[:limit]


def recent_matches(tournament: Tournament, limit: int = 5) -> List[Match]:
    """Most recently scheduled completed matches, latest first."""
    completed = [m for m in tournament.matches if m.is_completed]
    completed.sort(key=lambda m: (m.round, m.match_number), reverse=True)
    return completed[:limit]
