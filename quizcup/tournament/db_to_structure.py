"""
Transform database models to tournament_core structure representation.

This module provides functions to convert Django ORM models from quizcup.tournament
into the immutable tournament_core structures used by the engine. Participant
and match IDs in the resulting structure are the database primary keys.
"""

from quizcup.tournament_core.structure import (
    Match,
    MatchStatus,
    Participant,
    ParticipantStatus,
    Slot,
    SlotKind,
    Tournament,
    TournamentFormat,
    TournamentStatus,
)
from quizcup.tournament_core.tiebreaks import normalize_tiebreak_rules


def slot_to_structure(kind: str, participant_id) -> Slot:
    """Convert a stored slot kind and participant FK to a Slot."""
    kind = SlotKind(kind)
    if kind == SlotKind.ASSIGNED:
        return Slot.assigned(participant_id)
    if kind == SlotKind.BYE:
        return Slot.bye()
    return Slot.unassigned()


def participant_to_structure(participant) -> Participant:
    return Participant(
        id=participant.id,
        team_ref=participant.team_ref,
        seed=participant.seed,
        status=ParticipantStatus(participant.status),
        name=participant.name,
    )


def match_to_structure(match) -> Match:
    return Match(
        id=match.id,
        round=match.round,
        match_number=match.match_number,
        slot1=slot_to_structure(match.slot1_kind, match.slot1_id),
        slot2=slot_to_structure(match.slot2_kind, match.slot2_id),
        team1_score=match.team1_score,
        team2_score=match.team2_score,
        winner_id=match.winner_id,
        loser_id=match.loser_id,
        status=MatchStatus(match.status),
        bracket_position=match.bracket_position,
    )


def tournament_to_structure(tournament) -> Tournament:
    """Convert a Tournament row and its participants and matches.

    This is the main entry point for converting database models to the
    structure every engine operation works on.

    Args:
        tournament: A Tournament model instance from the database

    Returns:
        Tournament structure with participants in registration order and
        matches in (round, match_number) order
    """
    participants = tournament.participant_set.all().order_by("id")
    matches = tournament.match_set.all().order_by("round", "match_number")

    return Tournament(
        id=tournament.id,
        name=tournament.name,
        format=TournamentFormat(tournament.format),
        status=TournamentStatus(tournament.status),
        min_teams=tournament.min_teams,
        max_teams=tournament.max_teams,
        current_round=tournament.current_round,
        total_rounds=tournament.total_rounds,
        scoring=tournament.scoring,
        tiebreak_rules=tuple(normalize_tiebreak_rules(tournament.tiebreaker_rules)),
        participants=tuple(participant_to_structure(p) for p in participants),
        matches=tuple(match_to_structure(m) for m in matches),
        auto_complete=tournament.auto_complete,
    )
