"""
Match result recording and winner propagation.

Results are applied to an immutable Tournament: validation, winner
selection, the match update, propagation into the next round and the
participant status refresh all produce one new Tournament value. If any
step fails the caller still holds the untouched original.
"""

from typing import Dict, Optional, Tuple
from dataclasses import dataclass, replace

from quizcup.tournament_core.exceptions import (
    DrawNotAllowedException,
    InvalidBracketStateException,
    InvalidScoreException,
    InvalidTransitionException,
    MatchNotFoundException,
)
from quizcup.tournament_core.knockout import destination_of, is_knockout_complete
from quizcup.tournament_core.structure import (
    Match,
    MatchId,
    MatchStatus,
    ParticipantId,
    ParticipantStatus,
    Slot,
    Tournament,
    TournamentStatus,
)


@dataclass(frozen=True)
class MatchOutcome:
    winner_id: ParticipantId
    loser_id: ParticipantId


def _validate_score(score) -> int:
    if isinstance(score, bool) or not isinstance(score, int) or score < 0:
        raise InvalidScoreException(
            f"Scores must be non-negative integers, got {score!r}"
        )
    return score


def _require_in_progress(tournament: Tournament):
    if tournament.status != TournamentStatus.IN_PROGRESS:
        raise InvalidTransitionException(
            f"Results can only be recorded while the tournament is in progress "
            f"(status: {tournament.status.value})"
        )


def _require_match(tournament: Tournament, match_id: MatchId) -> Match:
    match = tournament.match(match_id)
    if match is None:
        raise MatchNotFoundException(f"Match {match_id!r} not found")
    return match


def _destination(tournament: Tournament, match: Match) -> Optional[Tuple[Match, int]]:
    """The next-round match and slot a match's winner feeds, if any."""
    if not tournament.is_elimination or match.round >= tournament.total_rounds:
        return None

    dest_round, dest_number, dest_slot = destination_of(match.round, match.match_number)
    dest = tournament.match_at(dest_round, dest_number)
    if dest is None:
        raise MatchNotFoundException(
            f"Propagation target round {dest_round} match {dest_number} is missing "
            f"for match {match.id!r}"
        )
    return dest, dest_slot


def submit_result(
    tournament: Tournament, match_id: MatchId, team1_score: int, team2_score: int
) -> Tuple[Tournament, MatchOutcome]:
    """Record a match result and propagate the winner.

    Resubmitting a completed match overwrites its result. If that changes
    the winner of an elimination match whose next-round match is already
    decided, the submission is rejected; reopen the later match first.

    Returns:
        (updated tournament, outcome)

    Raises:
        InvalidTransitionException: tournament is not in progress
        MatchNotFoundException: unknown match or missing propagation target
        InvalidScoreException: negative or non-integer score
        InvalidBracketStateException: match slots are not both assigned
        DrawNotAllowedException: equal scores
    """
    _require_in_progress(tournament)
    match = _require_match(tournament, match_id)
    team1_score = _validate_score(team1_score)
    team2_score = _validate_score(team2_score)

    if match.is_bye or not match.is_playable:
        raise InvalidBracketStateException(
            f"Match {match.bracket_position or match.id} does not have two assigned participants"
        )
    if team1_score == team2_score:
        raise DrawNotAllowedException(
            "Matches cannot end in a draw. Please enter different scores."
        )

    if team1_score > team2_score:
        winner_id, loser_id = match.slot1.participant_id, match.slot2.participant_id
    else:
        winner_id, loser_id = match.slot2.participant_id, match.slot1.participant_id

    changes = [
        replace(
            match,
            team1_score=team1_score,
            team2_score=team2_score,
            winner_id=winner_id,
            loser_id=loser_id,
            status=MatchStatus.COMPLETED,
        )
    ]

    destination = _destination(tournament, match)
    if destination is not None:
        dest, dest_slot = destination
        current = dest.slot(dest_slot)
        if dest.is_completed and current.participant_id != winner_id:
            raise InvalidBracketStateException(
                f"Match {dest.bracket_position or dest.id} has already been decided; "
                "reopen it before changing the winner of an earlier match"
            )
        changes.append(dest.with_slot(dest_slot, Slot.assigned(winner_id)))

    updated = refresh_tournament_state(tournament.with_matches(changes))
    return updated, MatchOutcome(winner_id=winner_id, loser_id=loser_id)


def reopen_match(tournament: Tournament, match_id: MatchId) -> Tournament:
    """Clear a completed match's result so it can be played again.

    The winner is withdrawn from the next-round slot it was propagated into,
    and any later match already decided with that winner in it is reopened
    as well, all the way to the final.
    """
    _require_in_progress(tournament)
    match = _require_match(tournament, match_id)
    if match.is_bye:
        raise InvalidBracketStateException(
            f"Bye match {match.bracket_position or match.id} cannot be reopened"
        )
    if not match.is_completed:
        raise InvalidBracketStateException(
            f"Match {match.bracket_position or match.id} has no result to reopen"
        )

    arena: Dict[Tuple[int, int], Match] = {
        (m.round, m.match_number): m for m in tournament.matches
    }

    def _reopen(position: Tuple[int, int]):
        current = arena[position]
        arena[position] = current.cleared()
        if not tournament.is_elimination or current.round >= tournament.total_rounds:
            return

        dest_round, dest_number, dest_slot = destination_of(*position)
        dest_position = (dest_round, dest_number)
        if dest_position not in arena:
            raise MatchNotFoundException(
                f"Propagation target round {dest_round} match {dest_number} is missing"
            )
        if arena[dest_position].slot(dest_slot).participant_id != current.winner_id:
            return
        if arena[dest_position].is_completed:
            _reopen(dest_position)
        arena[dest_position] = arena[dest_position].with_slot(
            dest_slot, Slot.unassigned()
        )

    _reopen((match.round, match.match_number))
    return refresh_tournament_state(tournament.with_matches(arena.values()))


def _is_resolved(match: Match) -> bool:
    return match.is_decided or match.status == MatchStatus.BYE


def calculate_current_round(tournament: Tournament) -> int:
    """Lowest round that still has an unresolved match."""
    if not tournament.matches:
        return 0
    for round_ in tournament.rounds:
        if not all(_is_resolved(m) for m in round_.matches):
            return round_.number
    return tournament.total_rounds


def calculate_participant_statuses(
    tournament: Tournament,
) -> Dict[ParticipantId, ParticipantStatus]:
    """Derive every participant's status from the match arena.

    Round robin never eliminates. In an elimination bracket a participant is
    eliminated once they lose a completed match, and has status BYE while
    the only match they have come through is a bye.
    """
    statuses = {p.id: ParticipantStatus.ACTIVE for p in tournament.participants}
    if not tournament.is_elimination:
        return statuses

    played = set()
    for match in tournament.matches:
        if match.is_completed:
            played.update(match.participant_ids())
            statuses[match.loser_id] = ParticipantStatus.ELIMINATED

    for match in tournament.matches:
        if match.is_bye and match.winner_id not in played:
            statuses[match.winner_id] = ParticipantStatus.BYE
    return statuses


def refresh_tournament_state(tournament: Tournament) -> Tournament:
    """Recompute participant statuses, the current round and completion."""
    statuses = calculate_participant_statuses(tournament)
    participants = tuple(
        p if p.status == statuses.get(p.id, p.status) else replace(p, status=statuses[p.id])
        for p in tournament.participants
    )

    status = tournament.status
    if (
        tournament.auto_complete
        and status == TournamentStatus.IN_PROGRESS
        and is_knockout_complete(tournament)
    ):
        status = TournamentStatus.COMPLETED

    return replace(
        tournament,
        participants=participants,
        current_round=calculate_current_round(tournament),
        status=status,
    )
