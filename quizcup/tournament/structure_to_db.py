"""
Convert tournament_core structures to database objects.

This module writes a tournament_core Tournament back to its database rows.
It is used both by the service layer, which loads a structure, applies an
engine operation and saves the result, and by the TournamentBuilder, which
persists a structure created entirely in memory.
"""

from django.utils import timezone

from quizcup.tournament_core.structure import MatchStatus, Slot, Tournament


def _slot_values(slot: Slot, participant_rows):
    participant = participant_rows[slot.participant_id] if slot.is_assigned else None
    return slot.kind.value, participant.pk if participant else None


def _row_pk(participant_rows, participant_id):
    if participant_id is None:
        return None
    return participant_rows[participant_id].pk


def _update(row, values) -> bool:
    """Set changed attributes on a row; return whether anything changed."""
    changed = False
    for attr, value in values.items():
        if getattr(row, attr) != value:
            setattr(row, attr, value)
            changed = True
    return changed


def save_structure(tournament_row, structure: Tournament):
    """Write a tournament structure to an existing Tournament row.

    Participants are matched to rows by team_ref and matches by
    (round, match_number); missing rows are created and only rows whose
    values changed are saved.

    Args:
        tournament_row: The Tournament model instance to update
        structure: The tournament_core Tournament to persist

    Returns:
        dict: A dictionary containing the database objects:
            - 'tournament': The Tournament instance
            - 'participants': Dict mapping structure participant IDs to Participant rows
            - 'matches': Dict mapping structure match IDs to Match rows
    """
    from quizcup.tournament.models import Match, Participant

    if _update(
        tournament_row,
        {
            "status": structure.status.value,
            "current_round": structure.current_round,
            "total_rounds": structure.total_rounds,
        },
    ):
        tournament_row.save()

    existing_participants = {
        p.team_ref: p for p in Participant.objects.filter(tournament=tournament_row)
    }
    participant_rows = {}
    for participant in structure.participants:
        values = {
            "name": participant.name,
            "seed": participant.seed,
            "status": participant.status.value,
        }
        row = existing_participants.get(participant.team_ref)
        if row is None:
            row = Participant.objects.create(
                tournament=tournament_row, team_ref=participant.team_ref, **values
            )
        elif _update(row, values):
            row.save()
        participant_rows[participant.id] = row

    existing_matches = {
        (m.round, m.match_number): m
        for m in Match.objects.filter(tournament=tournament_row)
    }
    match_rows = {}
    now = timezone.now()
    for match in structure.matches:
        slot1_kind, slot1_id = _slot_values(match.slot1, participant_rows)
        slot2_kind, slot2_id = _slot_values(match.slot2, participant_rows)
        values = {
            "bracket_position": match.bracket_position,
            "slot1_kind": slot1_kind,
            "slot1_id": slot1_id,
            "slot2_kind": slot2_kind,
            "slot2_id": slot2_id,
            "team1_score": match.team1_score,
            "team2_score": match.team2_score,
            "winner_id": _row_pk(participant_rows, match.winner_id),
            "loser_id": _row_pk(participant_rows, match.loser_id),
            "status": match.status.value,
        }

        row = existing_matches.get((match.round, match.match_number))
        if row is None:
            row = Match(
                tournament=tournament_row,
                round=match.round,
                match_number=match.match_number,
            )
        result_changed = (
            row.team1_score != match.team1_score
            or row.team2_score != match.team2_score
            or row.status != match.status.value
        )
        if match.status != MatchStatus.COMPLETED:
            values["completed_at"] = None
        elif result_changed or row.completed_at is None:
            values["completed_at"] = now

        if _update(row, values) or row.pk is None:
            row.save()
        match_rows[match.id] = row

    return {
        "tournament": tournament_row,
        "participants": participant_rows,
        "matches": match_rows,
    }


def structure_to_db(structure: Tournament, **tournament_fields):
    """Create database objects for a tournament structure built in memory.

    Args:
        structure: A tournament_core Tournament, e.g. from the TournamentBuilder
        tournament_fields: Extra Tournament model fields (description, settings, ...)

    Returns:
        dict: The same mapping as save_structure
    """
    from quizcup.tournament.models import Tournament as TournamentModel

    scoring = structure.scoring
    tournament_row = TournamentModel.objects.create(
        name=structure.name,
        format=structure.format.value,
        status=structure.status.value,
        min_teams=structure.min_teams,
        max_teams=structure.max_teams,
        current_round=structure.current_round,
        total_rounds=structure.total_rounds,
        tiebreaker_rules=[rule.value for rule in structure.tiebreak_rules],
        points_per_win=scoring.points_per_win,
        points_per_draw=scoring.points_per_draw,
        points_per_loss=scoring.points_per_loss,
        auto_complete=structure.auto_complete,
        **tournament_fields,
    )
    return save_structure(tournament_row, structure)
