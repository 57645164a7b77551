"""
Host operations on persisted tournaments.

Every mutating operation runs in one database transaction: the tournament
row is locked with select_for_update, converted to a tournament_core
structure, changed by the pure engine and written back. Writers on the same
tournament are serialized by the lock, so two submissions for one match are
applied one after the other and the later one wins (subject to the
correction rules of the engine). Observers are told about the change through
the tournament_changed signal once the transaction has committed.
"""

import logging
from functools import partial

import reversion
from django.db import transaction

from quizcup.tournament import conf
from quizcup.tournament.db_to_structure import tournament_to_structure
from quizcup.tournament.models import Match, Participant, Tournament
from quizcup.tournament.signals import tournament_changed
from quizcup.tournament.structure_to_db import save_structure
from quizcup.tournament_core import lifecycle, progression
from quizcup.tournament_core.exceptions import (
    InvalidBracketStateException,
    MatchNotFoundException,
    TournamentException,
)
from quizcup.tournament_core.knockout import knockout_final_positions
from quizcup.tournament_core.layout import calculate_bracket_layout
from quizcup.tournament_core.scoring import ScoringSystem
from quizcup.tournament_core.tiebreaks import calculate_standings

logger = logging.getLogger(__name__)


def _notify(tournament_id, change):
    transaction.on_commit(
        partial(
            tournament_changed.send,
            sender=Tournament,
            tournament_id=tournament_id,
            change=change,
        )
    )


def _log_failure(operation, tournament_id, error):
    if error.is_structural:
        logger.exception(
            "%s failed on tournament %s: %s", operation, tournament_id, error
        )
    else:
        logger.info(
            "%s rejected on tournament %s: %s (%s)",
            operation,
            tournament_id,
            error,
            error.code,
        )


def _apply(tournament_id, operation, comment, engine_call):
    """Lock a tournament, run an engine operation on it and persist the result.

    engine_call receives the current structure and returns
    (new structure, result). Returns (saved objects, result).
    """
    try:
        with transaction.atomic():
            with reversion.create_revision():
                reversion.set_comment(comment)
                tournament = Tournament.objects.select_for_update().get(pk=tournament_id)
                structure, result = engine_call(tournament_to_structure(tournament))
                saved = save_structure(tournament, structure)
            _notify(tournament.id, operation)
    except TournamentException as e:
        _log_failure(operation, tournament_id, e)
        raise
    return saved, result


def _locate_match(operation, match_id):
    """Return (tournament_id, match_id) for a stored match."""
    try:
        return Match.objects.values_list("tournament_id", "id").get(pk=match_id)
    except (Match.DoesNotExist, ValueError):
        error = MatchNotFoundException(f"Match {match_id!r} not found")
        _log_failure(operation, None, error)
        raise error


# -------------------------------------------------------------------------------
# Lifecycle


def create_tournament(
    name,
    format="single_elimination",
    min_teams=None,
    max_teams=None,
    tiebreaker_rules=None,
    points_per_win=3,
    points_per_draw=1,
    points_per_loss=0,
    auto_complete=None,
    description="",
    settings=None,
    start_date=None,
):
    """Validate the configuration and create a draft tournament."""
    if min_teams is None:
        min_teams = conf.default_min_teams()
    if max_teams is None:
        max_teams = conf.default_max_teams()
    if auto_complete is None:
        auto_complete = conf.auto_complete_elimination()

    try:
        structure = lifecycle.create_tournament(
            name=name,
            format=format,
            min_teams=min_teams,
            max_teams=max_teams,
            scoring=ScoringSystem(points_per_win, points_per_draw, points_per_loss),
            tiebreak_rules=tiebreaker_rules,
            auto_complete=auto_complete,
        )
    except TournamentException as e:
        _log_failure("create_tournament", None, e)
        raise

    with transaction.atomic():
        with reversion.create_revision():
            reversion.set_comment("Created tournament.")
            tournament = Tournament.objects.create(
                name=structure.name,
                description=description,
                format=structure.format.value,
                status=structure.status.value,
                min_teams=structure.min_teams,
                max_teams=structure.max_teams,
                tiebreaker_rules=[rule.value for rule in structure.tiebreak_rules],
                points_per_win=points_per_win,
                points_per_draw=points_per_draw,
                points_per_loss=points_per_loss,
                auto_complete=auto_complete,
                settings=settings or {},
                start_date=start_date,
            )
        _notify(tournament.id, "create_tournament")

    logger.info(
        "Created %s tournament %s (%s)", tournament.format, tournament.id, tournament.name
    )
    return tournament


def open_registration(tournament_id):
    saved, _ = _apply(
        tournament_id,
        "open_registration",
        "Opened registration.",
        lambda t: (lifecycle.open_registration(t), None),
    )
    logger.info("Opened registration for tournament %s", tournament_id)
    return saved["tournament"]


def register_team(tournament_id, team_ref, name="", seed=None):
    """Register a team and return its Participant row."""
    team_ref = str(team_ref)
    saved, _ = _apply(
        tournament_id,
        "register_team",
        "Registered team %s." % team_ref,
        lambda t: (
            lifecycle.register_participant(t, team_ref, seed=seed, name=name),
            None,
        ),
    )
    logger.info("Registered team %s in tournament %s", team_ref, tournament_id)
    return Participant.objects.get(tournament_id=tournament_id, team_ref=team_ref)


def start_tournament(tournament_id):
    """Close registration and generate the bracket or schedule."""
    saved, _ = _apply(
        tournament_id,
        "start_tournament",
        "Started tournament and generated matches.",
        lambda t: (lifecycle.start_tournament(t), None),
    )
    tournament = saved["tournament"]
    logger.info(
        "Started tournament %s: %d matches over %d rounds",
        tournament.id,
        len(saved["matches"]),
        tournament.total_rounds,
    )
    return tournament


def end_tournament(tournament_id):
    saved, _ = _apply(
        tournament_id,
        "end_tournament",
        "Completed tournament.",
        lambda t: (lifecycle.end_tournament(t), None),
    )
    logger.info("Completed tournament %s", tournament_id)
    return saved["tournament"]


def cancel_tournament(tournament_id):
    saved, _ = _apply(
        tournament_id,
        "cancel_tournament",
        "Cancelled tournament.",
        lambda t: (lifecycle.cancel_tournament(t), None),
    )
    logger.info("Cancelled tournament %s", tournament_id)
    return saved["tournament"]


# -------------------------------------------------------------------------------
# Results


def submit_result(match_id, team1_score, team2_score):
    """Record a match result.

    Returns:
        MatchOutcome with the winner and loser Participant IDs
    """
    tournament_id, match_id = _locate_match("submit_result", match_id)
    _, outcome = _apply(
        tournament_id,
        "submit_result",
        "Recorded result %s-%s for match %s." % (team1_score, team2_score, match_id),
        lambda t: progression.submit_result(t, match_id, team1_score, team2_score),
    )
    logger.info(
        "Match %s finished %s-%s: winner %s, loser %s",
        match_id,
        team1_score,
        team2_score,
        outcome.winner_id,
        outcome.loser_id,
    )
    return outcome


def reopen_match(match_id):
    """Clear a match result and every later result that depended on it."""
    tournament_id, match_id = _locate_match("reopen_match", match_id)
    saved, _ = _apply(
        tournament_id,
        "reopen_match",
        "Reopened match %s." % match_id,
        lambda t: (progression.reopen_match(t, match_id), None),
    )
    logger.info("Reopened match %s in tournament %s", match_id, tournament_id)
    return Match.objects.get(pk=match_id)


# -------------------------------------------------------------------------------
# Read-only views


def get_standings(tournament_id):
    tournament = Tournament.objects.get(pk=tournament_id)
    return calculate_standings(tournament_to_structure(tournament))


def _require_elimination(tournament, what):
    if not tournament.is_elimination:
        raise InvalidBracketStateException(
            "%s is only available for single elimination tournaments" % what
        )


def get_bracket_layout(tournament_id, config=None):
    tournament = Tournament.objects.get(pk=tournament_id)
    _require_elimination(tournament, "Bracket layout")
    structure = tournament_to_structure(tournament)
    try:
        return calculate_bracket_layout(
            structure.matches, structure.total_rounds, config or conf.layout_config()
        )
    except TournamentException as e:
        _log_failure("get_bracket_layout", tournament_id, e)
        raise


def get_final_positions(tournament_id):
    """Placings of the decided participants of an elimination bracket.

    Returns:
        List of (position, Participant) ordered by position, then seed
    """
    tournament = Tournament.objects.get(pk=tournament_id)
    _require_elimination(tournament, "Final positions")
    positions = knockout_final_positions(tournament_to_structure(tournament))
    participants = Participant.objects.filter(pk__in=positions)
    return sorted(
        ((positions[p.pk], p) for p in participants),
        key=lambda item: (item[0], item[1].seed is None, item[1].seed or 0, item[1].pk),
    )


def list_tournaments(status=None, format=None):
    tournaments = Tournament.objects.all()
    if status is not None:
        tournaments = tournaments.filter(status=status)
    if format is not None:
        tournaments = tournaments.filter(format=format)
    return tournaments
