"""
Standings and tiebreak calculation.

Standings aggregate every completed match a participant played and are
ordered through a configurable tiebreaker chain. They are recomputed from
the match list on every call; nothing is cached.
"""

from typing import Dict, List, Optional, Sequence, Set
from dataclasses import dataclass, field

from quizcup.tournament_core.scoring import ScoringSystem, STANDARD_SCORING
from quizcup.tournament_core.structure import (
    DEFAULT_TIEBREAK_RULES,
    Match,
    Participant,
    ParticipantId,
    StandingEntry,
    TiebreakRule,
    Tournament,
)


@dataclass(frozen=True)
class MatchResult:
    """Represents the result of a single match for a participant."""

    opponent_id: ParticipantId
    points_for: int  # Score the participant made in this match
    points_against: int  # Score the opponent made
    tournament_points: int  # Standings points earned from this match

    @property
    def won(self) -> bool:
        return self.points_for > self.points_against

    @property
    def lost(self) -> bool:
        return self.points_for < self.points_against

    @property
    def drawn(self) -> bool:
        return self.points_for == self.points_against


@dataclass(frozen=True)
class CompetitorScore:
    """Totals and match history for a participant."""

    participant_id: ParticipantId
    match_results: List[MatchResult] = field(default_factory=list)

    @property
    def matches_played(self) -> int:
        return len(self.match_results)

    @property
    def matches_won(self) -> int:
        return sum(1 for r in self.match_results if r.won)

    @property
    def matches_lost(self) -> int:
        return sum(1 for r in self.match_results if r.lost)

    @property
    def matches_drawn(self) -> int:
        return sum(1 for r in self.match_results if r.drawn)

    @property
    def points_for(self) -> int:
        return sum(r.points_for for r in self.match_results)

    @property
    def points_against(self) -> int:
        return sum(r.points_against for r in self.match_results)

    @property
    def points_difference(self) -> int:
        return self.points_for - self.points_against

    @property
    def tournament_points(self) -> int:
        return sum(r.tournament_points for r in self.match_results)


def _counts_for_standings(match: Match) -> bool:
    return (
        match.is_completed
        and match.is_playable
        and match.team1_score is not None
        and match.team2_score is not None
    )


def build_competitor_scores(
    participants: Sequence[Participant],
    matches: Sequence[Match],
    scoring: ScoringSystem = STANDARD_SCORING,
) -> Dict[ParticipantId, CompetitorScore]:
    """Collect every participant's results from completed matches.

    Bye matches and unplayed matches are ignored.
    """
    results: Dict[ParticipantId, List[MatchResult]] = {p.id: [] for p in participants}

    for match in matches:
        if not _counts_for_standings(match):
            continue

        sides = (
            (match.slot1.participant_id, match.slot2.participant_id, match.team1_score, match.team2_score),
            (match.slot2.participant_id, match.slot1.participant_id, match.team2_score, match.team1_score),
        )
        for participant_id, opponent_id, score_for, score_against in sides:
            if participant_id not in results:
                continue
            results[participant_id].append(
                MatchResult(
                    opponent_id=opponent_id,
                    points_for=score_for,
                    points_against=score_against,
                    tournament_points=scoring.match_points(score_for, score_against),
                )
            )

    return {
        participant_id: CompetitorScore(participant_id, match_results)
        for participant_id, match_results in results.items()
    }


def calculate_head_to_head(
    competitor_score: CompetitorScore, tied_competitors: Set[ParticipantId]
) -> int:
    """
    Calculate head-to-head score among tied participants.

    The head-to-head score is the tournament points earned against other
    members of the tied group, i.e. the participant's result in a mini
    round robin restricted to that group.

    Args:
        competitor_score: The participant's score data
        tied_competitors: IDs of the participants still tied with this one

    Returns:
        The head-to-head score
    """
    return sum(
        result.tournament_points
        for result in competitor_score.match_results
        if result.opponent_id in tied_competitors
        and result.opponent_id != competitor_score.participant_id
    )


def tiebreak_value(
    rule: TiebreakRule, competitor_score: CompetitorScore, group: Set[ParticipantId]
) -> int:
    """Value of one tiebreak rule for a participant; higher ranks first."""
    if rule == TiebreakRule.POINTS:
        return competitor_score.tournament_points
    elif rule == TiebreakRule.HEAD_TO_HEAD:
        return calculate_head_to_head(competitor_score, group)
    elif rule == TiebreakRule.POINTS_DIFFERENCE:
        return competitor_score.points_difference
    elif rule == TiebreakRule.POINTS_SCORED:
        return competitor_score.points_for
    raise ValueError(f"Unknown tiebreak rule: {rule}")


def normalize_tiebreak_rules(rules: Optional[Sequence]) -> List[TiebreakRule]:
    """Convert rule names to TiebreakRule values; empty means the default chain."""
    if not rules:
        return list(DEFAULT_TIEBREAK_RULES)
    return [TiebreakRule(rule) for rule in rules]


def rank_participants(
    participants: Sequence[Participant],
    scores: Dict[ParticipantId, CompetitorScore],
    rules: Sequence[TiebreakRule],
) -> List[ParticipantId]:
    """Order participants through the tiebreaker chain.

    A rule that splits a tied group is applied again inside each resulting
    subgroup, so head-to-head is recomputed over the smaller set of
    participants still level. A rule that does not split the group is
    dropped and the next one applies. Once every rule is exhausted,
    seeded participants come first by seed, then registration order.
    """
    registration_order = {p.id: index for index, p in enumerate(participants)}
    seeds = {p.id: p.seed for p in participants}

    def fallback_key(participant_id):
        seed = seeds[participant_id]
        return (
            seed is None,
            seed if seed is not None else 0,
            registration_order[participant_id],
        )

    def rank_group(group: List[ParticipantId], remaining: Sequence[TiebreakRule]) -> List[ParticipantId]:
        if len(group) <= 1:
            return list(group)
        if not remaining:
            return sorted(group, key=fallback_key)

        rule = remaining[0]
        members = set(group)
        buckets: Dict[int, List[ParticipantId]] = {}
        for participant_id in group:
            value = tiebreak_value(rule, scores[participant_id], members)
            buckets.setdefault(value, []).append(participant_id)

        if len(buckets) == 1:
            return rank_group(group, remaining[1:])

        ordered = []
        for value in sorted(buckets, reverse=True):
            ordered.extend(rank_group(buckets[value], remaining))
        return ordered

    return rank_group([p.id for p in participants], list(rules))


def calculate_standings_for(
    participants: Sequence[Participant],
    matches: Sequence[Match],
    scoring: ScoringSystem = STANDARD_SCORING,
    rules: Optional[Sequence] = None,
) -> List[StandingEntry]:
    """Ranked standings for a set of participants and matches."""
    scores = build_competitor_scores(participants, matches, scoring)
    ranking = rank_participants(participants, scores, normalize_tiebreak_rules(rules))

    standings = []
    for position, participant_id in enumerate(ranking, start=1):
        score = scores[participant_id]
        standings.append(
            StandingEntry(
                participant_id=participant_id,
                matches_played=score.matches_played,
                matches_won=score.matches_won,
                matches_lost=score.matches_lost,
                matches_drawn=score.matches_drawn,
                points_for=score.points_for,
                points_against=score.points_against,
                points_difference=score.points_difference,
                tournament_points=scoring.tournament_points(
                    score.matches_won, score.matches_drawn, score.matches_lost
                ),
                position=position,
            )
        )
    return standings


def calculate_standings(tournament: Tournament) -> List[StandingEntry]:
    """Ranked standings for a tournament using its scoring and tiebreak rules."""
    return calculate_standings_for(
        tournament.participants,
        tournament.matches,
        tournament.scoring,
        tournament.tiebreak_rules,
    )
