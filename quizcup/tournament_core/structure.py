"""
Tournament structures for representing quiz competitions.

This module provides a simple, clean way to represent tournaments with:
- Participants (teams registered for a tournament)
- Matches between participants, stored as a flat arena indexed by
  (round, match_number)
- Slots that are explicitly unassigned, a bye, or assigned to a participant

All structures are immutable. Operations elsewhere in tournament_core take a
Tournament and return a new one, so a half-applied update is never visible.
"""

from typing import Dict, Iterable, List, Optional, Tuple, Union
from dataclasses import dataclass, field, replace
from enum import Enum

from quizcup.tournament_core.scoring import ScoringSystem, STANDARD_SCORING

ParticipantId = Union[int, str]
MatchId = Union[int, str]


class TournamentFormat(str, Enum):
    SINGLE_ELIMINATION = "single_elimination"
    ROUND_ROBIN = "round_robin"


class TournamentStatus(str, Enum):
    DRAFT = "draft"
    REGISTRATION_OPEN = "registration_open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ParticipantStatus(str, Enum):
    ACTIVE = "active"
    ELIMINATED = "eliminated"
    BYE = "bye"


class MatchStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BYE = "bye"


class SlotKind(str, Enum):
    UNASSIGNED = "unassigned"
    BYE = "bye"
    ASSIGNED = "assigned"


class TiebreakRule(str, Enum):
    POINTS = "points"
    HEAD_TO_HEAD = "head_to_head"
    POINTS_DIFFERENCE = "points_difference"
    POINTS_SCORED = "points_scored"


DEFAULT_TIEBREAK_RULES = (
    TiebreakRule.POINTS,
    TiebreakRule.HEAD_TO_HEAD,
    TiebreakRule.POINTS_DIFFERENCE,
    TiebreakRule.POINTS_SCORED,
)


@dataclass(frozen=True)
class Slot:
    """One side of a match: unassigned, a bye, or a participant."""

    kind: SlotKind = SlotKind.UNASSIGNED
    participant_id: Optional[ParticipantId] = None

    def __post_init__(self):
        if (self.kind == SlotKind.ASSIGNED) != (self.participant_id is not None):
            raise ValueError(
                f"Slot of kind {self.kind.value} cannot hold participant {self.participant_id!r}"
            )

    @classmethod
    def unassigned(cls) -> "Slot":
        return cls(SlotKind.UNASSIGNED)

    @classmethod
    def bye(cls) -> "Slot":
        return cls(SlotKind.BYE)

    @classmethod
    def assigned(cls, participant_id: ParticipantId) -> "Slot":
        return cls(SlotKind.ASSIGNED, participant_id)

    @property
    def is_assigned(self) -> bool:
        return self.kind == SlotKind.ASSIGNED

    @property
    def is_bye(self) -> bool:
        return self.kind == SlotKind.BYE

    @property
    def is_unassigned(self) -> bool:
        return self.kind == SlotKind.UNASSIGNED


@dataclass(frozen=True)
class Participant:
    """A team registered for a tournament."""

    id: ParticipantId
    team_ref: str
    seed: Optional[int] = None
    status: ParticipantStatus = ParticipantStatus.ACTIVE
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.team_ref


@dataclass(frozen=True)
class Match:
    """A match between the participants in slot1 and slot2.

    winner_id and loser_id are both set once the match is completed. A bye
    match carries the advancing participant as winner_id and has no loser.
    """

    id: MatchId
    round: int
    match_number: int
    slot1: Slot = field(default_factory=Slot.unassigned)
    slot2: Slot = field(default_factory=Slot.unassigned)
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None
    winner_id: Optional[ParticipantId] = None
    loser_id: Optional[ParticipantId] = None
    status: MatchStatus = MatchStatus.PENDING
    bracket_position: str = ""

    @property
    def index(self) -> int:
        """Zero-based position of the match within its round."""
        return self.match_number - 1

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    @property
    def is_bye(self) -> bool:
        return self.status == MatchStatus.BYE

    @property
    def is_decided(self) -> bool:
        """Whether the match has produced a winner (played or by bye)."""
        return self.winner_id is not None

    @property
    def is_playable(self) -> bool:
        return self.slot1.is_assigned and self.slot2.is_assigned

    def participant_ids(self) -> List[ParticipantId]:
        return [
            slot.participant_id
            for slot in (self.slot1, self.slot2)
            if slot.is_assigned
        ]

    def involves(self, participant_id: ParticipantId) -> bool:
        return participant_id in self.participant_ids()

    def opponent_of(self, participant_id: ParticipantId) -> Optional[ParticipantId]:
        if self.slot1.participant_id == participant_id:
            return self.slot2.participant_id
        if self.slot2.participant_id == participant_id:
            return self.slot1.participant_id
        return None

    def score_for(self, participant_id: ParticipantId) -> Optional[int]:
        if self.slot1.participant_id == participant_id:
            return self.team1_score
        if self.slot2.participant_id == participant_id:
            return self.team2_score
        return None

    def score_against(self, participant_id: ParticipantId) -> Optional[int]:
        if self.slot1.participant_id == participant_id:
            return self.team2_score
        if self.slot2.participant_id == participant_id:
            return self.team1_score
        return None

    def slot(self, number: int) -> Slot:
        if number == 1:
            return self.slot1
        if number == 2:
            return self.slot2
        raise ValueError(f"Invalid slot number: {number}")

    def with_slot(self, number: int, slot: Slot) -> "Match":
        """Return a new Match with one slot replaced (immutable pattern)."""
        if number == 1:
            return replace(self, slot1=slot)
        if number == 2:
            return replace(self, slot2=slot)
        raise ValueError(f"Invalid slot number: {number}")

    def cleared(self) -> "Match":
        """Return a new Match with its result removed."""
        return replace(
            self,
            team1_score=None,
            team2_score=None,
            winner_id=None,
            loser_id=None,
            status=MatchStatus.PENDING,
        )


@dataclass(frozen=True)
class Round:
    """A round in a tournament containing its matches in match_number order."""

    number: int
    matches: List[Match] = field(default_factory=list)

    @property
    def is_decided(self) -> bool:
        return all(m.is_decided or m.status == MatchStatus.BYE for m in self.matches)


@dataclass(frozen=True)
class StandingEntry:
    """A participant's aggregated record and rank."""

    participant_id: ParticipantId
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0
    matches_drawn: int = 0
    points_for: int = 0
    points_against: int = 0
    points_difference: int = 0
    tournament_points: int = 0
    position: int = 0


@dataclass(frozen=True)
class Tournament:
    """Represents a complete tournament: configuration, roster and matches."""

    id: Optional[Union[int, str]] = None
    name: str = ""
    format: TournamentFormat = TournamentFormat.SINGLE_ELIMINATION
    status: TournamentStatus = TournamentStatus.DRAFT
    min_teams: int = 2
    max_teams: int = 16
    current_round: int = 0
    total_rounds: int = 0
    scoring: ScoringSystem = field(default_factory=lambda: STANDARD_SCORING)
    tiebreak_rules: Tuple[TiebreakRule, ...] = DEFAULT_TIEBREAK_RULES
    participants: Tuple[Participant, ...] = ()
    matches: Tuple[Match, ...] = ()
    auto_complete: bool = False

    @property
    def is_elimination(self) -> bool:
        return self.format == TournamentFormat.SINGLE_ELIMINATION

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @property
    def rounds(self) -> List[Round]:
        """Matches grouped into rounds, ordered by round and match number."""
        grouped: Dict[int, List[Match]] = {}
        for match in self.matches:
            grouped.setdefault(match.round, []).append(match)
        return [
            Round(number, sorted(matches, key=lambda m: m.match_number))
            for number, matches in sorted(grouped.items())
        ]

    def round_matches(self, round_number: int) -> List[Match]:
        return sorted(
            (m for m in self.matches if m.round == round_number),
            key=lambda m: m.match_number,
        )

    def match(self, match_id: MatchId) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def match_at(self, round_number: int, match_number: int) -> Optional[Match]:
        for match in self.matches:
            if match.round == round_number and match.match_number == match_number:
                return match
        return None

    def participant(self, participant_id: ParticipantId) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def with_matches(self, updated: Iterable[Match]) -> "Tournament":
        """Return a new Tournament with matches replaced by (round, match_number)."""
        by_position = {(m.round, m.match_number): m for m in updated}
        matches = tuple(
            by_position.get((m.round, m.match_number), m) for m in self.matches
        )
        return replace(self, matches=matches)
