"""
Knockout tournament utilities for bracket generation and advancement.

This module provides functionality for:
- Sizing brackets for any participant count (padding to a power of 2)
- Generating the initial single-elimination bracket with standard seeding
- Resolving byes for the top seeds
- Locating the match a winner advances into
- Naming rounds and reporting the champion and final placings
"""

from typing import Dict, List, Optional, Sequence, Tuple
import math

from quizcup.tournament_core.exceptions import InsufficientParticipantsException
from quizcup.tournament_core.structure import (
    Match,
    MatchStatus,
    Participant,
    ParticipantId,
    Slot,
    Tournament,
    TournamentFormat,
)


def next_power_of_two(count: int) -> int:
    """Smallest power of 2 that is >= count."""
    if count < 1:
        raise ValueError(f"Cannot size a bracket for {count} participants")
    return 1 << (count - 1).bit_length()


def validate_bracket_size(team_count: int) -> bool:
    """Check if team count is a power of 2 (a bracket with no byes)."""
    return team_count > 1 and (team_count & (team_count - 1)) == 0


def calculate_rounds_needed(team_count: int) -> int:
    """Calculate number of rounds needed for a knockout tournament."""
    if team_count < 2:
        raise InsufficientParticipantsException(
            f"A knockout bracket needs at least 2 participants, got {team_count}"
        )
    return int(math.log2(next_power_of_two(team_count)))


def calculate_bye_count(team_count: int) -> int:
    return next_power_of_two(team_count) - team_count


def get_round_name(round_number: int, total_rounds: int) -> str:
    """Get the display name of a round by its distance from the final."""
    remaining = total_rounds - round_number
    if remaining == 0:
        return "Final"
    elif remaining == 1:
        return "Semifinals"
    elif remaining == 2:
        return "Quarterfinals"
    return f"Round {round_number}"


def get_bracket_position(round_number: int, match_number: int, total_rounds: int) -> str:
    """Short label for a match slot in the bracket (F, SF1, QF3, R1M5)."""
    remaining = total_rounds - round_number
    if remaining == 0:
        return "F"
    elif remaining == 1:
        return f"SF{match_number}"
    elif remaining == 2:
        return f"QF{match_number}"
    return f"R{round_number}M{match_number}"


def standard_seed_order(bracket_size: int) -> List[int]:
    """Seed numbers in bracket order for a power-of-2 bracket.

    Consecutive pairs are the first round matches, e.g. for 8 seeds
    [1, 8, 4, 5, 2, 7, 3, 6] gives 1v8, 4v5, 2v7, 3v6. Each pair sums to
    bracket_size + 1, and seeds 1 and 2 can only meet in the final.
    """
    if not validate_bracket_size(bracket_size):
        raise ValueError(f"Bracket size {bracket_size} is not a power of 2")

    order = [1, 2]
    while len(order) < bracket_size:
        size = len(order) * 2
        order = [s for seed in order for s in (seed, size + 1 - seed)]
    return order


def seed_participants(participants: Sequence[Participant]) -> List[Participant]:
    """Order participants by seed; unseeded ones follow in registration order."""
    seeded = sorted(
        (p for p in participants if p.seed is not None), key=lambda p: p.seed
    )
    unseeded = [p for p in participants if p.seed is None]
    return seeded + unseeded


def generate_knockout_seedings(
    participant_ids: Sequence[ParticipantId],
) -> List[Tuple[ParticipantId, Optional[ParticipantId]]]:
    """Generate first round pairings in bracket order.

    Args:
        participant_ids: Participant IDs in seeding order (1st seed first)

    Returns:
        List of (slot1_id, slot2_id) tuples; slot2_id is None for a bye
    """
    count = len(participant_ids)
    bracket_size = next_power_of_two(count)
    order = standard_seed_order(bracket_size)

    pairings = []
    for i in range(0, bracket_size, 2):
        high, low = order[i], order[i + 1]
        if high > low:
            high, low = low, high
        slot1_id = participant_ids[high - 1]
        slot2_id = participant_ids[low - 1] if low <= count else None
        pairings.append((slot1_id, slot2_id))
    return pairings


def destination_of(round_number: int, match_number: int) -> Tuple[int, int, int]:
    """Where the winner of a match goes: (round, match_number, slot)."""
    return (
        round_number + 1,
        (match_number + 1) // 2,
        1 if match_number % 2 == 1 else 2,
    )


def _match_id(round_number: int, match_number: int) -> str:
    return f"{round_number}-{match_number}"


def create_knockout_bracket(participants: Sequence[Participant]) -> Tuple[List[Match], int]:
    """Create the complete single-elimination match arena.

    Round 1 holds the seeded pairings with byes already resolved; bye
    winners are placed into their round 2 slots straight away. Later rounds
    are created with unassigned slots.

    Returns:
        (matches, total_rounds)
    """
    if len(participants) < 2:
        raise InsufficientParticipantsException(
            f"A knockout bracket needs at least 2 participants, got {len(participants)}"
        )

    ordered = seed_participants(participants)
    total_rounds = calculate_rounds_needed(len(ordered))
    pairings = generate_knockout_seedings([p.id for p in ordered])

    arena: Dict[Tuple[int, int], Match] = {}
    matches_in_round = len(pairings)
    for round_number in range(1, total_rounds + 1):
        for match_number in range(1, matches_in_round + 1):
            arena[(round_number, match_number)] = Match(
                id=_match_id(round_number, match_number),
                round=round_number,
                match_number=match_number,
                bracket_position=get_bracket_position(
                    round_number, match_number, total_rounds
                ),
            )
        matches_in_round = (matches_in_round + 1) // 2

    for match_number, (slot1_id, slot2_id) in enumerate(pairings, start=1):
        match = arena[(1, match_number)]
        if slot2_id is None:
            arena[(1, match_number)] = Match(
                id=match.id,
                round=1,
                match_number=match_number,
                slot1=Slot.assigned(slot1_id),
                slot2=Slot.bye(),
                winner_id=slot1_id,
                status=MatchStatus.BYE,
                bracket_position=match.bracket_position,
            )
            if total_rounds > 1:
                dest_round, dest_number, dest_slot = destination_of(1, match_number)
                dest = arena[(dest_round, dest_number)]
                arena[(dest_round, dest_number)] = dest.with_slot(
                    dest_slot, Slot.assigned(slot1_id)
                )
        else:
            arena[(1, match_number)] = match.with_slot(
                1, Slot.assigned(slot1_id)
            ).with_slot(2, Slot.assigned(slot2_id))

    matches = [arena[key] for key in sorted(arena)]
    return matches, total_rounds


def is_knockout_complete(tournament: Tournament) -> bool:
    """Check if a knockout tournament's final has been decided."""
    if tournament.format != TournamentFormat.SINGLE_ELIMINATION:
        return False
    if not tournament.total_rounds:
        return False

    final_match = tournament.match_at(tournament.total_rounds, 1)
    return final_match is not None and final_match.is_completed


def get_knockout_winner(tournament: Tournament) -> Optional[ParticipantId]:
    """Get the champion of a completed knockout tournament.

    Returns:
        Winner's participant ID, or None if the final is not decided
    """
    if not is_knockout_complete(tournament):
        return None
    return tournament.match_at(tournament.total_rounds, 1).winner_id


def knockout_final_positions(tournament: Tournament) -> Dict[ParticipantId, int]:
    """Placings for eliminated participants and the champion.

    The champion is 1st and the runner-up 2nd; losers of round r share
    place 2^(total_rounds - r) + 1 (both semifinal losers are 3rd, the
    quarterfinal losers 5th, and so on). Participants still in contention
    are omitted.
    """
    positions: Dict[ParticipantId, int] = {}
    for match in tournament.matches:
        if match.is_completed and match.loser_id is not None:
            positions[match.loser_id] = 2 ** (tournament.total_rounds - match.round) + 1

    champion = get_knockout_winner(tournament)
    if champion is not None:
        positions[champion] = 1
    return positions
