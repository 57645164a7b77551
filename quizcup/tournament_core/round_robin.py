"""
Round robin fixture generation using the circle method.

With an odd number of participants a synthetic bye seat is added. One seat
stays fixed while the others rotate one position per round; the fixed seat
meets rotating seat 0 and the remaining rotating seats are paired from the
outside in. Every pair of real participants meets exactly once.
"""

from typing import List, Optional, Sequence, Tuple

from quizcup.tournament_core.exceptions import InsufficientParticipantsException
from quizcup.tournament_core.knockout import seed_participants
from quizcup.tournament_core.structure import (
    Match,
    MatchStatus,
    Participant,
    ParticipantId,
    Slot,
)


def generate_round_robin_pairings(
    participant_ids: Sequence[ParticipantId],
) -> List[List[Tuple[Optional[ParticipantId], Optional[ParticipantId]]]]:
    """Generate pairings for every round.

    Returns:
        One list of (slot1_id, slot2_id) tuples per round. None stands for
        the synthetic bye participant.
    """
    seats: List[Optional[ParticipantId]] = list(participant_ids)
    if len(seats) % 2 == 1:
        seats.append(None)

    seat_count = len(seats)
    fixed = seats[0]
    rotating = seats[1:]

    rounds = []
    for _ in range(seat_count - 1):
        pairings = [(fixed, rotating[0])]
        for i in range(1, seat_count // 2):
            pairings.append((rotating[i], rotating[seat_count - 1 - i]))
        rounds.append(pairings)
        rotating = [rotating[-1]] + rotating[:-1]
    return rounds


def create_round_robin_schedule(participants: Sequence[Participant]) -> Tuple[List[Match], int]:
    """Create all round robin fixtures.

    Fixtures against the synthetic bye are created with the real participant
    in slot1 and status BYE so they are visible in the schedule but never
    counted in standings.

    Returns:
        (matches, total_rounds)
    """
    if len(participants) < 2:
        raise InsufficientParticipantsException(
            f"A round robin needs at least 2 participants, got {len(participants)}"
        )

    ordered = seed_participants(participants)
    schedule = generate_round_robin_pairings([p.id for p in ordered])

    matches = []
    for round_number, pairings in enumerate(schedule, start=1):
        for match_number, (first_id, second_id) in enumerate(pairings, start=1):
            position = f"R{round_number}M{match_number}"
            match_id = f"{round_number}-{match_number}"
            if first_id is None or second_id is None:
                real_id = second_id if first_id is None else first_id
                matches.append(
                    Match(
                        id=match_id,
                        round=round_number,
                        match_number=match_number,
                        slot1=Slot.assigned(real_id),
                        slot2=Slot.bye(),
                        status=MatchStatus.BYE,
                        bracket_position=position,
                    )
                )
            else:
                matches.append(
                    Match(
                        id=match_id,
                        round=round_number,
                        match_number=match_number,
                        slot1=Slot.assigned(first_id),
                        slot2=Slot.assigned(second_id),
                        bracket_position=position,
                    )
                )
    return matches, len(schedule)
