"""
Bracket layout calculation.

Turns a single-elimination match arena into renderer-agnostic geometry:
one box per match, elbow connectors from each match to the slot its winner
feeds, and a label per round. Units are abstract presentation units.

Round 1 boxes are stacked with a uniform pitch. Every later box is centered
on the midpoint of its two feeder boxes, so a round r box sits at
2^(r-1) times the round 1 pitch, offset by half of the spread it covers.
"""

from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field, fields

from quizcup.tournament_core.exceptions import MatchNotFoundException
from quizcup.tournament_core.knockout import destination_of, get_round_name
from quizcup.tournament_core.structure import Match, MatchId


@dataclass(frozen=True)
class LayoutConfig:
    match_box_width: float = 200
    match_box_height: float = 80
    round_horizontal_gap: float = 50
    match_vertical_gap: float = 20
    margin: float = 20
    header_height: float = 40

    @classmethod
    def from_dict(cls, values: Optional[Dict]) -> "LayoutConfig":
        """Build a config from a (possibly partial) dict of overrides."""
        if not values:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown layout settings: {', '.join(sorted(unknown))}")
        return cls(**values)

    @property
    def column_pitch(self) -> float:
        return self.match_box_width + self.round_horizontal_gap

    @property
    def row_pitch(self) -> float:
        return self.match_box_height + self.match_vertical_gap

    @property
    def top(self) -> float:
        return self.margin + self.header_height


@dataclass(frozen=True)
class MatchBox:
    match_id: MatchId
    round: int
    match_number: int
    round_name: str
    x: float
    y: float
    width: float
    height: float

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def output_point(self) -> Tuple[float, float]:
        return (self.x + self.width, self.center_y)

    def input_y(self, slot: int) -> float:
        """Vertical position where a connector enters slot 1 or slot 2."""
        if slot == 1:
            return self.y + self.height / 4
        if slot == 2:
            return self.y + 3 * self.height / 4
        raise ValueError(f"Invalid slot number: {slot}")


@dataclass(frozen=True)
class Connector:
    source_match_id: MatchId
    target_match_id: MatchId
    target_slot: int
    points: Tuple[Tuple[float, float], ...] = ()

    @property
    def path(self) -> str:
        """SVG path data for the elbow."""
        if not self.points:
            return ""
        head, *rest = self.points
        commands = [f"M {_fmt(head[0])} {_fmt(head[1])}"]
        commands.extend(f"L {_fmt(x)} {_fmt(y)}" for x, y in rest)
        return " ".join(commands)


@dataclass(frozen=True)
class RoundLabel:
    round: int
    name: str
    x: float
    y: float


@dataclass(frozen=True)
class BracketLayout:
    boxes: List[MatchBox] = field(default_factory=list)
    connectors: List[Connector] = field(default_factory=list)
    labels: List[RoundLabel] = field(default_factory=list)
    width: float = 0
    height: float = 0

    def box_for(self, match_id: MatchId) -> Optional[MatchBox]:
        for box in self.boxes:
            if box.match_id == match_id:
                return box
        return None

    def round_boxes(self, round_number: int) -> List[MatchBox]:
        return sorted(
            (b for b in self.boxes if b.round == round_number),
            key=lambda b: b.match_number,
        )


def _fmt(value: float) -> str:
    return f"{value:g}"


def column_x(round_number: int, config: LayoutConfig) -> float:
    """Left edge of a round's column."""
    return (round_number - 1) * config.column_pitch + config.margin


def match_center_y(round_number: int, index: int, config: LayoutConfig) -> float:
    """Vertical center of the index-th (0-based) match of a round.

    Equal to the midpoint of its feeders' centers for every round > 1.
    """
    span = 2 ** (round_number - 1)
    offset = (span * index + (span - 1) / 2) * config.row_pitch
    return config.top + offset + config.match_box_height / 2


def calculate_bracket_layout(
    matches: Sequence[Match],
    total_rounds: int,
    config: Optional[LayoutConfig] = None,
) -> BracketLayout:
    """Compute positions and connectors for a single-elimination bracket."""
    config = config or LayoutConfig()
    if total_rounds < 1:
        return BracketLayout(width=2 * config.margin, height=2 * config.margin)

    by_round: Dict[int, List[Match]] = {}
    for match in matches:
        by_round.setdefault(match.round, []).append(match)
    for round_matches in by_round.values():
        round_matches.sort(key=lambda m: m.match_number)

    boxes = []
    boxes_by_position: Dict[Tuple[int, int], MatchBox] = {}
    labels = []
    for round_number in range(1, total_rounds + 1):
        name = get_round_name(round_number, total_rounds)
        x = column_x(round_number, config)
        labels.append(
            RoundLabel(
                round=round_number,
                name=name,
                x=x + config.match_box_width / 2,
                y=config.margin + config.header_height / 2,
            )
        )
        for match in by_round.get(round_number, []):
            center = match_center_y(round_number, match.index, config)
            box = MatchBox(
                match_id=match.id,
                round=round_number,
                match_number=match.match_number,
                round_name=name,
                x=x,
                y=center - config.match_box_height / 2,
                width=config.match_box_width,
                height=config.match_box_height,
            )
            boxes.append(box)
            boxes_by_position[(round_number, match.match_number)] = box

    connectors = []
    for box in boxes:
        if box.round >= total_rounds:
            continue
        dest_round, dest_number, dest_slot = destination_of(box.round, box.match_number)
        target = boxes_by_position.get((dest_round, dest_number))
        if target is None:
            raise MatchNotFoundException(
                f"Propagation target round {dest_round} match {dest_number} is missing "
                f"for match {box.match_id!r}"
            )
        start_x, start_y = box.output_point
        end_x, end_y = target.x, target.input_y(dest_slot)
        mid_x = (start_x + end_x) / 2
        connectors.append(
            Connector(
                source_match_id=box.match_id,
                target_match_id=target.match_id,
                target_slot=dest_slot,
                points=(
                    (start_x, start_y),
                    (mid_x, start_y),
                    (mid_x, end_y),
                    (end_x, end_y),
                ),
            )
        )

    first_round_count = len(by_round.get(1, [])) or 2 ** (total_rounds - 1)
    width = (
        2 * config.margin
        + total_rounds * config.match_box_width
        + (total_rounds - 1) * config.round_horizontal_gap
    )
    height = (
        config.top
        + first_round_count * config.row_pitch
        - config.match_vertical_gap
        + config.margin
    )
    return BracketLayout(
        boxes=boxes, connectors=connectors, labels=labels, width=width, height=height
    )
