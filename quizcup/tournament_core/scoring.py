"""
Configurable scoring systems for tournaments.

This module defines how match results are converted to tournament points
for standings.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringSystem:
    """Defines how matches are scored in a tournament."""

    points_per_win: int = 3
    points_per_draw: int = 1
    points_per_loss: int = 0

    def tournament_points(self, won: int, drawn: int, lost: int) -> int:
        """Total tournament points for a win/draw/loss record."""
        return (
            won * self.points_per_win
            + drawn * self.points_per_draw
            + lost * self.points_per_loss
        )

    def match_points(self, score_for: int, score_against: int) -> int:
        """Tournament points earned from a single match score."""
        if score_for > score_against:
            return self.points_per_win
        elif score_for < score_against:
            return self.points_per_loss
        else:
            return self.points_per_draw


# Pre-defined scoring systems
STANDARD_SCORING = ScoringSystem()

TWO_ONE_ZERO_SCORING = ScoringSystem(
    points_per_win=2, points_per_draw=1, points_per_loss=0
)

SCORING_PRESETS = {
    "3-1-0": STANDARD_SCORING,
    "2-1-0": TWO_ONE_ZERO_SCORING,
}
