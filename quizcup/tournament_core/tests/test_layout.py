"""
Tests for bracket layout geometry.
"""

import unittest

from quizcup.tournament_core.exceptions import MatchNotFoundException
from quizcup.tournament_core.knockout import create_knockout_bracket, destination_of
from quizcup.tournament_core.layout import (
    LayoutConfig,
    calculate_bracket_layout,
    match_center_y,
)
from quizcup.tournament_core.structure import Participant


def bracket(count):
    participants = [Participant(id=f"T{i}", team_ref=f"T{i}") for i in range(1, count + 1)]
    return create_knockout_bracket(participants)


class BracketLayoutTests(unittest.TestCase):
    def setUp(self):
        matches, total_rounds = bracket(8)
        self.layout = calculate_bracket_layout(matches, total_rounds)

    def test_first_round_evenly_spaced(self):
        centers = [b.center_y for b in self.layout.round_boxes(1)]
        self.assertEqual(centers, [100, 200, 300, 400])

    def test_later_rounds_centered_on_feeders(self):
        first = [b.center_y for b in self.layout.round_boxes(1)]
        second = [b.center_y for b in self.layout.round_boxes(2)]
        final = [b.center_y for b in self.layout.round_boxes(3)]

        self.assertEqual(second, [(first[0] + first[1]) / 2, (first[2] + first[3]) / 2])
        self.assertEqual(final, [(second[0] + second[1]) / 2])
        self.assertEqual(final, [250])

    def test_columns(self):
        self.assertEqual({b.x for b in self.layout.round_boxes(1)}, {20})
        self.assertEqual({b.x for b in self.layout.round_boxes(2)}, {270})
        self.assertEqual({b.x for b in self.layout.round_boxes(3)}, {520})
        self.assertEqual((self.layout.width, self.layout.height), (740, 460))

    def test_labels(self):
        self.assertEqual(
            [label.name for label in self.layout.labels],
            ["Quarterfinals", "Semifinals", "Final"],
        )
        self.assertEqual(self.layout.labels[0].x, 120)

    def test_connectors_follow_propagation(self):
        self.assertEqual(len(self.layout.connectors), 6)
        for connector in self.layout.connectors:
            source = self.layout.box_for(connector.source_match_id)
            target = self.layout.box_for(connector.target_match_id)
            self.assertEqual(
                destination_of(source.round, source.match_number),
                (target.round, target.match_number, connector.target_slot),
            )
            self.assertEqual(connector.points[0], source.output_point)
            self.assertEqual(
                connector.points[-1], (target.x, target.input_y(connector.target_slot))
            )

    def test_connector_path(self):
        first, second = self.layout.connectors[0], self.layout.connectors[1]
        self.assertEqual(first.target_slot, 1)
        self.assertEqual(first.path, "M 220 100 L 245 100 L 245 130 L 270 130")
        self.assertEqual(second.target_slot, 2)
        self.assertEqual(second.path, "M 220 200 L 245 200 L 245 170 L 270 170")

    def test_bye_matches_still_get_boxes(self):
        matches, total_rounds = bracket(5)
        layout = calculate_bracket_layout(matches, total_rounds)
        self.assertEqual(len(layout.boxes), 7)
        self.assertEqual(len(layout.round_boxes(1)), 4)

    def test_missing_next_round_match_is_an_error(self):
        matches, total_rounds = bracket(4)
        first_round = [m for m in matches if m.round == 1]
        with self.assertRaises(MatchNotFoundException) as cm:
            calculate_bracket_layout(first_round, total_rounds)
        self.assertIn("round 2 match 1", str(cm.exception))
        self.assertIn("'1-1'", str(cm.exception))


class LayoutConfigTests(unittest.TestCase):
    def test_defaults(self):
        config = LayoutConfig()
        self.assertEqual(config.row_pitch, 100)
        self.assertEqual(config.column_pitch, 250)
        self.assertEqual(config.top, 60)

    def test_from_dict_overrides(self):
        config = LayoutConfig.from_dict({"match_box_height": 40, "match_vertical_gap": 10})
        self.assertEqual(config.match_box_width, 200)
        self.assertEqual(config.row_pitch, 50)
        self.assertEqual(LayoutConfig.from_dict(None), LayoutConfig())

    def test_from_dict_rejects_unknown(self):
        with self.assertRaises(ValueError):
            LayoutConfig.from_dict({"box_colour": "red"})

    def test_center_formula_with_custom_config(self):
        config = LayoutConfig(match_box_height=60, match_vertical_gap=40, margin=0, header_height=0)
        self.assertEqual(match_center_y(1, 0, config), 30)
        self.assertEqual(match_center_y(1, 1, config), 130)
        self.assertEqual(match_center_y(2, 0, config), 80)
        self.assertEqual(match_center_y(3, 0, config), 180)


if __name__ == "__main__":
    unittest.main()
