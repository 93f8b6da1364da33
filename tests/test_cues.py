from __future__ import annotations

import random
import unittest

from draw_engine import cues
from draw_engine.exceptions import InvalidSpinDuration


class BuildTimelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.timeline = cues.build_timeline(9.0, "Grand Prize", "Alice", random.Random(0), target_rotation=4000.0)

    def test_offsets_for_nine_second_spin(self) -> None:
        offsets = [c.offset for c in self.timeline]
        expected = [0.0, 0.0, 0.8, 0.8, 2.0, 4.0, 6.0, 7.5, 8.0, 9.0, 9.0, 9.3, 10.5, 12.0]
        self.assertEqual(len(offsets), len(expected))
        for got, want in zip(offsets, expected):
            self.assertAlmostEqual(got, want)
        self.assertEqual(offsets, sorted(offsets))

    def test_kinds_in_table_order(self) -> None:
        kinds = [c.kind for c in self.timeline]
        self.assertEqual(kinds, [
            cues.SPEAK, cues.TONE, cues.START_ANIMATION, cues.TONE, cues.SPEAK, cues.SPEAK,
            cues.SPEAK, cues.TONE, cues.SPEAK, cues.TONE, cues.COMMIT_RESULT, cues.SPEAK,
            cues.SPEAK, cues.END_FIREWORKS,
        ])
        self.assertEqual(self.timeline[9].payload["name"], cues.TONE_BIG_WIN)

    def test_payloads(self) -> None:
        opening = self.timeline[0].payload
        self.assertIn("Grand Prize", opening["text"])
        self.assertEqual((opening["rate"], opening["pitch"], opening["volume"]), (1.1, 1.1, 1.0))
        self.assertEqual(self.timeline[1].payload, {"name": cues.TONE_START})
        self.assertEqual(self.timeline[2].payload["target_rotation"], 4000.0)
        self.assertAlmostEqual(self.timeline[2].payload["duration"], 8.2)
        self.assertEqual(self.timeline[3].payload["name"], cues.TONE_DRUM_ROLL)
        self.assertAlmostEqual(self.timeline[3].payload["duration"], 8.0)
        self.assertEqual(self.timeline[4].payload["text"], cues.SPINNING_PHRASE)
        self.assertIn(self.timeline[5].payload["text"], cues.SUSPENSE_PHRASES)
        self.assertEqual(self.timeline[6].payload["text"], cues.CLOSER_PHRASE)
        self.assertEqual(self.timeline[7].payload, {"name": cues.TONE_COUNTDOWN})
        self.assertEqual(self.timeline[8].payload["text"], cues.REVEAL_PHRASE)
        self.assertEqual(self.timeline[11].payload["text"], "Alice!")
        self.assertIn(self.timeline[12].payload["text"], cues.CONGRATS_PHRASES)

    def test_animation_ends_at_commit(self) -> None:
        for d in (7.0, 8.5, 11.99):
            timeline = cues.build_timeline(d, "Lucky Prize", "Bob", random.Random(1))
            animation = next(c for c in timeline if c.kind == cues.START_ANIMATION)
            commit = next(c for c in timeline if c.kind == cues.COMMIT_RESULT)
            self.assertAlmostEqual(animation.offset + animation.payload["duration"], commit.offset)
            self.assertEqual(commit.offset, d)

    def test_short_duration_rejected(self) -> None:
        with self.assertRaises(InvalidSpinDuration):
            cues.build_timeline(6.99, "Grand Prize", "Alice", random.Random(0))
        with self.assertRaises(ValueError):
            cues.validate_duration(3.0)

    def test_phrases_chosen_from_pools(self) -> None:
        rng = random.Random(99)
        for _ in range(30):
            timeline = cues.build_timeline(10.0, "2nd Prize", "Carol", rng)
            opening = timeline[0].payload["text"]
            self.assertIn(opening, [p.format(prize="2nd Prize") for p in cues.OPENING_PHRASES])


if __name__ == "__main__":
    unittest.main()
