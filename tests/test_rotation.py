from __future__ import annotations

import random
import unittest

from draw_engine.rotation import (
    MIN_SPIN_DURATION,
    forward_delta,
    plan_spin,
    segment_angle,
    segment_at_pointer,
    target_absolute_angle,
)


class TargetAngleTests(unittest.TestCase):
    def test_pointer_lands_on_winner_for_every_segment(self) -> None:
        rng = random.Random(42)
        for n in range(1, 41):
            rotation = rng.uniform(0, 5000)
            for i in range(n):
                plan = plan_spin(n, i, rotation, rng)
                self.assertEqual(segment_at_pointer(plan.new_rotation, n), i, (n, i, rotation))

    def test_target_is_segment_centre(self) -> None:
        self.assertAlmostEqual(target_absolute_angle(4, 0), 315.0)
        self.assertAlmostEqual(target_absolute_angle(4, 1), 225.0)
        self.assertAlmostEqual(target_absolute_angle(1, 0), 180.0)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            segment_angle(0)
        with self.assertRaises(ValueError):
            target_absolute_angle(3, 3)
        with self.assertRaises(ValueError):
            target_absolute_angle(3, -1)


class ForwardDeltaTests(unittest.TestCase):
    def test_delta_range(self) -> None:
        self.assertEqual(forward_delta(90.0, 90.0), 360.0)
        self.assertEqual(forward_delta(90.0, 450.0), 360.0)
        self.assertAlmostEqual(forward_delta(10.0, 350.0), 20.0)
        self.assertAlmostEqual(forward_delta(350.0, 10.0), 340.0)

    def test_delta_always_positive_and_at_most_full_turn(self) -> None:
        rng = random.Random(3)
        for _ in range(500):
            delta = forward_delta(rng.uniform(0, 360), rng.uniform(-1000, 10000))
            self.assertGreater(delta, 0.0)
            self.assertLessEqual(delta, 360.0)


class PlanSpinTests(unittest.TestCase):
    def test_rotation_only_increases(self) -> None:
        rng = random.Random(9)
        rotation = 0.0
        for _ in range(50):
            plan = plan_spin(12, rng.randrange(12), rotation, rng)
            self.assertGreater(plan.new_rotation, rotation)
            self.assertEqual(plan.start_rotation, rotation)
            rotation = plan.new_rotation

    def test_spins_and_duration_ranges(self) -> None:
        rng = random.Random(5)
        for _ in range(300):
            plan = plan_spin(6, 2, 0.0, rng)
            self.assertTrue(8 <= plan.spins <= 12)
            self.assertTrue(MIN_SPIN_DURATION <= plan.duration < 12.0)
            self.assertAlmostEqual(plan.new_rotation, plan.spins * 360.0 + plan.delta)

    def test_single_segment_from_zero(self) -> None:
        rng = random.Random(11)
        for _ in range(50):
            plan = plan_spin(1, 0, 0.0, rng)
            self.assertEqual(plan.delta, 180.0)
            self.assertTrue(3060.0 <= plan.new_rotation <= 4500.0)
            self.assertEqual(round(plan.new_rotation) % 360, 180)


if __name__ == "__main__":
    unittest.main()
