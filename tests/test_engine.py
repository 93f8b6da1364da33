from __future__ import annotations

import os
import random
import unittest
from datetime import datetime

import log
from draw_engine import cues
from draw_engine.engine import DrawEngine
from draw_engine.exceptions import DrawAlreadyInProgress, NoEligibleParticipants, NoTierSelected
from draw_engine.models import Participant, PrizeTier
from draw_engine.rotation import segment_at_pointer
from draw_engine.session import DrawSession
from draw_engine.storage import JsonStorage
from fakes import FakeTimerBackend, RecordingRenderer, RecordingStorage

WHEN = datetime(2026, 1, 20, 20, 0, 0)


def make_engine(names=("Alice", "Bob", "Carol", "Dave"), renderer=None, storage=None, seed=2024, tiers=None):
    session = DrawSession(participants=[Participant(n) for n in names], tiers=tiers)
    backend = FakeTimerBackend()
    engine = DrawEngine(
        session,
        renderer=renderer if renderer is not None else RecordingRenderer(),
        storage=storage if storage is not None else RecordingStorage(),
        rng=random.Random(seed),
        timer_backend=backend,
        clock=lambda: WHEN,
    )
    return engine, backend


class FullDrawTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, self.backend = make_engine()
        self.events = []
        self.engine.drawStarted.connect(lambda: self.events.append(("started",)))
        self.engine.drawProgress.connect(lambda rot, dur: self.events.append(("progress", rot, dur, self.backend.now)))
        self.engine.drawComplete.connect(lambda name, prize: self.events.append(("complete", name, prize, self.backend.now)))
        self.engine.fireworksEnded.connect(lambda: self.events.append(("fireworks", self.backend.now)))

    def test_spinning_until_commit_at_duration(self) -> None:
        plan = self.engine.start_draw()
        d = plan.duration
        session = self.engine.session
        self.assertTrue(session.is_spinning)
        self.assertEqual(self.events, [("started",)])

        self.backend.advance_to(d - 0.001)
        self.assertTrue(session.is_spinning)
        self.assertEqual(session.winners, [])
        self.assertEqual(session.rotation, 0.0)

        self.backend.advance_to(d)
        self.assertFalse(session.is_spinning)
        self.assertEqual(len(session.winners), 1)
        self.assertEqual(session.rotation, plan.new_rotation)
        winner = session.winners[0].winner_name
        self.assertEqual(session.names()[segment_at_pointer(session.rotation, session.total_count)], winner)
        self.assertTrue(session.find_participant(winner).won)
        self.assertEqual(session.tiers[0].drawn, 1)

    def test_signals_and_cue_order(self) -> None:
        plan = self.engine.start_draw()
        self.backend.run_all()
        d = plan.duration
        progress = [e for e in self.events if e[0] == "progress"][0]
        self.assertEqual(progress[1], plan.new_rotation)
        self.assertAlmostEqual(progress[2], d - 0.8)
        self.assertAlmostEqual(progress[3], 0.8)
        complete = [e for e in self.events if e[0] == "complete"][0]
        self.assertEqual(complete[2], "🏆 Grand Prize")
        self.assertAlmostEqual(complete[3], d)
        self.assertAlmostEqual(self.events[-1][1], d + 3.0)

        renderer = self.engine.renderer
        self.assertEqual(renderer.tone_names(), [
            cues.TONE_START, cues.TONE_DRUM_ROLL, cues.TONE_COUNTDOWN, cues.TONE_BIG_WIN,
        ])
        spoken = renderer.spoken()
        self.assertEqual(len(spoken), 7)
        self.assertIn("Grand Prize", spoken[0])
        self.assertNotIn("🏆", spoken[0])
        self.assertEqual(spoken[5], complete[1] + "!")
        self.assertEqual(self.engine.pending_cues, 0)

    def test_commit_persists(self) -> None:
        self.engine.start_draw()
        self.backend.run_all()
        saved, _ = self.engine.storage.saved[-1]
        self.assertEqual(len(saved["winners"]), 1)
        self.assertEqual(saved["prizeConfig"][0]["drawn"], 1)

    def test_second_draw_rejected_while_spinning(self) -> None:
        self.engine.start_draw()
        self.backend.advance_to(2.0)
        pending = self.engine.pending_cues
        plan = self.engine.last_plan
        with self.assertRaises(DrawAlreadyInProgress):
            self.engine.start_draw()
        self.assertEqual(self.engine.pending_cues, pending)
        self.assertIs(self.engine.last_plan, plan)
        self.backend.run_all()
        self.assertEqual(len(self.engine.session.winners), 1)

    def test_draws_until_everyone_has_won(self) -> None:
        engine, backend = make_engine(names=("A", "B", "C"), tiers=[PrizeTier("Lucky Prize", "🎁 Lucky Prize", 10)])
        for _ in range(3):
            engine.start_draw()
            backend.run_all()
        self.assertEqual(sorted(w.winner_name for w in engine.session.winners), ["A", "B", "C"])
        with self.assertRaises(NoEligibleParticipants):
            engine.start_draw()


class RejectedDrawTests(unittest.TestCase):
    def test_no_participants(self) -> None:
        engine, backend = make_engine(names=())
        with self.assertRaises(NoEligibleParticipants):
            engine.start_draw()
        self.assertFalse(engine.is_spinning)
        self.assertEqual(backend.pending, [])

    def test_no_tier_with_quota(self) -> None:
        engine, backend = make_engine(tiers=[PrizeTier("Grand Prize", "🏆 Grand Prize", 1, drawn=1)])
        before = engine.session.to_dict()
        with self.assertRaises(NoTierSelected):
            engine.start_draw()
        self.assertEqual(engine.session.to_dict(), before)
        self.assertEqual(backend.pending, [])
        self.assertEqual(engine.renderer.calls, [])

    def test_rejected_draw_does_not_consume_randomness(self) -> None:
        engine, _ = make_engine(tiers=[PrizeTier("Grand Prize", "🏆 Grand Prize", 1, drawn=1)])
        state = engine.rng.getstate()
        with self.assertRaises(NoTierSelected):
            engine.start_draw()
        self.assertEqual(engine.rng.getstate(), state)

    def test_seeded_draw_unaffected_by_earlier_rejection(self) -> None:
        rejected, _ = make_engine(seed=77)
        rejected.session.select_tier(0)
        rejected.session.tiers[0].count = 0
        with self.assertRaises(NoTierSelected):
            rejected.start_draw()
        rejected.session.tiers[0].count = 1
        clean, _ = make_engine(seed=77)
        self.assertEqual(rejected.start_draw(), clean.start_draw())

    def test_empty_roster_checked_before_tier(self) -> None:
        engine, _ = make_engine(names=(), tiers=[])
        with self.assertRaises(NoEligibleParticipants):
            engine.start_draw()


class CancellationTests(unittest.TestCase):
    def test_teardown_mid_spin_leaves_state_untouched(self) -> None:
        engine, backend = make_engine()
        engine.start_draw()
        backend.advance_to(3.0)
        engine.teardown()
        backend.advance_to(100.0)
        session = engine.session
        self.assertFalse(session.is_spinning)
        self.assertEqual(session.winners, [])
        self.assertEqual(session.rotation, 0.0)
        self.assertFalse(any(p.won for p in session.participants))
        self.assertTrue(engine.renderer.shut_down)
        self.assertEqual(engine.pending_cues, 0)

    def test_reset_draw_clears_winners_and_keeps_rotation(self) -> None:
        engine, backend = make_engine()
        engine.start_draw()
        backend.run_all()
        rotation = engine.session.rotation
        engine.start_draw()
        backend.advance_to(backend.now + 1.0)
        engine.reset_draw()
        backend.run_all()
        session = engine.session
        self.assertEqual(session.winners, [])
        self.assertFalse(any(p.won for p in session.participants))
        self.assertEqual(session.rotation, rotation)
        self.assertFalse(session.is_spinning)

    def test_new_draw_cancels_trailing_cues_of_previous(self) -> None:
        engine, backend = make_engine()
        first = engine.start_draw()
        backend.advance_to(first.duration + 0.1)
        engine.start_draw()
        before = len(engine.renderer.spoken())
        backend.advance_to(first.duration + 2.0)
        # the winner name and congratulation of the first draw never play
        self.assertEqual(len(engine.renderer.spoken()), before + 1)


class FailureIsolationTests(unittest.TestCase):
    def test_renderer_failure_does_not_block_commit(self) -> None:
        engine, backend = make_engine(renderer=RecordingRenderer(fail=True))
        engine.start_draw()
        backend.run_all()
        self.assertEqual(len(engine.session.winners), 1)
        self.assertTrue(os.listdir(os.path.join(log.LOG_DIR, "AUDIO")))

    def test_persistence_failure_is_logged_not_raised(self) -> None:
        blocker = os.path.join(log.LOG_DIR, "..", "not_a_dir")
        os.makedirs(os.path.dirname(blocker), exist_ok=True)
        with open(blocker, "w", encoding="utf-8") as f:
            f.write("x")
        storage = JsonStorage(os.path.join(blocker, "data.json"))
        engine, backend = make_engine(storage=storage)
        engine.start_draw()
        backend.run_all()
        self.assertEqual(len(engine.session.winners), 1)
        self.assertFalse(engine.session.is_spinning)
        self.assertTrue(os.listdir(os.path.join(log.LOG_DIR, "ERROR")))


class TestCuesTests(unittest.TestCase):
    def test_test_button_plays_sequence(self) -> None:
        engine, backend = make_engine()
        engine.test_cues()
        backend.run_all()
        self.assertEqual(engine.renderer.tone_names(), [cues.TONE_START, cues.TONE_TICK, cues.TONE_TICK, cues.TONE_FANFARE])
        self.assertEqual(engine.renderer.spoken(), [cues.TEST_PHRASE])

    def test_test_button_refused_while_spinning(self) -> None:
        engine, _ = make_engine()
        engine.start_draw()
        with self.assertRaises(DrawAlreadyInProgress):
            engine.test_cues()

    def test_teardown_cancels_test_sequence(self) -> None:
        engine, backend = make_engine()
        engine.test_cues()
        self.assertEqual(engine.pending_test_cues, 5)
        engine.teardown()
        backend.run_all()
        self.assertEqual(engine.renderer.calls, [])
        self.assertEqual(engine.pending_test_cues, 0)

    def test_starting_a_draw_cancels_test_sequence(self) -> None:
        engine, backend = make_engine()
        engine.test_cues()
        engine.start_draw()
        backend.advance_to(0.7)
        self.assertEqual(engine.renderer.tone_names(), [cues.TONE_START])
        self.assertNotIn(cues.TEST_PHRASE, engine.renderer.spoken())

    def test_reset_cancels_test_sequence(self) -> None:
        engine, backend = make_engine()
        engine.test_cues()
        backend.advance_to(0.2)
        engine.reset_draw()
        backend.run_all()
        self.assertEqual(engine.renderer.tone_names(), [cues.TONE_START])


if __name__ == "__main__":
    unittest.main()
