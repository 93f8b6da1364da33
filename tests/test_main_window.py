from __future__ import annotations

import random
import unittest

from draw_engine.engine import DrawEngine
from draw_engine.models import Participant
from draw_engine.session import DrawSession
from fakes import FakeTimerBackend, RecordingRenderer, RecordingStorage
from windows.main_window import MainWindow


class MainWindowControlsTests(unittest.TestCase):
    def setUp(self) -> None:
        session = DrawSession(participants=[Participant(n) for n in ("Alice", "Bob", "Carol")])
        session.select_tier(4)
        self.backend = FakeTimerBackend()
        self.engine = DrawEngine(
            session,
            renderer=RecordingRenderer(),
            storage=RecordingStorage(),
            rng=random.Random(5),
            timer_backend=self.backend,
        )
        self.window = MainWindow(self.engine)

    def tearDown(self) -> None:
        self.engine.teardown()
        self.window.stage.wheel.stop_animation()
        self.window.deleteLater()

    def test_editors_disabled_while_spinning(self) -> None:
        self.assertTrue(self.window.spin_btn.isEnabled())
        self.assertTrue(self.window.reset_btn.isEnabled())
        self.window.start_draw()
        self.assertTrue(self.engine.is_spinning)
        for button in (self.window.spin_btn, self.window.reset_btn, self.window.clear_btn,
                       self.window.remove_btn, self.window.add_btn, self.window.save_quota_btn):
            self.assertFalse(button.isEnabled())

    def test_editors_enabled_again_after_commit(self) -> None:
        self.window.start_draw()
        self.backend.advance_to(self.engine.last_plan.duration)
        self.assertFalse(self.engine.is_spinning)
        self.assertTrue(self.window.reset_btn.isEnabled())
        self.assertTrue(self.window.spin_btn.isEnabled())
        self.assertEqual(self.window.winners_list.count(), 1)


if __name__ == "__main__":
    unittest.main()
