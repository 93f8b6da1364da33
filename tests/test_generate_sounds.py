from __future__ import annotations

import os
import tempfile
import unittest
import wave

import generate_sounds


class SoundAssetTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.sounds_dir = os.path.join(self._tmp.name, "sounds")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_generates_every_asset_as_mono_16bit(self) -> None:
        generated = generate_sounds.ensure_sound_assets(self.sounds_dir)
        expected = {"start.wav", "countdown.wav", "fanfare.wav", "big_win.wav"}
        expected |= {generate_sounds.tick_file_name(p) for p in generate_sounds.TICK_PITCHES}
        self.assertEqual({os.path.basename(p) for p in generated}, expected)
        for path in generated:
            with wave.open(path, "rb") as f:
                self.assertEqual(f.getnchannels(), 1)
                self.assertEqual(f.getsampwidth(), 2)
                self.assertEqual(f.getframerate(), generate_sounds.SAMPLE_RATE)
                self.assertGreater(f.getnframes(), 0)

    def test_existing_files_are_kept(self) -> None:
        generate_sounds.ensure_sound_assets(self.sounds_dir)
        self.assertEqual(generate_sounds.ensure_sound_assets(self.sounds_dir), [])
        self.assertEqual(len(generate_sounds.ensure_sound_assets(self.sounds_dir, overwrite=True)), 11)

    def test_durations(self) -> None:
        rate = generate_sounds.SAMPLE_RATE
        self.assertEqual(len(generate_sounds.tick_samples(800)), int(rate * 0.05))
        # three beeps, the last one starts at 0.6s
        self.assertEqual(len(generate_sounds.countdown_samples()), int(rate * 0.6) + int(rate * 0.15))

    def test_nearest_tick_pitch(self) -> None:
        self.assertEqual(generate_sounds.nearest_tick_pitch(1190), 1200)
        self.assertEqual(generate_sounds.nearest_tick_pitch(640), 600)
        self.assertEqual(generate_sounds.nearest_tick_pitch(5000), 1200)
        self.assertEqual(generate_sounds.tick_file_name(900.0), "tick_900.wav")


if __name__ == "__main__":
    unittest.main()
