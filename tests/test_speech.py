from __future__ import annotations

import unittest
from types import SimpleNamespace

from ui_components.speech import preferred_voice_id, voice_language_codes


def voice(vid, name, languages=(), gender=None):
    return SimpleNamespace(id=vid, name=name, languages=list(languages), gender=gender)


class PreferredVoiceTests(unittest.TestCase):
    def test_prefers_female_english(self) -> None:
        voices = [
            voice("zh", "Hanhan", ["zh_TW"]),
            voice("david", "Microsoft David - English (United States)"),
            voice("zira", "Microsoft Zira - English (United States)", gender="Female"),
        ]
        self.assertEqual(preferred_voice_id(voices), "zira")

    def test_falls_back_to_any_english_then_first(self) -> None:
        self.assertEqual(preferred_voice_id([voice("zh", "Hanhan"), voice("en", "Alex", [b"\x05en_US"])]), "en")
        self.assertEqual(preferred_voice_id([voice("zh", "Hanhan"), voice("ja", "Kyoko")]), "zh")
        self.assertIsNone(preferred_voice_id([]))

    def test_language_codes_decoded(self) -> None:
        self.assertEqual(voice_language_codes(voice("x", "x", [b"\x05en-US", "ZH"])), ["en-us", "zh"])


if __name__ == "__main__":
    unittest.main()
