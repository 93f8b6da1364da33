"""
cues.py
-------
描述：一次抽獎的音效/語音/狀態事件時間表。
功能：所有時間點都是「相對於抽獎開始」的絕對偏移量 (秒)，d 為本次轉動秒數。
      同一時間點的事件依表格順序觸發。
"""
from __future__ import annotations

from typing import NamedTuple, Optional

from .exceptions import InvalidSpinDuration
from .rotation import MIN_SPIN_DURATION

# --- 事件種類 ---
SPEAK = "speak"
TONE = "tone"
START_ANIMATION = "start_animation"
COMMIT_RESULT = "commit_result"
END_FIREWORKS = "end_fireworks"

# --- 音效名稱 (對應 assets/sounds/*.wav，drum_roll 由多個 tick 組成) ---
TONE_START = "start"
TONE_DRUM_ROLL = "drum_roll"
TONE_COUNTDOWN = "countdown"
TONE_BIG_WIN = "big_win"
TONE_TICK = "tick"
TONE_FANFARE = "fanfare"

ANIMATION_DELAY = 0.8        # 開場白之後轉盤才開始動
DRUM_ROLL_LEAD_OUT = 1.0     # 鼓聲在 d - 1 秒長度內減速結束
FIREWORKS_SECONDS = 3.0

# --- 語音台詞 ---
OPENING_PHRASES = (
    "Ladies and gentlemen! Time for the {prize}!",
    "Here we go! Drawing for {prize}!",
    "Get ready everyone! {prize} is next!",
)
SPINNING_PHRASE = "The wheel is spinning!"
SUSPENSE_PHRASES = (
    "Who will be the lucky one?",
    "Around and around it goes!",
    "The tension is building!",
)
CLOSER_PHRASE = "Getting closer!"
REVEAL_PHRASE = "And the winner is..."
WINNER_PHRASE = "{winner}!"
CONGRATS_PHRASES = (
    "Congratulations! Give them a big round of applause!",
    "Amazing! What a lucky winner!",
    "Wonderful! Congratulations to our winner!",
)
TEST_PHRASE = "Testing! One, two, three!"


class Cue(NamedTuple):
    offset: float
    kind: str
    payload: Optional[dict] = None


def speech(text, rate=1.0, pitch=1.0, volume=1.0):
    return {"text": text, "rate": rate, "pitch": pitch, "volume": volume}


def validate_duration(duration):
    if duration < MIN_SPIN_DURATION:
        raise InvalidSpinDuration(
            f"spin duration {duration:.2f}s is shorter than {MIN_SPIN_DURATION:.0f}s"
        )


def build_timeline(duration, prize_name, winner_name, rng, target_rotation=None):
    """建立一次抽獎的完整事件表 (依偏移量排序，同時間保持表格順序)。

    ``rng`` 只用來從台詞池挑選 (``rng.choice``)；台詞挑選在建表時就決定，
    之後的觸發不再取亂數。
    """
    validate_duration(duration)
    d = float(duration)
    cues = [
        Cue(0.0, SPEAK, speech(rng.choice(OPENING_PHRASES).format(prize=prize_name), 1.1, 1.1, 1.0)),
        Cue(0.0, TONE, {"name": TONE_START}),
        Cue(ANIMATION_DELAY, START_ANIMATION,
            {"target_rotation": target_rotation, "duration": d - ANIMATION_DELAY}),
        Cue(ANIMATION_DELAY, TONE, {"name": TONE_DRUM_ROLL, "duration": d - DRUM_ROLL_LEAD_OUT}),
        Cue(2.0, SPEAK, speech(SPINNING_PHRASE, 1.0, 1.0, 0.9)),
        Cue(4.0, SPEAK, speech(rng.choice(SUSPENSE_PHRASES), 0.95, 1.0, 0.9)),
        Cue(d - 3.0, SPEAK, speech(CLOSER_PHRASE, 1.0, 1.1, 1.0)),
        Cue(d - 1.5, TONE, {"name": TONE_COUNTDOWN}),
        Cue(d - 1.0, SPEAK, speech(REVEAL_PHRASE, 0.8, 0.9, 1.0)),
        Cue(d, TONE, {"name": TONE_BIG_WIN}),
        Cue(d, COMMIT_RESULT),
        Cue(d + 0.3, SPEAK, speech(WINNER_PHRASE.format(winner=winner_name), 0.9, 1.2, 1.0)),
        Cue(d + 1.5, SPEAK, speech(rng.choice(CONGRATS_PHRASES), 1.0, 1.1, 1.0)),
        Cue(d + FIREWORKS_SECONDS, END_FIREWORKS),
    ]
    # sorted() 是穩定排序：同一偏移量維持上表順序
    return sorted(cues, key=lambda cue: cue.offset)


def build_test_timeline():
    """設定面板「測試音效與語音」的事件表。"""
    return [
        Cue(0.0, TONE, {"name": TONE_START}),
        Cue(0.1, SPEAK, speech(TEST_PHRASE, 1.0, 1.1, 1.0)),
        Cue(0.3, TONE, {"name": TONE_TICK, "pitch": 800, "volume": 1.0}),
        Cue(0.45, TONE, {"name": TONE_TICK, "pitch": 700, "volume": 1.0}),
        Cue(0.6, TONE, {"name": TONE_FANFARE}),
    ]
