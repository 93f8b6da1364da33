"""
generate_sounds.py
------------------
描述：以程式合成抽獎用的音效檔 (assets/sounds/*.wav)。
功能：tick (多種音高，鼓聲減速用)、start (上升音)、countdown (三聲倒數)、
      fanfare (勝利和弦)、big_win (頭獎鈴聲 + 閃光音 + 和弦)。
      程式啟動時會自動補齊缺少的檔案，也可以單獨執行本檔重新產生。
"""
import wave
import struct
import math
import os

SAMPLE_RATE = 44100

# 鼓聲音高從 1200Hz 降到 600Hz，每 100Hz 一個檔案
TICK_PITCHES = (600, 700, 800, 900, 1000, 1100, 1200)


def tick_file_name(pitch):
    return f"tick_{int(pitch)}.wav"


def nearest_tick_pitch(pitch):
    return min(TICK_PITCHES, key=lambda p: abs(p - pitch))


def _silence(duration):
    return [0.0] * int(SAMPLE_RATE * duration)


def _mix(track, samples, start_time, gain=1.0):
    """把 samples 疊加到 track 的 start_time 位置 (必要時延長 track)。"""
    start = int(SAMPLE_RATE * start_time)
    end = start + len(samples)
    if end > len(track):
        track.extend([0.0] * (end - len(track)))
    for i, value in enumerate(samples):
        track[start + i] += value * gain
    return track


def _exp_decay(t, duration, start_level=1.0, end_level=0.001):
    # 對應 exponentialRampToValueAtTime：在 duration 內由 start_level 指數衰減到 end_level
    return start_level * math.pow(end_level / start_level, min(t, duration) / duration)


def tick_samples(pitch, duration=0.05):
    """方波短促點擊聲 (賭場轉盤的喀喀聲)"""
    samples = []
    for i in range(int(SAMPLE_RATE * duration)):
        t = float(i) / SAMPLE_RATE
        square = 1.0 if math.sin(2 * math.pi * pitch * t) >= 0 else -1.0
        samples.append(square * 0.3 * _exp_decay(t, duration))
    return samples


def start_samples(duration=0.3):
    """上升音：300Hz -> 600Hz 指數滑音"""
    samples = []
    phase = 0.0
    for i in range(int(SAMPLE_RATE * duration)):
        t = float(i) / SAMPLE_RATE
        freq = 300.0 * math.pow(2.0, t / duration)
        phase += 2 * math.pi * freq / SAMPLE_RATE
        samples.append(math.sin(phase) * 0.3 * _exp_decay(t, duration))
    return samples


def beep_samples(freq, duration, level):
    samples = []
    for i in range(int(SAMPLE_RATE * duration)):
        t = float(i) / SAMPLE_RATE
        samples.append(math.sin(2 * math.pi * freq * t) * _exp_decay(t, duration, level))
    return samples


def countdown_samples():
    """三聲 880Hz (A5) 嗶聲，一聲比一聲大"""
    track = []
    for i, delay in enumerate((0.0, 0.3, 0.6)):
        _mix(track, beep_samples(880.0, 0.15, 0.5 * (0.5 + i * 0.25)), delay)
    return track


def chime_samples(freq, duration=0.5, level=0.3, attack=0.02):
    samples = []
    for i in range(int(SAMPLE_RATE * duration)):
        t = float(i) / SAMPLE_RATE
        if t < attack:
            env = level * t / attack
        else:
            env = _exp_decay(t - attack, duration - attack, level)
        samples.append(math.sin(2 * math.pi * freq * t) * env)
    return samples


def fanfare_samples():
    """勝利和弦：C5, E5, G5, C6, E6 依序響起"""
    track = []
    for i, freq in enumerate((523.25, 659.25, 783.99, 1046.50, 1318.51)):
        _mix(track, chime_samples(freq), i * 0.12)
    return track


def big_win_samples():
    """頭獎：快速鈴聲 -> 0.4 秒後閃光音 -> 0.7 秒後勝利和弦"""
    track = []
    for i, freq in enumerate((1200, 1400, 1600, 1800, 2000, 1800, 1600, 1400, 1200)):
        _mix(track, beep_samples(freq, 0.2, 0.25), i * 0.08)
    for i, freq in enumerate((2400, 2600, 2800, 3000, 2800, 2600)):
        _mix(track, beep_samples(freq, 0.15, 0.125), 0.4 + i * 0.05)
    _mix(track, fanfare_samples(), 0.7, gain=0.85)
    return track


def write_wav(filename, samples):
    """浮點樣本 (-1 ~ 1) 轉成 16-bit 單聲道 WAV"""
    data = []
    for value in samples:
        value = int(value * 32767)
        if value > 32767: value = 32767
        if value < -32768: value = -32768
        data.append(value)

    with wave.open(filename, 'w') as f:
        f.setnchannels(1)
        f.setsampwidth(2)
        f.setframerate(SAMPLE_RATE)
        f.writeframes(struct.pack('<' + ('h' * len(data)), *data))


def sound_builders():
    """檔名 -> 產生樣本的函式"""
    builders = {
        "start.wav": start_samples,
        "countdown.wav": countdown_samples,
        "fanfare.wav": fanfare_samples,
        "big_win.wav": big_win_samples,
    }
    for pitch in TICK_PITCHES:
        builders[tick_file_name(pitch)] = lambda pitch=pitch: tick_samples(pitch)
    return builders


def ensure_sound_assets(sounds_dir, overwrite=False):
    """補齊缺少的音效檔，回傳這次產生的檔案路徑。"""
    os.makedirs(sounds_dir, exist_ok=True)
    generated = []
    for file_name, build in sound_builders().items():
        path = os.path.join(sounds_dir, file_name)
        if overwrite or not os.path.exists(path):
            write_wav(path, build())
            generated.append(path)
    return generated


if __name__ == "__main__":
    # 計算專案根目錄
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(current_dir)
    assets_dir = os.path.join(project_root, "assets", "sounds")

    for path in ensure_sound_assets(assets_dir, overwrite=True):
        print(f"Generated {path}")
