"""
cue_renderer.py
---------------
描述：把抽獎時間表的事件 (speak / tone) 變成實際的聲音。
功能：
      1. 音效：QSoundEffect 播放 assets/sounds 內的 WAV (缺檔時自動合成)。
      2. 鼓聲：一連串 tick，間隔由 50ms 逐漸拉長 (50 + 進度^2 * 400)，音高由高到低、音量漸強。
      3. 語音：交給 SpeechWorker 背景執行緒 (pyttsx3)。
      任何裝置錯誤只寫入 AUDIO 日誌，該事件視為沒有發生。
"""
import os

from PyQt5.QtCore import QObject, QTimer, QUrl, pyqtSignal
from PyQt5.QtMultimedia import QSoundEffect

from draw_engine import cues as cue_table
from generate_sounds import TICK_PITCHES, ensure_sound_assets, nearest_tick_pitch, tick_file_name
from log import log_audio
from utils.config import SOUNDS_DIR, SoundSettings, resource_path

from .speech import SpeechWorker

TICK_POOL_SIZE = 6  # 每種音高的音效實例數，鼓聲很密時才不會互相打斷


class CueRenderer(QObject):
    voicesLoaded = pyqtSignal(list, str)  # [(id, name), ...], 預設語音 id

    def __init__(self, settings=None, sounds_dir=None, parent=None):
        super().__init__(parent)
        self.settings = settings or SoundSettings()
        self.sounds_dir = sounds_dir or resource_path(SOUNDS_DIR)
        self.voices = []

        try:
            ensure_sound_assets(self.sounds_dir)
        except OSError as e:
            log_audio(f"無法產生音效檔 {self.sounds_dir} | {e}")

        self._effects = {}
        for name in (cue_table.TONE_START, cue_table.TONE_COUNTDOWN,
                     cue_table.TONE_FANFARE, cue_table.TONE_BIG_WIN):
            effect = self._load_sound(f"{name}.wav")
            if effect is not None:
                self._effects[name] = effect

        self._tick_pools = {}
        self._tick_index = {}
        for pitch in TICK_PITCHES:
            pool = [self._load_sound(tick_file_name(pitch)) for _ in range(TICK_POOL_SIZE)]
            pool = [effect for effect in pool if effect is not None]
            if pool:
                self._tick_pools[pitch] = pool
                self._tick_index[pitch] = 0

        # 鼓聲計時器 (單次觸發，每次依進度重設間隔)
        self._drum_timer = QTimer(self)
        self._drum_timer.setSingleShot(True)
        self._drum_timer.timeout.connect(self._drum_step)
        self._drum_elapsed = 0.0
        self._drum_total = 0.0

        self._speech = SpeechWorker(on_voices_loaded=self._on_voices_loaded)
        self._speech.start()

    def _load_sound(self, file_name):
        path = os.path.join(self.sounds_dir, file_name)
        if not os.path.exists(path):
            log_audio(f"找不到音效檔: {path}")
            return None
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(path))
        return effect

    def _on_voices_loaded(self, voices, default_id):
        # 由語音執行緒呼叫；訊號會排入主執行緒處理
        self.voices = voices
        self.voicesLoaded.emit(voices, default_id or "")

    # --- 對外介面 ---

    def play_cue(self, kind, params):
        try:
            if kind == cue_table.SPEAK:
                self.speak(params["text"], params.get("rate", 1.0), params.get("volume", 1.0))
            elif kind == cue_table.TONE:
                self.play_tone(params)
        except Exception as e:
            log_audio(f"事件播放失敗 {kind} {params!r} | {e}")

    def speak(self, text, rate=1.0, volume=1.0):
        if not self.settings.voice_enabled or not self._speech.available:
            return
        self._speech.say(text, rate, volume * self.settings.volume, self.settings.voice_id)

    def play_tone(self, params):
        if not self.settings.sound_enabled:
            return
        name = params["name"]
        if name == cue_table.TONE_DRUM_ROLL:
            self.start_drum_roll(params["duration"])
        elif name == cue_table.TONE_TICK:
            self.play_tick(params.get("pitch", 800), params.get("volume", 1.0))
        else:
            effect = self._effects.get(name)
            if effect is None:
                return
            effect.stop()
            effect.setVolume(self.settings.volume)
            effect.play()

    def play_tick(self, pitch, volume=1.0):
        pitch = nearest_tick_pitch(pitch)
        pool = self._tick_pools.get(pitch)
        if not pool:
            return
        effect = pool[self._tick_index[pitch]]
        if effect.isPlaying():
            effect.stop()
        effect.setVolume(max(0.0, min(1.0, self.settings.volume * volume)))
        effect.play()
        self._tick_index[pitch] = (self._tick_index[pitch] + 1) % len(pool)

    def start_drum_roll(self, duration):
        self._drum_timer.stop()
        self._drum_elapsed = 0.0
        self._drum_total = max(0.0, duration) * 1000
        self._drum_step()

    def _drum_step(self):
        if self._drum_elapsed >= self._drum_total or not self.settings.sound_enabled:
            return
        progress = self._drum_elapsed / self._drum_total
        # 越轉越慢：音高 1200 -> 600，音量 0.5 -> 1
        self.play_tick(1200 - progress * 600, 0.5 + progress * 0.5)
        interval = 50 + (progress ** 2) * 400
        self._drum_elapsed += interval
        self._drum_timer.start(int(interval))

    def stop_all(self):
        """停止鼓聲、所有音效與尚未唸出的語音。"""
        self._drum_timer.stop()
        for effect in self._effects.values():
            effect.stop()
        for pool in self._tick_pools.values():
            for effect in pool:
                effect.stop()
        self._speech.cancel_pending()

    def shutdown(self):
        self.stop_all()
        self._speech.stop()
