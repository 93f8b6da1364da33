"""
speech.py
---------
描述：語音播報背景執行緒 (pyttsx3)。
功能：pyttsx3 的 runAndWait 會卡住呼叫端，所以所有播報都丟進佇列，
      由單一背景執行緒依序唸出；主執行緒只負責放入請求，不等待結果。
      語音引擎無法初始化時，之後的播報都直接略過 (寫入 AUDIO 日誌)。
"""
import queue
import threading

import pyttsx3

from log import log_audio

BASE_RATE = 175  # 每分鐘字數，rate=1.0 時的語速


def voice_language_codes(voice):
    codes = []
    for lang in getattr(voice, "languages", None) or []:
        if isinstance(lang, bytes):
            lang = lang.decode("utf-8", "ignore")
        codes.append(str(lang).strip("\x05").lower())
    return codes


def preferred_voice_id(voices):
    """優先選女性英文語音，其次任何英文語音，再其次第一個語音。"""
    def is_english(v):
        langs = voice_language_codes(v)
        text = f"{v.id} {v.name}".lower()
        return any(code.startswith("en") for code in langs) or "english" in text or "en-us" in text

    english = [v for v in voices if is_english(v)]
    for v in english:
        if "female" in f"{v.name} {getattr(v, 'gender', '') or ''}".lower():
            return v.id
    if english:
        return english[0].id
    return voices[0].id if voices else None


class SpeechWorker(threading.Thread):
    def __init__(self, on_voices_loaded=None):
        super().__init__(name="speech-worker", daemon=True)
        self._queue = queue.Queue()
        self._on_voices_loaded = on_voices_loaded
        self.available = True

    def say(self, text, rate=1.0, volume=1.0, voice_id=None):
        self._queue.put((text, rate, volume, voice_id))

    def cancel_pending(self):
        """清掉尚未唸出的播報 (正在唸的那一句會唸完)。"""
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            if item is None:
                # 保留結束訊號
                self._queue.put(None)
                return

    def stop(self, timeout=2.0):
        self.cancel_pending()
        self._queue.put(None)
        if self.is_alive():
            self.join(timeout)

    def _init_engine(self):
        try:
            engine = pyttsx3.init()
            voices = list(engine.getProperty('voices') or [])
        except Exception as e:
            log_audio(f"語音引擎初始化失敗，停用語音播報 | {e}")
            self.available = False
            return None
        if self._on_voices_loaded is not None:
            self._on_voices_loaded([(v.id, v.name) for v in voices], preferred_voice_id(voices))
        return engine

    def run(self):
        engine = self._init_engine()
        while True:
            item = self._queue.get()
            if item is None:
                break
            if engine is None:
                continue
            text, rate, volume, voice_id = item
            try:
                if voice_id:
                    engine.setProperty('voice', voice_id)
                engine.setProperty('rate', int(BASE_RATE * rate))
                engine.setProperty('volume', max(0.0, min(1.0, volume)))
                engine.say(text)
                engine.runAndWait()
            except Exception as e:
                log_audio(f"語音播報失敗: {text!r} | {e}")
        if engine is not None:
            try:
                engine.stop()
            except Exception as e:
                log_audio(f"語音引擎關閉失敗 | {e}")
