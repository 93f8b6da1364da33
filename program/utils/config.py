"""
config.py
---------
描述：全域設定與工具函式庫。
功能：
      1. 定義應用程式共用的常數 (轉盤配色、預設獎項)。
      2. 提供資源路徑解析函式 (resource_path)，解決開發環境與打包環境 (PyInstaller) 的路徑差異問題。
      3. 存檔位置與音效設定 (SoundSettings)。
"""
import sys
import os
from dataclasses import dataclass
from typing import Optional

from PyQt5.QtGui import QColor

def resource_path(relative_path):
    """ Get absolute path to resource, works for dev and for PyInstaller
        Prioritizes external assets folder next to the executable when frozen """
    if getattr(sys, 'frozen', False):
        base_path = os.path.dirname(sys.executable)
        external_path = os.path.join(base_path, relative_path)
        if os.path.exists(external_path):
            return external_path

        if hasattr(sys, '_MEIPASS'):
            return os.path.join(sys._MEIPASS, relative_path)

        return external_path
    else:
        # Dev mode: 以專案根目錄 (program/ 的上一層) 為基準
        project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
        return os.path.join(project_root, relative_path)


def get_data_file_path():
    """存檔 data.json 路徑：環境變數 > EXE 旁 > 專案根目錄"""
    override = os.environ.get("LUCKY_DRAW_DATA_FILE")
    if override:
        return override
    if getattr(sys, 'frozen', False):
        base_dir = os.path.dirname(sys.executable)
    else:
        base_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(base_dir, "data.json")


SOUNDS_DIR = "assets/sounds"

# --- 配色設定 (轉盤扇區循環使用) ---
COLORS = [
    QColor('#FF6B6B'), QColor('#4ECDC4'), QColor('#45B7D1'), QColor('#96CEB4'),
    QColor('#FFEAA7'), QColor('#DDA0DD'), QColor('#98D8C8'), QColor('#F7DC6F'),
    QColor('#BB8FCE'), QColor('#85C1E9'), QColor('#F8B500'), QColor('#00CED1'),
    QColor('#FF69B4'), QColor('#32CD32'), QColor('#FF8C00'), QColor('#9370DB'),
    QColor('#20B2AA'), QColor('#FFD700'), QColor('#FF6347'), QColor('#40E0D0'),
]

# --- 預設獎項 (名稱, 顯示標籤, 名額) ---
DEFAULT_PRIZE_CONFIG = [
    ("Grand Prize", "🏆 Grand Prize", 1),
    ("1st Prize", "🥇 1st Prize", 2),
    ("2nd Prize", "🥈 2nd Prize", 3),
    ("3rd Prize", "🥉 3rd Prize", 5),
    ("Lucky Prize", "🎁 Lucky Prize", 10),
]

# 單一獎項名額上限 (設定面板的 SpinBox 範圍)
MAX_TIER_QUOTA = 100


@dataclass
class SoundSettings:
    """音效與語音播報設定 (隨 data.json 一併存檔)"""
    sound_enabled: bool = True
    volume: float = 0.7
    voice_enabled: bool = True
    voice_id: Optional[str] = None

    def __post_init__(self):
        self.volume = min(1.0, max(0.0, float(self.volume)))

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return cls()
        defaults = cls()
        try:
            volume = float(data.get("soundVolume", defaults.volume))
        except (TypeError, ValueError):
            volume = defaults.volume
        voice_id = data.get("voiceId")
        return cls(
            sound_enabled=bool(data.get("soundEnabled", defaults.sound_enabled)),
            volume=volume,
            voice_enabled=bool(data.get("voiceEnabled", defaults.voice_enabled)),
            voice_id=voice_id if isinstance(voice_id, str) else None,
        )

    def to_dict(self):
        return {
            "soundEnabled": self.sound_enabled,
            "soundVolume": self.volume,
            "voiceEnabled": self.voice_enabled,
            "voiceId": self.voice_id,
        }
