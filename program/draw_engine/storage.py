"""
storage.py
----------
描述：抽獎資料存檔 (data.json)。
功能：讀檔失敗時使用預設值；存檔失敗只寫入 ERROR 日誌，不影響記憶體中的狀態。
"""
import json
import os

from log import log_error_app, log_transaction

from .models import DrawResult, Participant, PrizeTier
from .session import DrawSession


def _load_items(raw, factory, label):
    items = []
    if not isinstance(raw, list):
        return items
    for entry in raw:
        try:
            items.append(factory(entry))
        except (KeyError, TypeError, ValueError) as e:
            log_error_app(f"[Load] 略過無效的{label}資料 {entry!r}: {e}")
    return items


class JsonStorage:
    def __init__(self, path):
        self.path = path

    def load(self, session: DrawSession):
        """把存檔內容載入 session，回傳 settings 字典 (找不到存檔時回傳空字典)。"""
        if not os.path.exists(self.path):
            log_transaction(f"[Load] 找不到存檔，使用預設值: {self.path}")
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log_error_app(f"[Load Error] 讀檔失敗，使用預設值: {e}")
            return {}
        if not isinstance(data, dict):
            log_error_app(f"[Load Error] 存檔格式錯誤，使用預設值: {self.path}")
            return {}

        participants = []
        seen = set()
        for p in _load_items(data.get("participants"), Participant.from_dict, "參加者"):
            if p.name not in seen:
                seen.add(p.name)
                participants.append(p)
        session.participants = participants
        session.winners = _load_items(data.get("winners"), DrawResult.from_dict, "得獎")

        tiers = _load_items(data.get("prizeConfig"), PrizeTier.from_dict, "獎項")
        if tiers:
            session.tiers = tiers

        try:
            selected = int(data.get("selectedPrizeIndex", 0))
        except (TypeError, ValueError):
            selected = 0
        session.selected_index = selected if 0 <= selected < len(session.tiers) else 0

        log_transaction(
            f"[Load] 成功載入資料: {self.path} "
            f"(參加者 {len(session.participants)}，得獎 {len(session.winners)})"
        )
        settings = data.get("settings")
        return settings if isinstance(settings, dict) else {}

    def save(self, session: DrawSession, settings=None) -> bool:
        """將目前的狀態寫入 JSON；失敗時回傳 False。"""
        data = session.to_dict()
        if settings is not None:
            data["settings"] = settings
        tmp_path = self.path + ".tmp"
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False, indent=4)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            log_error_app(f"[Save Error] 存檔失敗: {self.path} | {e}")
            return False
        return True
