"""
models.py
---------
描述：抽獎資料模型 (參加者、獎項、開獎紀錄)。
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class Participant:
    """名單中的一位參加者。``won`` 只會由開獎提交 (commit) 從 False 翻成 True 一次。"""

    name: str
    won: bool = False
    prize: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"name": self.name, "won": self.won}
        if self.prize is not None:
            data["prize"] = self.prize
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Participant":
        name = str(data["name"]).strip()
        if not name:
            raise ValueError("participant name must not be empty")
        prize = data.get("prize")
        won = bool(data.get("won", False))
        # 已中獎卻沒有獎項的紀錄視為未中獎
        if won and not prize:
            won = False
        return cls(name=name, won=won, prize=str(prize) if won else None)


@dataclass
class PrizeTier:
    """獎項：固定名額 ``count``，已抽出 ``drawn`` (0 <= drawn <= count)。"""

    name: str
    label: str
    count: int
    drawn: int = 0

    @property
    def remaining(self) -> int:
        return max(0, self.count - self.drawn)

    @property
    def is_available(self) -> bool:
        return self.count > 0 and self.drawn < self.count

    @property
    def announce_name(self) -> str:
        """語音播報用名稱：去掉標籤前方的 emoji ("🏆 Grand Prize" -> "Grand Prize")。"""
        head, sep, rest = self.label.partition(" ")
        if sep and rest.strip() and not any(ch.isalnum() for ch in head):
            return rest.strip()
        return self.label.strip() or self.name

    def to_dict(self) -> dict:
        return {"name": self.name, "label": self.label, "count": self.count, "drawn": self.drawn}

    @classmethod
    def from_dict(cls, data: dict) -> "PrizeTier":
        name = str(data["name"])
        count = max(0, int(data.get("count", 0)))
        drawn = min(count, max(0, int(data.get("drawn", 0))))
        return cls(name=name, label=str(data.get("label") or name), count=count, drawn=drawn)


@dataclass(frozen=True)
class DrawResult:
    """一次完成抽獎的紀錄 (只新增，不修改)。"""

    winner_name: str
    tier_name: str
    prize_label: str
    timestamp: datetime

    @property
    def time_text(self) -> str:
        return self.timestamp.strftime(TIME_FORMAT)

    def to_dict(self) -> dict:
        return {
            "name": self.winner_name,
            "prize": self.prize_label,
            "tier": self.tier_name,
            "time": self.time_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DrawResult":
        label = str(data["prize"])
        return cls(
            winner_name=str(data["name"]),
            tier_name=str(data.get("tier") or label),
            prize_label=label,
            timestamp=datetime.strptime(str(data["time"]), TIME_FORMAT),
        )
