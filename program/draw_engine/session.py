"""
session.py
----------
描述：一次執行期間的抽獎狀態 (名單、獎項、得獎紀錄、轉盤累積角度、轉動旗標)。
功能：
      1. 名單管理：新增/批次新增/刪除/清空/重置中獎狀態。
      2. 獎項管理：選擇獎項、調整名額。
      3. 開獎提交 (commit_win)：參加者與獎項同時更新，不會只改一邊。
      轉動中 (is_spinning) 拒絕任何名單與獎項的修改。
"""
from __future__ import annotations

import re
from typing import Iterable, Optional

from utils.config import DEFAULT_PRIZE_CONFIG, MAX_TIER_QUOTA

from .exceptions import DrawAlreadyInProgress, DuplicateParticipant
from .models import DrawResult, Participant, PrizeTier
from .selection import eligible_participants

# 批次輸入分隔：換行、半形/全形逗號、空白
_BATCH_SPLIT = re.compile(r"[\n,，\s]+")


def default_prize_tiers() -> list[PrizeTier]:
    return [PrizeTier(name=name, label=label, count=count) for name, label, count in DEFAULT_PRIZE_CONFIG]


class DrawSession:
    def __init__(self, participants=None, tiers=None, winners=None, selected_index=0):
        self.participants: list[Participant] = list(participants or [])
        self.tiers: list[PrizeTier] = list(tiers) if tiers is not None else default_prize_tiers()
        self.winners: list[DrawResult] = list(winners or [])
        self.selected_index: int = selected_index
        self.rotation: float = 0.0
        self.is_spinning: bool = False

    # --- 查詢 ---

    @property
    def total_count(self) -> int:
        return len(self.participants)

    @property
    def remaining_count(self) -> int:
        return len(self.eligible_participants())

    def eligible_participants(self) -> list[Participant]:
        return eligible_participants(self.participants)

    def names(self) -> list[str]:
        return [p.name for p in self.participants]

    def find_participant(self, name) -> Optional[Participant]:
        for p in self.participants:
            if p.name == name:
                return p
        return None

    def index_of(self, name) -> int:
        for index, p in enumerate(self.participants):
            if p.name == name:
                return index
        raise KeyError(name)

    def find_tier(self, tier_name) -> Optional[PrizeTier]:
        for tier in self.tiers:
            if tier.name == tier_name:
                return tier
        return None

    def selected_tier(self) -> Optional[PrizeTier]:
        """目前選擇的獎項；索引無效、名額為 0 或已抽完時回傳 None。"""
        if not 0 <= self.selected_index < len(self.tiers):
            return None
        tier = self.tiers[self.selected_index]
        return tier if tier.is_available else None

    # --- 名單管理 ---

    def _require_idle(self):
        if self.is_spinning:
            raise DrawAlreadyInProgress()

    def add_participant(self, name) -> Participant:
        self._require_idle()
        name = str(name).strip()
        if not name:
            raise ValueError("participant name must not be empty")
        if self.find_participant(name) is not None:
            raise DuplicateParticipant(name)
        participant = Participant(name=name)
        self.participants.append(participant)
        return participant

    def add_names(self, names: Iterable[str]) -> tuple[int, int]:
        """加入多個名字，回傳 (新增數, 略過數)。空白與重複的名字會被略過。"""
        self._require_idle()
        added = skipped = 0
        for raw in names:
            name = str(raw).strip()
            if not name:
                continue
            if self.find_participant(name) is not None:
                skipped += 1
                continue
            self.participants.append(Participant(name=name))
            added += 1
        return added, skipped

    def batch_add(self, text) -> tuple[int, int]:
        return self.add_names(_BATCH_SPLIT.split(text or ""))

    def remove_participant(self, name) -> None:
        self._require_idle()
        self.participants.pop(self.index_of(name))

    def clear_all(self) -> None:
        """清空名單與得獎紀錄，所有獎項已抽數歸零。"""
        self._require_idle()
        self.participants = []
        self._reset_draw_state()

    def reset_winners(self) -> None:
        """保留名單，但所有人恢復未中獎。"""
        self._require_idle()
        self.participants = [Participant(name=p.name) for p in self.participants]
        self._reset_draw_state()

    def _reset_draw_state(self):
        self.winners = []
        for tier in self.tiers:
            tier.drawn = 0
        self.selected_index = 0

    # --- 獎項管理 ---

    def select_tier(self, index) -> None:
        self._require_idle()
        if not 0 <= index < len(self.tiers):
            raise IndexError(index)
        self.selected_index = index

    def set_tier_quota(self, index, count) -> int:
        """調整名額，限制在 [已抽數, MAX_TIER_QUOTA]，回傳實際套用的名額。"""
        self._require_idle()
        tier = self.tiers[index]
        tier.count = max(tier.drawn, 0, min(int(count), MAX_TIER_QUOTA))
        return tier.count

    # --- 開獎提交 ---

    def commit_win(self, name, tier_name, timestamp) -> DrawResult:
        """參加者標記中獎 + 獎項已抽數 +1 + 新增得獎紀錄。

        先檢查兩邊條件，全部通過後才修改，確保不會只更新其中一邊。
        """
        participant = self.find_participant(name)
        if participant is None:
            raise KeyError(f"unknown participant: {name}")
        if participant.won:
            raise ValueError(f"participant already won: {name}")
        tier = self.find_tier(tier_name)
        if tier is None:
            raise KeyError(f"unknown prize tier: {tier_name}")
        if not tier.is_available:
            raise ValueError(f"prize tier has no remaining quota: {tier_name}")

        result = DrawResult(
            winner_name=participant.name,
            tier_name=tier.name,
            prize_label=tier.label,
            timestamp=timestamp,
        )
        participant.won = True
        participant.prize = tier.name
        tier.drawn += 1
        self.winners.append(result)
        return result

    # --- 存檔 ---

    def to_dict(self) -> dict:
        return {
            "participants": [p.to_dict() for p in self.participants],
            "winners": [w.to_dict() for w in self.winners],
            "prizeConfig": [t.to_dict() for t in self.tiers],
            "selectedPrizeIndex": self.selected_index,
        }
