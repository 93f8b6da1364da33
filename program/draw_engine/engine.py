"""
engine.py
---------
描述：抽獎流程控制 (Draw Orchestration)。
功能：
      1. 開始抽獎：檢查狀態 -> 選出得獎者 -> 計算轉盤目標角度與秒數 -> 排入事件時間表。
      2. 依時間表發出語音/音效請求與畫面訊號 (drawStarted / drawProgress / drawComplete / fireworksEnded)。
      3. 在第 d 秒一次提交結果 (名單 + 獎項 + 得獎紀錄 + 轉盤角度)，並嘗試存檔。
      4. 關閉視窗 (teardown) 或重置時取消所有尚未觸發的事件，狀態維持抽獎前的樣子。
"""
import random
from datetime import datetime

from PyQt5.QtCore import QObject, pyqtSignal

from log import log_audio, log_transaction

from . import cues as cue_table
from .exceptions import DrawAlreadyInProgress, NoEligibleParticipants, NoTierSelected
from .rotation import plan_spin
from .selection import select_winner
from .timeline import QtTimerBackend, TimelineScheduler


class _ActiveDraw:
    def __init__(self, winner_name, tier_name, plan):
        self.winner_name = winner_name
        self.tier_name = tier_name
        self.plan = plan


class DrawEngine(QObject):
    drawStarted = pyqtSignal()
    drawProgress = pyqtSignal(float, float)   # (要轉到的累積角度, 距離停止的秒數)
    drawComplete = pyqtSignal(str, str)       # (得獎者, 獎項標籤)
    fireworksEnded = pyqtSignal()

    def __init__(self, session, renderer=None, storage=None, rng=None,
                 timer_backend=None, clock=None, settings_provider=None, parent=None):
        super().__init__(parent)
        self.session = session
        self.renderer = renderer
        self.storage = storage
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now
        self.settings_provider = settings_provider
        self._backend = timer_backend or QtTimerBackend(self)
        self._scheduler = TimelineScheduler(self._backend)
        self._test_scheduler = TimelineScheduler(self._backend)
        self._active = None
        self.last_plan = None
        self.last_result = None

    @property
    def is_spinning(self):
        return self.session.is_spinning

    @property
    def pending_cues(self):
        return self._scheduler.pending_count

    @property
    def pending_test_cues(self):
        return self._test_scheduler.pending_count

    # --- 開始抽獎 ---

    def start_draw(self):
        """開始一次抽獎並回傳 SpinPlan；不符合條件時拋出 DrawError，狀態不變。"""
        session = self.session
        if session.is_spinning:
            raise DrawAlreadyInProgress()
        if not session.eligible_participants():
            raise NoEligibleParticipants()
        tier = session.selected_tier()
        if tier is None:
            raise NoTierSelected()
        # 條件都通過才取亂數，被拒絕的抽獎不會推進 rng
        winner = select_winner(session.participants, self.rng)

        # 上一次抽獎結尾的播報/煙火、測試音效還沒跑完，先全部取消
        self._scheduler.cancel_all()
        self._test_scheduler.cancel_all()
        self._stop_audio()

        plan = plan_spin(session.total_count, session.index_of(winner.name), session.rotation, self.rng)
        timeline = cue_table.build_timeline(
            plan.duration, tier.announce_name, winner.name, self.rng,
            target_rotation=plan.new_rotation,
        )

        self._active = _ActiveDraw(winner.name, tier.name, plan)
        self.last_plan = plan
        session.is_spinning = True
        log_transaction(
            f"[Draw] 開始抽獎 {tier.name} | 轉動 {plan.duration:.2f}s, "
            f"{plan.spins} 圈, 目標角度 {plan.new_rotation:.2f}"
        )
        self.drawStarted.emit()
        self._scheduler.start(timeline, self._dispatch)
        return plan

    def _dispatch(self, cue):
        if cue.kind in (cue_table.SPEAK, cue_table.TONE):
            self._play(cue.kind, cue.payload)
        elif cue.kind == cue_table.START_ANIMATION:
            self.drawProgress.emit(float(cue.payload["target_rotation"]), float(cue.payload["duration"]))
        elif cue.kind == cue_table.COMMIT_RESULT:
            self._commit()
        elif cue.kind == cue_table.END_FIREWORKS:
            self.fireworksEnded.emit()

    def _play(self, kind, params):
        if self.renderer is None:
            return
        try:
            self.renderer.play_cue(kind, params)
        except Exception as e:
            # 音效失敗只影響這一個事件
            log_audio(f"播放事件失敗 {kind} {params!r} | {e}")

    def _stop_audio(self):
        if self.renderer is None:
            return
        try:
            self.renderer.stop_all()
        except Exception as e:
            log_audio(f"停止音效失敗 | {e}")

    # --- 開獎提交 ---

    def _commit(self):
        draw, self._active = self._active, None
        if draw is None:
            return
        try:
            result = self.session.commit_win(draw.winner_name, draw.tier_name, self.clock())
            self.session.rotation = draw.plan.new_rotation
        finally:
            self.session.is_spinning = False
        self.last_result = result
        log_transaction(f"[Draw] 中獎 {result.prize_label}: {result.winner_name}")
        self.persist()
        self.drawComplete.emit(result.winner_name, result.prize_label)

    def persist(self):
        """存檔 (失敗由 storage 記錄日誌，記憶體狀態仍為準)。"""
        if self.storage is None:
            return False
        settings = self.settings_provider() if self.settings_provider else None
        return self.storage.save(self.session, settings)

    # --- 取消 / 重置 ---

    def teardown(self):
        """關閉程式：取消所有事件並釋放音效資源，不提交進行中的抽獎。"""
        self._abandon_active_draw()
        if self.renderer is not None:
            try:
                self.renderer.shutdown()
            except Exception as e:
                log_audio(f"釋放音效資源失敗 | {e}")

    def reset_draw(self):
        """放棄進行中的抽獎並清除所有中獎狀態 (轉盤角度保留)。"""
        self._abandon_active_draw()
        self._stop_audio()
        self.session.reset_winners()
        log_transaction("[Draw] 重置所有中獎狀態")
        self.persist()

    def _abandon_active_draw(self):
        self._scheduler.cancel_all()
        self._test_scheduler.cancel_all()
        if self._active is not None:
            log_transaction(f"[Draw] 取消進行中的抽獎 ({self._active.tier_name})")
            self._active = None
            self.session.is_spinning = False

    # --- 測試音效 ---

    def test_cues(self):
        """設定面板的「測試音效與語音」按鈕。"""
        if self.session.is_spinning:
            raise DrawAlreadyInProgress()
        # 與抽獎時間表分開排程，但一樣會被 start_draw / teardown / reset_draw 取消
        self._test_scheduler.start(cue_table.build_test_timeline(), lambda cue: self._play(cue.kind, cue.payload))
