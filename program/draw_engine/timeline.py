"""
timeline.py
-----------
描述：事件時間表排程器。
功能：每個事件都是獨立、只觸發一次、可取消的延遲回呼，
      延遲時間皆以「抽獎開始」為基準 (不是接在前一個事件之後)，時間誤差不會累積。
      預設使用 Qt 的單次 QTimer；測試時可換成手動時鐘。
"""
from PyQt5.QtCore import QObject, Qt, QTimer

from log import log_error_app


class QtTimerHandle:
    def __init__(self, timer):
        self._timer = timer

    def cancel(self):
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtTimerBackend:
    """以單次 QTimer 實作 call_later (需在 Qt 事件迴圈中執行)。"""

    def __init__(self, parent=None):
        self._parent = parent

    def call_later(self, delay_seconds, callback):
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setTimerType(Qt.PreciseTimer)
        timer.timeout.connect(callback)
        timer.timeout.connect(timer.deleteLater)
        timer.start(max(0, int(round(delay_seconds * 1000))))
        return QtTimerHandle(timer)


class TimelineScheduler:
    """把一份 Cue 表排進計時器，並保證同一時間只有一份表在跑。"""

    def __init__(self, backend=None):
        self._backend = backend or QtTimerBackend(QObject())
        self._pending = {}
        self._next_id = 0
        self._generation = 0

    @property
    def pending_count(self):
        return len(self._pending)

    @property
    def is_active(self):
        return bool(self._pending)

    def start(self, cues, dispatch):
        """取消上一份表尚未觸發的事件，再排入新的事件表。"""
        self.cancel_all()
        self._generation += 1
        generation = self._generation
        for cue in cues:
            cue_id = self._next_id
            self._next_id += 1
            self._pending[cue_id] = self._backend.call_later(
                cue.offset,
                lambda cue_id=cue_id, cue=cue: self._fire(generation, cue_id, cue, dispatch),
            )

    def cancel_all(self):
        pending, self._pending = self._pending, {}
        self._generation += 1
        for handle in pending.values():
            handle.cancel()

    def _fire(self, generation, cue_id, cue, dispatch):
        if generation != self._generation or cue_id not in self._pending:
            return
        del self._pending[cue_id]
        try:
            dispatch(cue)
        except Exception as e:
            # 單一事件失敗不影響其他事件
            log_error_app(f"時間表事件失敗 {cue.kind}@{cue.offset:.2f}s | {e}")
