"""
exceptions.py
-------------
描述：抽獎引擎的錯誤分類。所有「拒絕抽獎」的錯誤都不會改動任何狀態。
"""


class DrawError(Exception):
    """抽獎相關錯誤的基底類別。``user_message`` 供介面直接顯示。"""

    user_message = "無法開始抽獎"

    def __init__(self, message=None):
        super().__init__(message or self.user_message)


class NoEligibleParticipants(DrawError):
    user_message = "沒有可抽獎的參加者！"


class NoTierSelected(DrawError):
    user_message = "請選擇還有名額的獎項！"


class DrawAlreadyInProgress(DrawError):
    user_message = "轉盤轉動中，請稍候…"


class InvalidSpinDuration(DrawError, ValueError):
    user_message = "轉動時間過短"


class DuplicateParticipant(ValueError):
    """名單中已有同名參加者。"""

    def __init__(self, name):
        super().__init__(f"participant already exists: {name}")
        self.name = name
