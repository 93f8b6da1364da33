"""
分級分流日誌模組 (log.py)

功能：依類別寫入每日日誌檔 (log_files/<類別>/YYYYMMDD.log)。
      ERROR : 應用程式錯誤 (含 Traceback)，例如存檔失敗。
      AUDIO : 音效/語音裝置錯誤 (含 Traceback)，只記錄不中斷抽獎。
      INFO  : 抽獎流程紀錄 (開始、開獎、名單異動)。
"""
from datetime import datetime
import traceback
import os
import sys
from typing import Optional

# --- 決定 Log 資料夾路徑 (始終寫入外部/可寫入位置) ---
if getattr(sys, 'frozen', False):
    # EXE 模式: 寫入 EXE 所在的資料夾
    BASE_DIR = os.path.dirname(sys.executable)
else:
    # 原始碼模式: 寫入專案根目錄 (program/ 的上一層)
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# 可用環境變數覆寫 (測試或部署到唯讀目錄時)
LOG_DIR = os.environ.get("LUCKY_DRAW_LOG_DIR") or os.path.join(BASE_DIR, "log_files")


# --- 核心寫入邏輯 (私有函式) ---

def _write_log_core(
    sub_folder: str,
    message: str,
    trace_info: Optional[str] = None
):
    """
    核心寫入函式，處理檔案 I/O、路徑組合和 Traceback 邏輯。

    Args:
        sub_folder (str): 該 Log 寫入的子資料夾名稱 (如 "ERROR", "AUDIO")。
        message (str): 呼叫者傳入的自定義訊息。
        trace_info (str): 可選，完整的異常追蹤資訊。
    """
    category_dir = os.path.join(LOG_DIR, sub_folder)
    try:
        os.makedirs(category_dir, exist_ok=True)
    except OSError as e:
        print(f"無法建立日誌目錄 {category_dir}: {e}", file=sys.stderr)
        return

    today = datetime.now()
    full_path = os.path.join(category_dir, today.strftime("%Y%m%d") + '.log')
    happen_time = today.strftime("%H:%M:%S.%f")[:-3]

    log_entry = f"[{happen_time}] [{sub_folder}]: {message}\n"

    # traceback.format_exc() 在沒有例外時會回傳 "NoneType: None"
    if trace_info and trace_info.strip() and not trace_info.startswith("NoneType: None"):
        log_entry += f"--- TRACEBACK ---\n{trace_info}\n"

    try:
        with open(full_path, 'a', encoding='utf-8') as fobj:
            fobj.write(log_entry)
    except OSError as write_e:
        print(f"致命錯誤：無法寫入日誌檔案 {full_path}: {write_e}", file=sys.stderr)


# --- 對外部呼叫的 API 函式 ---

def log_error_app(message: str):
    """應用程式邏輯錯誤 (寫入 ERROR/)。自動捕捉 Traceback。"""
    _write_log_core("ERROR", message, traceback.format_exc())


def log_audio(message: str):
    """音效/語音裝置錯誤 (寫入 AUDIO/)。自動捕捉 Traceback。"""
    _write_log_core("AUDIO", message, traceback.format_exc())


def log_transaction(message: str, include_trace: bool = False):
    """
    正常的抽獎流程或 INFO 資訊 (寫入 INFO/)。
    :param message: 要記錄的訊息。
    :param include_trace: 是否附加當前異常的 Traceback 資訊 (預設為 False)。
    """
    trace_info = traceback.format_exc() if include_trace else None
    _write_log_core("INFO", message, trace_info)
