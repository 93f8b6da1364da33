"""
main.py
-------
描述：幸運轉盤抽獎程式進入點。
功能：建立 QApplication，載入 data.json，組合抽獎狀態、音效播放與抽獎引擎後開啟主視窗。
"""
import os
import sys

from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import QCoreApplication
from PyQt5.QtGui import QFont

from draw_engine.engine import DrawEngine
from draw_engine.session import DrawSession
from draw_engine.storage import JsonStorage
from log import log_transaction
from ui_components.cue_renderer import CueRenderer
from utils.config import SoundSettings, get_data_file_path
from windows.main_window import MainWindow


def main():
    venv_root = os.path.dirname(os.path.dirname(sys.executable))
    plugin_path = os.path.join(venv_root, "Lib", "site-packages", "PyQt5", "Qt5", "plugins")

    if os.path.exists(plugin_path):
        QCoreApplication.addLibraryPath(plugin_path)

    app = QApplication(sys.argv)
    app.setFont(QFont("Microsoft JhengHei", 10))

    storage = JsonStorage(get_data_file_path())
    session = DrawSession()
    settings = SoundSettings.from_dict(storage.load(session))

    renderer = CueRenderer(settings)
    engine = DrawEngine(session, renderer=renderer, storage=storage,
                        settings_provider=lambda: renderer.settings.to_dict())

    window = MainWindow(engine, renderer)
    window.show()
    log_transaction("[App] 程式啟動")

    code = app.exec_()
    log_transaction("[App] 程式結束")
    return code


if __name__ == '__main__':
    sys.exit(main())
