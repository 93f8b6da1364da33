import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtWidgets import QApplication

import log


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path, monkeypatch):
    log_dir = tmp_path / "log_files"
    monkeypatch.setattr(log, "LOG_DIR", str(log_dir))
    return log_dir
