"""
main_window.py
--------------
描述：幸運轉盤抽獎主視窗。
功能：單一視窗分為三欄：
      1. 左側：名單管理 (新增/批次新增/Excel 匯入與範本、刪除、全部清除、重置抽獎、人數統計)。
      2. 中間：獎項選擇、轉盤、開始抽獎按鈕、中獎遮罩與煙火。
      3. 右側：獎項名額設定、得獎紀錄 (TXT/Excel 匯出)、音效與語音設定、測試音效。
      抽獎流程全部交給 DrawEngine，本視窗只負責顯示與轉發使用者操作。
"""
from PyQt5.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
                             QTextEdit, QLabel, QFileDialog, QMessageBox, QLineEdit, QComboBox,
                             QGroupBox, QFrame, QSlider, QCheckBox, QListWidget, QListWidgetItem,
                             QSpinBox, QGridLayout)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor

from draw_engine import spreadsheet
from draw_engine.exceptions import DrawError, DuplicateParticipant
from log import log_error_app, log_transaction
from ui_components.effects import FireworksWidget, WinnerOverlay
from ui_components.lucky_wheel import LuckyWheelWidget
from utils.config import MAX_TIER_QUOTA

PANEL_STYLE = """
    QFrame { background-color: #34495e; color: white; }
    QLabel { color: #ecf0f1; font-weight: bold; font-size: 14px; font-family: "Microsoft JhengHei"; }
    QPushButton { background-color: #2980b9; color: white; padding: 8px; border-radius: 5px; font-weight: bold; font-family: "Microsoft JhengHei";}
    QPushButton:hover { background-color: #3498db; }
    QPushButton:disabled { background-color: #7f8c8d; color: #bdc3c7; }
    QLineEdit, QComboBox, QTextEdit, QListWidget, QSpinBox { padding: 6px; color: #333; background: #ecf0f1; border-radius: 4px; font-size: 14px; }
    QCheckBox { color: #ecf0f1; font-size: 14px; }
    QGroupBox { border: 2px solid #7f8c8d; border-radius: 5px; margin-top: 20px; font-weight: bold; color: #ecf0f1; padding: 10px; }
    QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 5px; }
"""


class WheelStage(QWidget):
    """轉盤 + 覆蓋在上面的中獎遮罩與煙火 (兩者隨轉盤區域縮放)"""
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.wheel = LuckyWheelWidget()
        layout.addWidget(self.wheel)
        self.fireworks = FireworksWidget(self)
        self.overlay = WinnerOverlay(self)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.fireworks.setGeometry(self.rect())
        self.overlay.setGeometry(self.rect())


class MainWindow(QMainWindow):
    def __init__(self, engine, renderer=None):
        super().__init__()
        self.engine = engine
        self.session = engine.session
        self.renderer = renderer
        self.setWindowTitle("🎡 幸運轉盤抽獎")
        self.resize(1500, 900)

        self.init_ui()
        self.setup_style()

        engine.drawStarted.connect(self.on_draw_started)
        engine.drawProgress.connect(self.on_draw_progress)
        engine.drawComplete.connect(self.on_draw_complete)
        engine.fireworksEnded.connect(self.stage.fireworks.stop)
        if renderer is not None:
            renderer.voicesLoaded.connect(self.on_voices_loaded)
            if renderer.voices:
                self.on_voices_loaded(renderer.voices, renderer.settings.voice_id or "")

        self.stage.wheel.set_rotation(self.session.rotation)
        self.refresh_all()

    # --- 版面 ---

    def init_ui(self):
        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        main_widget.setStyleSheet("background-color: #2c3e50;")

        layout = QHBoxLayout(main_widget)
        layout.addWidget(self._build_roster_panel())
        layout.addWidget(self._build_center_panel(), 1)
        layout.addWidget(self._build_side_panel())

    def _build_roster_panel(self):
        panel = QFrame()
        panel.setFixedWidth(320)
        panel.setStyleSheet(PANEL_STYLE)
        v = QVBoxLayout(panel)

        title = QLabel("👥 參加者名單")
        title.setStyleSheet("font-size: 22px; color: gold; margin-bottom: 10px;")
        title.setAlignment(Qt.AlignCenter)
        v.addWidget(title)

        add_row = QHBoxLayout()
        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText("輸入名字後按 Enter...")
        self.name_input.returnPressed.connect(self.add_participant)
        self.add_btn = QPushButton("➕ 新增")
        self.add_btn.clicked.connect(self.add_participant)
        add_row.addWidget(self.name_input, 3)
        add_row.addWidget(self.add_btn, 1)
        v.addLayout(add_row)

        self.batch_input = QTextEdit()
        self.batch_input.setPlaceholderText("批次新增：一行一個名字，或用逗號分隔")
        self.batch_input.setFixedHeight(90)
        self.batch_btn = QPushButton("📋 批次新增")
        self.batch_btn.clicked.connect(self.batch_add)
        v.addWidget(self.batch_input)
        v.addWidget(self.batch_btn)

        excel_row = QHBoxLayout()
        self.template_btn = QPushButton("📄 下載範本")
        self.template_btn.clicked.connect(self.download_template)
        self.import_btn = QPushButton("📥 匯入 Excel")
        self.import_btn.setStyleSheet("background-color: #27ae60;")
        self.import_btn.clicked.connect(self.import_excel)
        excel_row.addWidget(self.template_btn)
        excel_row.addWidget(self.import_btn)
        v.addLayout(excel_row)

        self.participant_list = QListWidget()
        v.addWidget(self.participant_list, 1)

        self.count_label = QLabel("")
        self.count_label.setAlignment(Qt.AlignCenter)
        v.addWidget(self.count_label)

        self.remove_btn = QPushButton("🗑️ 刪除選取")
        self.remove_btn.clicked.connect(self.remove_selected)
        self.clear_btn = QPushButton("🧹 全部清除")
        self.clear_btn.setStyleSheet("background-color: #c0392b;")
        self.clear_btn.clicked.connect(self.clear_all)
        self.reset_btn = QPushButton("🔄 重置抽獎")
        self.reset_btn.setStyleSheet("background-color: #e67e22;")
        self.reset_btn.clicked.connect(self.reset_draw)
        row = QHBoxLayout()
        row.addWidget(self.remove_btn)
        row.addWidget(self.clear_btn)
        v.addLayout(row)
        v.addWidget(self.reset_btn)
        return panel

    def _build_center_panel(self):
        panel = QWidget()
        v = QVBoxLayout(panel)

        self.prize_combo = QComboBox()
        self.prize_combo.setStyleSheet("""
            QComboBox { font-size: 20px; padding: 6px; color: #333; background: #ecf0f1; border-radius: 4px; }
            QComboBox QAbstractItemView {
                font-size: 20px;
                padding: 10px;
                background-color: white;
                color: black;
                selection-background-color: #3498db;
            }
        """)
        self.prize_combo.currentIndexChanged.connect(self.on_prize_selected)
        v.addWidget(self.prize_combo)

        self.stage = WheelStage()
        self.stage.overlay.closed.connect(self.refresh_all)
        v.addWidget(self.stage, 1)

        self.spin_btn = QPushButton("🎰 開始抽獎 (SPIN)")
        self.spin_btn.setMinimumHeight(70)
        self.spin_btn.setStyleSheet("""
            QPushButton { background-color: #e74c3c; color: white; font-size: 26px; font-weight: bold; border-radius: 10px; font-family: "Microsoft JhengHei"; }
            QPushButton:hover { background-color: #ff6b5b; }
            QPushButton:disabled { background-color: #7f8c8d; color: #bdc3c7; }
        """)
        self.spin_btn.clicked.connect(self.start_draw)
        v.addWidget(self.spin_btn)
        return panel

    def _build_side_panel(self):
        panel = QFrame()
        panel.setFixedWidth(360)
        panel.setStyleSheet(PANEL_STYLE)
        v = QVBoxLayout(panel)

        # 1. 獎項名額
        prize_group = QGroupBox("🏆 獎項設定")
        self.quota_grid = QGridLayout(prize_group)
        self.quota_spins = []
        for row, tier in enumerate(self.session.tiers):
            label = QLabel(tier.label)
            spin = QSpinBox()
            spin.setRange(0, MAX_TIER_QUOTA)
            self.quota_grid.addWidget(label, row, 0)
            self.quota_grid.addWidget(spin, row, 1)
            self.quota_spins.append(spin)
        self.save_quota_btn = QPushButton("💾 儲存名額")
        self.save_quota_btn.clicked.connect(self.save_quotas)
        self.quota_grid.addWidget(self.save_quota_btn, len(self.quota_spins), 0, 1, 2)
        v.addWidget(prize_group)

        # 2. 得獎紀錄
        winners_group = QGroupBox("🎉 得獎紀錄")
        wv = QVBoxLayout(winners_group)
        self.winners_list = QListWidget()
        wv.addWidget(self.winners_list)
        export_row = QHBoxLayout()
        self.export_txt_btn = QPushButton("📝 匯出 TXT")
        self.export_txt_btn.clicked.connect(self.export_txt)
        self.export_excel_btn = QPushButton("📊 匯出 Excel")
        self.export_excel_btn.clicked.connect(self.export_excel)
        export_row.addWidget(self.export_txt_btn)
        export_row.addWidget(self.export_excel_btn)
        wv.addLayout(export_row)
        v.addWidget(winners_group, 1)

        # 3. 音效與語音
        sound_group = QGroupBox("🔊 音效與語音")
        sv = QVBoxLayout(sound_group)
        settings = self.renderer.settings if self.renderer is not None else None
        self.sound_check = QCheckBox("啟用音效")
        self.sound_check.setChecked(settings.sound_enabled if settings else False)
        self.sound_check.toggled.connect(self.on_sound_toggled)
        sv.addWidget(self.sound_check)

        vol_row = QHBoxLayout()
        vol_row.addWidget(QLabel("音量"))
        self.volume_slider = QSlider(Qt.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setValue(int(round((settings.volume if settings else 0.7) * 100)))
        self.volume_slider.valueChanged.connect(self.on_volume_changed)
        self.volume_label = QLabel(f"{self.volume_slider.value()}%")
        vol_row.addWidget(self.volume_slider, 1)
        vol_row.addWidget(self.volume_label)
        sv.addLayout(vol_row)

        self.voice_check = QCheckBox("啟用語音播報")
        self.voice_check.setChecked(settings.voice_enabled if settings else False)
        self.voice_check.toggled.connect(self.on_voice_toggled)
        sv.addWidget(self.voice_check)

        self.voice_combo = QComboBox()
        self.voice_combo.addItem("(載入語音中...)", "")
        self.voice_combo.currentIndexChanged.connect(self.on_voice_selected)
        sv.addWidget(self.voice_combo)

        self.test_btn = QPushButton("🔈 測試音效與語音")
        self.test_btn.clicked.connect(self.test_sound)
        sv.addWidget(self.test_btn)
        if self.renderer is None:
            sound_group.setEnabled(False)
        v.addWidget(sound_group)
        return panel

    def setup_style(self):
        self.setStyleSheet(self.styleSheet() + """
            QMessageBox { background-color: #333; color: white; }
            QMessageBox QLabel { color: white; font-size: 16px; }
            QMessageBox QPushButton { background-color: gold; color: black; padding: 5px 15px; }
        """)

    # --- 畫面更新 ---

    def refresh_all(self):
        self.refresh_roster()
        self.refresh_prizes()
        self.refresh_winners()
        self.update_controls()

    def refresh_roster(self):
        session = self.session
        self.participant_list.clear()
        for p in session.participants:
            item = QListWidgetItem(f"{p.name}  ✔ {p.prize}" if p.won else p.name)
            if p.won:
                item.setForeground(QColor("#95a5a6"))
            self.participant_list.addItem(item)
        self.count_label.setText(f"總人數 {session.total_count}｜剩餘 {session.remaining_count}")
        self.stage.wheel.set_participants(session.participants)

    def refresh_prizes(self):
        self.prize_combo.blockSignals(True)
        try:
            self.prize_combo.clear()
            for tier in self.session.tiers:
                self.prize_combo.addItem(f"{tier.label}  ({tier.drawn}/{tier.count})")
            self.prize_combo.setCurrentIndex(self.session.selected_index)
        finally:
            self.prize_combo.blockSignals(False)
        for spin, tier in zip(self.quota_spins, self.session.tiers):
            spin.setValue(tier.count)

    def refresh_winners(self):
        self.winners_list.clear()
        for i, w in enumerate(self.session.winners, start=1):
            self.winners_list.addItem(f"{i}. {w.prize_label} - {w.winner_name}  ({w.time_text})")
        self.winners_list.scrollToBottom()

    def update_controls(self):
        spinning = self.engine.is_spinning
        can_spin = (not spinning and self.session.remaining_count > 0
                    and self.session.selected_tier() is not None)
        self.spin_btn.setEnabled(can_spin)
        for w in (self.add_btn, self.name_input, self.batch_btn, self.import_btn,
                  self.remove_btn, self.clear_btn, self.reset_btn, self.prize_combo, self.save_quota_btn,
                  self.test_btn):
            w.setEnabled(not spinning)

    # --- 抽獎 ---

    def start_draw(self):
        self.stage.overlay.dismiss()
        self.stage.fireworks.stop()
        try:
            self.engine.start_draw()
        except DrawError as e:
            QMessageBox.warning(self, "無法抽獎", e.user_message)
            self.update_controls()

    def on_draw_started(self):
        self.update_controls()

    def on_draw_progress(self, target_rotation, duration):
        self.stage.wheel.spin_to(target_rotation, duration)

    def on_draw_complete(self, winner_name, prize_label):
        # 轉盤動畫與提交同時結束；以 session 的角度為準
        self.stage.wheel.set_rotation(self.session.rotation)
        self.refresh_all()
        self.stage.wheel.highlight(winner_name)
        self.stage.overlay.show_winner(winner_name, prize_label)
        self.stage.fireworks.start()

    def reset_draw(self):
        reply = QMessageBox.question(self, "重置抽獎",
                                     "確定要清除所有中獎紀錄嗎？\n名單會保留，所有人恢復未中獎。",
                                     QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply != QMessageBox.Yes:
            return
        self.engine.reset_draw()
        self.stage.overlay.dismiss()
        self.stage.fireworks.stop()
        self.stage.wheel.set_rotation(self.session.rotation)
        self.refresh_all()

    # --- 名單 ---

    def add_participant(self):
        name = self.name_input.text().strip()
        if not name:
            return
        try:
            self.session.add_participant(name)
        except DuplicateParticipant as e:
            QMessageBox.warning(self, "重複的名字", f"「{e.name}」已經在名單中了！")
            return
        except DrawError as e:
            QMessageBox.warning(self, "無法新增", e.user_message)
            return
        self.name_input.clear()
        self.after_roster_change()

    def batch_add(self):
        try:
            added, skipped = self.session.batch_add(self.batch_input.toPlainText())
        except DrawError as e:
            QMessageBox.warning(self, "無法新增", e.user_message)
            return
        self.batch_input.clear()
        self.after_roster_change()
        QMessageBox.information(self, "批次新增", f"新增 {added} 人，略過重複 {skipped} 人。")

    def remove_selected(self):
        row = self.participant_list.currentRow()
        if row < 0:
            return
        name = self.session.participants[row].name
        try:
            self.session.remove_participant(name)
        except DrawError as e:
            QMessageBox.warning(self, "無法刪除", e.user_message)
            return
        self.after_roster_change()

    def clear_all(self):
        reply = QMessageBox.question(self, "全部清除",
                                     "確定要清空所有參加者與得獎紀錄嗎？",
                                     QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply != QMessageBox.Yes:
            return
        try:
            self.session.clear_all()
        except DrawError as e:
            QMessageBox.warning(self, "無法清除", e.user_message)
            return
        self.after_roster_change()

    def after_roster_change(self):
        log_transaction(f"[Roster] 名單更新，共 {self.session.total_count} 人")
        self.engine.persist()
        self.refresh_all()

    def download_template(self):
        fname, _ = QFileDialog.getSaveFileName(self, '儲存範本', 'participants_template.xlsx', "Excel (*.xlsx)")
        if not fname:
            return
        try:
            spreadsheet.write_template(fname)
        except (OSError, ValueError) as e:
            log_error_app(f"[Excel] 範本寫入失敗 {fname}: {e}")
            QMessageBox.critical(self, "存檔錯誤", f"無法儲存範本：\n{e}")

    def import_excel(self):
        fname, _ = QFileDialog.getOpenFileName(self, '匯入名單', '', "Excel (*.xlsx *.xls);;All Files (*)")
        if not fname:
            return
        try:
            names = spreadsheet.read_names_from_excel(fname)
            added, skipped = self.session.add_names(names)
        except DrawError as e:
            QMessageBox.warning(self, "無法匯入", e.user_message)
            return
        except (OSError, ValueError) as e:
            log_error_app(f"[Excel] 匯入失敗 {fname}: {e}")
            QMessageBox.warning(self, "讀取錯誤", f"Excel 讀取失敗，請確認格式。\n{e}")
            return
        self.after_roster_change()
        QMessageBox.information(self, "匯入完成", f"新增 {added} 人，略過重複 {skipped} 人。")

    # --- 獎項 ---

    def on_prize_selected(self, index):
        if index < 0:
            return
        try:
            self.session.select_tier(index)
        except DrawError as e:
            QMessageBox.warning(self, "無法切換", e.user_message)
        self.engine.persist()
        self.update_controls()

    def save_quotas(self):
        try:
            for index, spin in enumerate(self.quota_spins):
                self.session.set_tier_quota(index, spin.value())
        except DrawError as e:
            QMessageBox.warning(self, "無法儲存", e.user_message)
            return
        log_transaction("[Prize] 名額更新: " + ", ".join(f"{t.name}={t.count}" for t in self.session.tiers))
        self.engine.persist()
        self.refresh_all()

    # --- 得獎紀錄匯出 ---

    def export_txt(self):
        if not self.session.winners:
            QMessageBox.information(self, "匯出", "目前還沒有得獎紀錄。")
            return
        fname, _ = QFileDialog.getSaveFileName(self, '匯出 TXT', 'winners.txt', "Text (*.txt)")
        if not fname:
            return
        try:
            spreadsheet.export_winners_text(fname, self.session.winners)
        except OSError as e:
            log_error_app(f"[Export] TXT 匯出失敗 {fname}: {e}")
            QMessageBox.critical(self, "存檔錯誤", f"無法匯出：\n{e}")

    def export_excel(self):
        if not self.session.winners:
            QMessageBox.information(self, "匯出", "目前還沒有得獎紀錄。")
            return
        fname, _ = QFileDialog.getSaveFileName(self, '匯出 Excel', 'winners.xlsx', "Excel (*.xlsx)")
        if not fname:
            return
        try:
            spreadsheet.export_winners_excel(fname, self.session.winners)
        except (OSError, ValueError) as e:
            log_error_app(f"[Export] Excel 匯出失敗 {fname}: {e}")
            QMessageBox.critical(self, "存檔錯誤", f"無法匯出：\n{e}")

    # --- 音效設定 ---

    def on_sound_toggled(self, checked):
        self.renderer.settings.sound_enabled = checked
        if not checked:
            self.renderer.stop_all()
        self.engine.persist()

    def on_volume_changed(self, value):
        self.renderer.settings.volume = value / 100
        self.volume_label.setText(f"{value}%")

    def on_voice_toggled(self, checked):
        self.renderer.settings.voice_enabled = checked
        self.engine.persist()

    def on_voices_loaded(self, voices, default_id):
        settings = self.renderer.settings
        if not settings.voice_id and default_id:
            settings.voice_id = default_id
        self.voice_combo.blockSignals(True)
        try:
            self.voice_combo.clear()
            if not voices:
                self.voice_combo.addItem("(沒有可用的語音)", "")
            for voice_id, name in voices:
                self.voice_combo.addItem(name, voice_id)
            index = self.voice_combo.findData(settings.voice_id or "")
            self.voice_combo.setCurrentIndex(max(0, index))
        finally:
            self.voice_combo.blockSignals(False)

    def on_voice_selected(self, index):
        voice_id = self.voice_combo.itemData(index)
        if voice_id:
            self.renderer.settings.voice_id = voice_id
            self.engine.persist()

    def test_sound(self):
        try:
            self.engine.test_cues()
        except DrawError as e:
            QMessageBox.warning(self, "無法測試", e.user_message)

    def closeEvent(self, event):
        # 音量拖拉時不即時存檔，關閉前一併存
        self.engine.persist()
        self.engine.teardown()
        event.accept()
