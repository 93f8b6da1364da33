"""
effects.py
----------
描述：開獎特效元件。
功能：FireworksWidget (煙火粒子，覆蓋在轉盤上方)、WinnerOverlay (得獎者名字與獎項)。
"""
import math
import random

from PyQt5.QtWidgets import QWidget, QLabel, QVBoxLayout, QGraphicsOpacityEffect
from PyQt5.QtCore import Qt, QTimer, QPropertyAnimation, QEasingCurve, pyqtSignal
from PyQt5.QtGui import QPainter, QColor
from utils.config import COLORS

GRAVITY = 0.12

class FireworksWidget(QWidget):
    """在隨機位置連續爆開的煙火；滑鼠事件穿透，不擋住底下的按鈕"""
    def __init__(self, parent=None, rng=None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.rng = rng or random.Random()
        self.particles = []
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.update_particles)
        self.frame = 0
        self.is_active = False
        self.hide()

    def start(self):
        self.is_active = True
        self.particles = []
        self.frame = 0
        self.launch_burst()
        self.timer.start(20)
        self.show()
        self.raise_()

    def stop(self):
        self.is_active = False
        self.timer.stop()
        self.particles = []
        self.hide()

    def launch_burst(self):
        w = max(1, self.width())
        h = max(1, self.height())
        x = self.rng.uniform(w * 0.15, w * 0.85)
        y = self.rng.uniform(h * 0.1, h * 0.5)
        color = self.rng.choice(COLORS)
        for i in range(60):
            angle = 2 * math.pi * i / 60
            speed = self.rng.uniform(2, 6)
            self.particles.append({
                'x': x, 'y': y,
                'vx': math.cos(angle) * speed,
                'vy': math.sin(angle) * speed,
                'life': 1.0,
                'decay': self.rng.uniform(0.012, 0.025),
                'size': self.rng.randint(3, 6),
                'color': color,
            })

    def update_particles(self):
        if not self.is_active: return
        self.frame += 1
        # 每 0.5 秒再放一發
        if self.frame % 25 == 0:
            self.launch_burst()
        for p in self.particles:
            p['x'] += p['vx']
            p['y'] += p['vy']
            p['vy'] += GRAVITY
            p['vx'] *= 0.98
            p['life'] -= p['decay']
        self.particles = [p for p in self.particles if p['life'] > 0]
        self.update()

    def paintEvent(self, event):
        if not self.is_active: return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setPen(Qt.NoPen)
        for p in self.particles:
            c = QColor(p['color'])
            c.setAlpha(int(255 * p['life']))
            painter.setBrush(c)
            painter.drawEllipse(int(p['x']), int(p['y']), p['size'], p['size'])


class WinnerOverlay(QWidget):
    """轉盤上方的中獎顯示遮罩，點一下關閉"""
    closed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignCenter)

        self.title_label = QLabel("🎉 WINNER! 🎉")
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setStyleSheet("color: #e74c3c; font-size: 48px; font-weight: bold; margin-bottom: 20px; background: transparent;")

        self.name_label = QLabel("")
        self.name_label.setAlignment(Qt.AlignCenter)
        self.name_label.setWordWrap(True)
        self.name_label.setStyleSheet("color: #f1c40f; font-size: 72px; font-weight: bold; background: transparent;")

        self.prize_label = QLabel("")
        self.prize_label.setAlignment(Qt.AlignCenter)
        self.prize_label.setStyleSheet("color: #ffffff; font-size: 36px; font-weight: bold; margin-top: 10px; background: transparent;")

        self.hint_label = QLabel("(點一下關閉)")
        self.hint_label.setAlignment(Qt.AlignCenter)
        self.hint_label.setStyleSheet("color: #bdc3c7; font-size: 14px; background: transparent;")

        layout.addWidget(self.title_label)
        layout.addWidget(self.name_label)
        layout.addWidget(self.prize_label)
        layout.addWidget(self.hint_label)
        self.op_anim = None
        self.hide()

    def show_winner(self, name, prize):
        self.name_label.setText(name)
        self.prize_label.setText(prize)
        self.setGeometry(self.parentWidget().rect() if self.parentWidget() else self.geometry())
        self.show()
        self.raise_()

        # 彈出動畫：名字透明度淡入 (OutBack 帶一點回彈感)
        if not self.name_label.graphicsEffect():
             eff = QGraphicsOpacityEffect(self.name_label)
             self.name_label.setGraphicsEffect(eff)

        self.op_anim = QPropertyAnimation(self.name_label.graphicsEffect(), b"opacity")
        self.op_anim.setDuration(800)
        self.op_anim.setStartValue(0.0)
        self.op_anim.setEndValue(1.0)
        self.op_anim.setEasingCurve(QEasingCurve.OutBack)
        self.op_anim.start()

    def dismiss(self):
        if self.isVisible():
            self.hide()
            self.closed.emit()

    def mousePressEvent(self, event):
        self.dismiss()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(0, 0, 0, 200))
