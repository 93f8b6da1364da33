"""
lucky_wheel.py
--------------
描述：幸運轉盤客製化元件 (Custom Widget)。
功能：負責轉盤的繪圖與動畫，包含：
      1. 繪製扇形、名字、指針、光暈與特效 (速度線、聚光燈)。已中獎者的扇區以灰階顯示。
      2. 依抽獎引擎給的累積角度與秒數播放減速動畫 (QPropertyAnimation)。
      3. 處理 LED 跑馬燈特效。
      角度系統：扇區 i 從 12 點鐘方向順時針排列，指針固定在 12 點鐘，
      轉盤順時針轉 angle 度 (與 draw_engine.rotation 相同)。
"""
import math
import time

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QTimer, QPropertyAnimation, QEasingCurve, QRectF, QPointF, pyqtSignal, pyqtProperty
from PyQt5.QtGui import QPainter, QColor, QPen, QFont, QRadialGradient, QPainterPath, QBrush, QLinearGradient

from draw_engine.rotation import segment_at_pointer
from utils.config import COLORS

class LuckyWheelWidget(QWidget):
    spinFinished = pyqtSignal(int)  # 停止時指針所指的扇區索引

    def get_angle(self):
        return self.current_angle

    def set_angle(self, val):
        now = time.monotonic()
        dt = now - self._last_angle_time
        if dt > 0:
            # 度/10ms，與 LED 跑馬燈速度連動
            self.rotation_speed = (val - self.current_angle) / (dt * 100)
        self._last_angle_time = now
        self.current_angle = val
        self.update()

    angle = pyqtProperty(float, fget=get_angle, fset=set_angle)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.items = []          # 名字
        self.won_flags = []      # 是否已中獎 (灰階顯示)
        self.current_angle = 0.0
        self.rotation_speed = 0.0
        self.is_spinning = False
        self.highlight_index = -1
        self._last_angle_time = time.monotonic()
        self.anim = None

        # LED 裝飾邏輯
        self.led_count = 36
        self.led_phase = 0.0
        self.strobe_on = False
        self.led_timer = QTimer(self)
        self.led_timer.timeout.connect(self.update_leds)
        self.led_timer.start(50) # 20 FPS for LEDs

        self.setMinimumSize(300, 300)

    def set_participants(self, participants):
        self.items = [p.name for p in participants]
        self.won_flags = [p.won for p in participants]
        if self.highlight_index >= len(self.items):
            self.highlight_index = -1
        self.update()

    def set_rotation(self, rotation):
        """不播動畫，直接設定角度 (載入存檔或重繪時使用)"""
        self.stop_animation()
        self.current_angle = rotation
        self.rotation_speed = 0.0
        self.update()

    def spin_to(self, target_rotation, duration_seconds):
        """從目前角度轉到 target_rotation，在 duration_seconds 秒後剛好停下"""
        self.stop_animation()
        self.highlight_index = -1
        self.is_spinning = True
        self._last_angle_time = time.monotonic()

        self.anim = QPropertyAnimation(self, b"angle")
        self.anim.setDuration(max(1, int(duration_seconds * 1000)))
        self.anim.setStartValue(float(self.current_angle))
        self.anim.setEndValue(float(target_rotation))
        # 平滑減速至停止，無回彈，避免誤會
        self.anim.setEasingCurve(QEasingCurve.OutQuart)
        self.anim.finished.connect(self.on_anim_finished)
        self.anim.start()

    def stop_animation(self):
        if self.anim is not None:
            self.anim.stop()
            self.anim = None
        self.is_spinning = False
        self.rotation_speed = 0.0

    def on_anim_finished(self):
        self.is_spinning = False
        self.rotation_speed = 0.0
        self.anim = None
        if self.items:
            index = segment_at_pointer(self.current_angle, len(self.items))
            self.highlight_index = index
            self.spinFinished.emit(index)
        self.update()

    def highlight(self, name):
        self.highlight_index = self.items.index(name) if name in self.items else -1
        self.update()

    def _spin_progress(self):
        if self.anim is None or self.anim.duration() <= 0:
            return 0.0
        return self.anim.currentTime() / self.anim.duration()

    def update_leds(self):
        if self.is_spinning and self._spin_progress() > 0.9:
            # 快停下來前：頻閃 (50ms 切換一次)
            self.strobe_on = not self.strobe_on
        elif self.is_spinning:
            # 跑馬燈模式：速度隨轉速變化
            speed_factor = abs(self.rotation_speed) * 0.5
            if speed_factor < 0.5: speed_factor = 0.5
            self.led_phase = (self.led_phase + speed_factor) % self.led_count
        else:
            # 呼吸燈模式
            self.led_phase += 0.4

        # 轉動中動畫本身會觸發重繪
        if not self.is_spinning:
            self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        rect = self.rect()
        center = QPointF(rect.center())
        radius = min(rect.width(), rect.height()) / 2 * 0.8

        # 1. 轉盤背景光暈
        painter.setPen(Qt.NoPen)
        radial = QRadialGradient(center, radius * 1.1)
        radial.setColorAt(0, QColor(255, 215, 0, 80))
        radial.setColorAt(1, Qt.transparent)
        painter.setBrush(radial)
        painter.drawEllipse(center, radius * 1.1, radius * 1.1)

        n = len(self.items)
        if n == 0:
            painter.setPen(QColor(255, 255, 255, 180))
            painter.setFont(QFont("Microsoft JhengHei", 16, QFont.Bold))
            painter.drawText(QRectF(rect), Qt.AlignCenter, "請先新增參加者")
        else:
            self.draw_segments(painter, center, radius, n)

        if abs(self.rotation_speed) > 20:
            self.draw_speed_lines(painter, center, radius)

        self.draw_pointer(painter, center, radius)

        # 中心圓
        hub_radius = radius * 0.12
        painter.setBrush(Qt.white)
        painter.setPen(QPen(QColor(218, 165, 32), 5))
        painter.drawEllipse(center, hub_radius, hub_radius)

        if self.is_spinning:
            self.draw_spotlight(painter, rect, center, radius)

        # LED 最後畫，避免被聚光燈遮住
        self.draw_leds(painter, center, radius)

    def draw_segments(self, painter, center, radius, n):
        slice_angle = 360 / n
        painter.save()
        try:
            painter.translate(center)
            painter.rotate(self.current_angle)

            # Loop 1: 扇形。Qt 的 arcTo 以 3 點鐘為 0 度、逆時針為正，
            # 扇區 i 由 12 點鐘 (90 度) 順時針往下畫 slice_angle。
            for i in range(n):
                won = i < len(self.won_flags) and self.won_flags[i]
                base_c = QColor(120, 120, 120) if won else COLORS[i % len(COLORS)]

                grad = QLinearGradient(0, 0, radius, 0)
                grad.setColorAt(0.0, base_c.darker(130))
                grad.setColorAt(0.5, base_c.lighter(140))
                grad.setColorAt(1.0, base_c.darker(130))

                painter.setBrush(QBrush(grad))
                pen_color = QColor(255, 215, 0) if i == self.highlight_index else Qt.white
                painter.setPen(QPen(pen_color, 6 if i == self.highlight_index else 3))

                path = QPainterPath()
                path.moveTo(0, 0)
                path.arcTo(-radius, -radius, radius * 2, radius * 2, 90 - i * slice_angle, -slice_angle)
                path.closeSubpath()
                painter.drawPath(path)

            # Loop 2: 文字 (確保文字永遠在扇形上方)
            font_size = max(8, int(radius * 0.07))
            if n > 12: font_size = max(8, int(font_size * 0.8))
            if n > 30: font_size = max(7, int(font_size * 0.7))
            painter.setFont(QFont("Microsoft JhengHei", font_size, QFont.Bold))
            for i in range(n):
                painter.save()
                try:
                    # 扇區中線 (由 12 點鐘順時針 mid 度) 對應到 +x 軸旋轉 mid - 90
                    mid_angle = i * slice_angle + slice_angle / 2
                    painter.rotate(mid_angle - 90)

                    text_rect = QRectF(radius * 0.2, -30, radius * 0.75, 60)
                    text_str = self.items[i]
                    if len(text_str) > 12: text_str = text_str[:11] + "…"

                    # 文字陰影 - 解決亮色背景吃字問題
                    painter.setPen(QColor(0, 0, 0, 120))
                    painter.drawText(text_rect.translated(2, 2), Qt.AlignRight | Qt.AlignVCenter, text_str)

                    painter.setPen(QColor(220, 220, 220) if self.won_flags[i] else Qt.white)
                    painter.drawText(text_rect, Qt.AlignRight | Qt.AlignVCenter, text_str)
                finally:
                    painter.restore()
        finally:
            painter.restore()

    def draw_leds(self, painter, center, radius):
        led_radius = radius * 1.12 # 稍微在光暈外
        bulb_size = radius * 0.04

        painter.save()
        painter.translate(center)

        for i in range(self.led_count):
            angle_rad = math.radians(i * (360 / self.led_count))
            lx = led_radius * math.cos(angle_rad)
            ly = led_radius * math.sin(angle_rad)

            if self.is_spinning and self._spin_progress() > 0.9:
                # 頻閃模式 (全亮/全暗)
                alpha = 255 if self.strobe_on else 0
                color = QColor(255, 255, 255, alpha)
            elif self.is_spinning:
                # 跑馬燈 (Chasing)：距離跑馬頭越近越亮，尾巴 8 顆
                dist = (self.led_phase - i) % self.led_count
                tail_len = 8.0
                intensity = 1.0 - (dist / tail_len) if dist < tail_len else 0.1
                alpha = int(255 * intensity)
                color = QColor(255, 255, 200, alpha) if intensity > 0.8 else QColor(255, 165, 0, alpha)
            else:
                # 呼吸燈 (Breathing)：偶數紅橙、奇數金
                intensity = 0.3 + 0.7 * (math.sin(self.led_phase) + 1) / 2
                alpha = int(255 * intensity)
                color = QColor(255, 69, 0, alpha) if i % 2 == 0 else QColor(255, 215, 0, alpha)

            # 1. 燈泡光暈
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(color.red(), color.green(), color.blue(), int(alpha * 0.5)))
            painter.drawEllipse(QRectF(lx - bulb_size*0.8, ly - bulb_size*0.8, bulb_size*1.6, bulb_size*1.6))

            # 2. 燈泡本體
            painter.setBrush(color)
            painter.drawEllipse(QRectF(lx - bulb_size/2, ly - bulb_size/2, bulb_size, bulb_size))

        painter.restore()

    def draw_pointer(self, painter, center, radius):
        """固定在 12 點鐘方向、尖端朝下指向轉盤邊緣的指針"""
        pointer_w = radius * 0.12
        tip_y = center.y() - radius * 0.9
        base_y = center.y() - radius * 1.08

        path = QPainterPath()
        path.moveTo(center.x(), tip_y)
        path.lineTo(center.x() + pointer_w / 2, base_y)
        path.lineTo(center.x() - pointer_w / 2, base_y)
        path.closeSubpath()

        painter.save()
        try:
            painter.translate(2, 2)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(0, 0, 0, 100))
            painter.drawPath(path)
        finally:
            painter.restore()

        painter.save()
        try:
            painter.setPen(QPen(Qt.white, 2))
            painter.setBrush(QColor(138, 43, 226))
            painter.drawPath(path)
        finally:
             painter.restore()

    def draw_speed_lines(self, painter, center, radius):
        """繪製速度線特效 (白色半透明放射狀線條)"""
        painter.save()
        painter.translate(center)

        # 不跟隨轉盤旋轉 (視覺殘留特效)，用時間讓線條每幀變化
        t = time.time() * 10
        count = 12

        for i in range(count):
            painter.save()
            painter.rotate(i * (360 / count) + math.sin(t + i) * 20)

            length_factor = 0.3 + (math.cos(t * 2 + i) * 0.1)
            width_factor = 3 + (math.sin(t * 3 + i) * 2)
            alpha = max(0, min(255, int(100 + math.sin(t + i*2) * 80)))

            painter.setBrush(QColor(255, 255, 255, alpha))
            painter.setPen(Qt.NoPen)

            # 三角形尖端朝圓心
            inner_r = radius * (1.0 - length_factor)
            outer_r = radius * 1.05
            path = QPainterPath()
            path.moveTo(0, -inner_r)
            path.lineTo(-width_factor, -outer_r)
            path.lineTo(width_factor, -outer_r)
            path.closeSubpath()
            painter.drawPath(path)

            painter.restore()

        painter.restore()

    def draw_spotlight(self, painter, rect, center, radius):
        """繪製聚光燈效果 (黑色遮罩 + 指針下方挖洞)"""
        overlay_path = QPainterPath()
        overlay_path.addRect(QRectF(rect))

        # 聚光燈中心定在約 0.65 半徑處 (指針下方的文字區)
        spot_center = QPointF(center.x(), center.y() - radius * 0.65)
        spot_radius = radius * 0.45
        spot_path = QPainterPath()
        spot_path.addEllipse(spot_center, spot_radius, spot_radius)

        # OddEvenFill：重疊部分挖空
        overlay_path.addPath(spot_path)

        painter.save()
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(0, 0, 0, 120))
        painter.drawPath(overlay_path)
        painter.restore()
