"""
rotation.py
-----------
描述：轉盤目標角度計算。
功能：指針固定在 12 點鐘方向，扇區 i 由 12 點鐘順時針涵蓋 [i*slice, (i+1)*slice)。
      轉盤順時針轉 rotation 度後，指針所指的盤面角度為 (-rotation) mod 360。
      計算出的累積角度永遠往前轉 (delta 在 (0, 360])，並額外加上 8~12 整圈。
"""
from __future__ import annotations

from dataclasses import dataclass

MIN_EXTRA_SPINS = 8
EXTRA_SPIN_BONUS = 4        # 8 + randint(0, 4) -> 8..12 圈
MIN_SPIN_DURATION = 7.0     # 秒
SPIN_DURATION_RANGE = 5.0   # 7 + random() * 5 -> [7, 12)


@dataclass(frozen=True)
class SpinPlan:
    segment_count: int
    winner_index: int
    target_absolute: float
    delta: float
    spins: int
    start_rotation: float
    new_rotation: float
    duration: float


def segment_angle(segment_count: int) -> float:
    if segment_count <= 0:
        raise ValueError("segment_count must be positive")
    return 360.0 / segment_count


def target_absolute_angle(segment_count: int, winner_index: int) -> float:
    """讓扇區中線對準指針所需的盤面角度，正規化到 [0, 360)。"""
    if not 0 <= winner_index < segment_count:
        raise ValueError(f"winner_index {winner_index} out of range for {segment_count} segments")
    target = (360.0 - (winner_index + 0.5) * segment_angle(segment_count)) % 360.0
    # 浮點誤差可能讓 % 的結果剛好等於 360.0
    return 0.0 if target >= 360.0 else target


def forward_delta(target_absolute: float, current_rotation: float) -> float:
    """從目前停止位置往前轉到目標的角度，結果在 (0, 360]。"""
    delta = target_absolute - (current_rotation % 360.0)
    if delta <= 0:
        delta += 360.0
    return delta


def segment_at_pointer(rotation: float, segment_count: int) -> int:
    """由累積角度反推指針目前指到的扇區索引。"""
    pointer_on_wheel = (-rotation) % 360.0
    return int(pointer_on_wheel // segment_angle(segment_count)) % segment_count


def plan_spin(segment_count: int, winner_index: int, current_rotation: float, rng) -> SpinPlan:
    """計算這一次轉動的最終累積角度與轉動秒數。

    ``segment_count`` 是完整名單人數 (包含已中獎者，轉盤永遠顯示所有人)。
    """
    target = target_absolute_angle(segment_count, winner_index)
    delta = forward_delta(target, current_rotation)
    spins = MIN_EXTRA_SPINS + rng.randint(0, EXTRA_SPIN_BONUS)
    duration = MIN_SPIN_DURATION + rng.random() * SPIN_DURATION_RANGE
    return SpinPlan(
        segment_count=segment_count,
        winner_index=winner_index,
        target_absolute=target,
        delta=delta,
        spins=spins,
        start_rotation=current_rotation,
        new_rotation=current_rotation + spins * 360.0 + delta,
        duration=duration,
    )
