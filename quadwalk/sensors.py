"""Decoding of the gyro and camera serial streams."""

from __future__ import annotations

from collections import deque
from typing import Callable, NamedTuple, Sequence

from .vector import deg_to_rad

__all__ = [
    "GYRO_BUFFER_SIZE",
    "GYRO_HISTORY",
    "SYNC_BYTE",
    "Attitude",
    "PixyVector",
    "median_filter",
    "Gyro",
    "read_pixy",
]

GYRO_BUFFER_SIZE = 8
GYRO_HISTORY = 5
SYNC_BYTE = 100
_NEGATIVE_FLAG = 0xFF
_ZERO_FLAG = 0x01
_PITCH_OFFSET_DEG = 17


class Attitude(NamedTuple):
    roll: float
    pitch: float
    yaw: float


class PixyVector(NamedTuple):
    start_x: float
    angle: float


def median_filter(values: Sequence[float]) -> float:
    """Select the filtered value from a short sample window.

    This keeps the firmware's exchange ordering and pick position exactly,
    so it is not a textbook median for every input.
    """
    data = list(values)
    size = len(data)
    if size < 3:
        raise ValueError("median_filter needs at least three samples")
    for i in range(size - 1):
        for j in range(1, size):
            if data[i] > data[j]:
                data[i], data[j] = data[j], data[i]
    return data[size // 2 + 1]


def _signed(flag: int, value: int) -> int:
    return value - 0x100 if flag == _NEGATIVE_FLAG else value


def _gyro_fields(buffer: Sequence[int]) -> list[int]:
    """Extract the six payload bytes that follow the two sync bytes."""
    header = next(
        (i for i in range(GYRO_BUFFER_SIZE - 1)
         if buffer[i] == SYNC_BYTE and buffer[i + 1] == SYNC_BYTE),
        None,
    )
    if header is None:
        return list(buffer[1:7])
    return [buffer[(header + k) % GYRO_BUFFER_SIZE] for k in range(2, 8)]


class Gyro:
    """Attitude from a circular receive buffer, smoothed over recent frames."""

    def __init__(self) -> None:
        self._roll = deque([0.0] * GYRO_HISTORY, maxlen=GYRO_HISTORY)
        self._pitch = deque([0.0] * GYRO_HISTORY, maxlen=GYRO_HISTORY)
        self._yaw = deque([0.0] * GYRO_HISTORY, maxlen=GYRO_HISTORY)
        self.roll = 0.0
        self.pitch = 0.0
        self.yaw = 0.0

    @property
    def attitude(self) -> Attitude:
        return Attitude(self.roll, self.pitch, self.yaw)

    def update(self, buffer: Sequence[int]) -> Attitude:
        """Decode one frame from an 8-byte buffer and refresh the attitude."""
        if len(buffer) != GYRO_BUFFER_SIZE:
            raise ValueError(f"gyro buffer must hold {GYRO_BUFFER_SIZE} bytes")
        f = _gyro_fields(buffer)
        self._roll.append(deg_to_rad(float(_signed(f[0], f[1]))))
        self._pitch.append(deg_to_rad(float(_signed(f[2], f[3]) - _PITCH_OFFSET_DEG)))
        self._yaw.append(deg_to_rad(float(_signed(f[4], f[5]))))
        self.roll = median_filter(self._roll)
        self.pitch = median_filter(self._pitch)
        self.yaw = median_filter(self._yaw)
        return self.attitude

    def prime(self, buffer: Sequence[int], count: int = GYRO_HISTORY) -> Attitude:
        """Feed the same buffer ``count`` times to fill the history."""
        for _ in range(count):
            self.update(buffer)
        return self.attitude


def read_pixy(read_byte: Callable[[], int]) -> PixyVector:
    """Read one camera vector frame: a sync byte followed by four data bytes."""
    while read_byte() != SYNC_BYTE:
        pass
    data = [read_byte() for _ in range(4)]

    def decode(flag: int, value: int) -> float:
        if flag == _ZERO_FLAG:
            return 0.0
        return float(_signed(flag, value))

    return PixyVector(decode(data[0], data[1]), decode(data[2], data[3]))