"""QR code symbol construction: function patterns, codeword placement and masking."""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import pairwise

from .qrencode import (
    FORMAT_BITS,
    Mode,
    add_error_correction,
    data_capacity,
    encode_data,
)

_PENALTY_N1 = 3
_PENALTY_N2 = 3
_PENALTY_N3 = 40
_PENALTY_N4 = 10

_FINDER_LIKE = (0x05D, 0x5D0)

_MASKS: tuple[Callable[[int, int], bool], ...] = (
    lambda x, y: (x + y) % 2 == 0,
    lambda x, y: y % 2 == 0,
    lambda x, y: x % 3 == 0,
    lambda x, y: (x + y) % 3 == 0,
    lambda x, y: (x // 3 + y // 2) % 2 == 0,
    lambda x, y: x * y % 2 + x * y % 3 == 0,
    lambda x, y: (x * y % 2 + x * y % 3) % 2 == 0,
    lambda x, y: ((x + y) % 2 + x * y % 3) % 2 == 0,
)


class ErrorCorrection(enum.IntEnum):
    """Error correction level of a symbol."""

    LOW = 0
    MEDIUM = 1
    QUARTILE = 2
    HIGH = 3


def buffer_size(version: int) -> int:
    """Bytes needed to hold the module grid of a version, one bit per module."""
    size = 4 * version + 17
    return (size * size + 7) // 8


def penalty_score(grid: Sequence[Sequence[bool]]) -> int:
    """Mask penalty of a square grid indexed ``grid[y][x]``; lower is better."""
    size = len(grid)
    result = 0

    columns = [[grid[y][x] for y in range(size)] for x in range(size)]
    for line in (*grid, *columns):
        run = 1
        for previous, current in pairwise(line):
            if current != previous:
                run = 1
                continue
            run += 1
            if run == 5:
                result += _PENALTY_N1
            elif run > 5:
                result += 1

    black = 0
    for y in range(size):
        bits_row = 0
        bits_col = 0
        for x in range(size):
            color = bool(grid[y][x])
            if x > 0 and y > 0:
                if color == grid[y - 1][x - 1] == grid[y - 1][x] == grid[y][x - 1]:
                    result += _PENALTY_N2
            bits_row = ((bits_row << 1) & 0x7FF) | color
            bits_col = ((bits_col << 1) & 0x7FF) | bool(grid[x][y])
            if x >= 10:
                if bits_row in _FINDER_LIKE:
                    result += _PENALTY_N3
                if bits_col in _FINDER_LIKE:
                    result += _PENALTY_N3
            if color:
                black += 1

    total = size * size
    k = 0
    while black * 20 < (9 - k) * total or black * 20 > (11 + k) * total:
        result += _PENALTY_N4
        k += 1
    return result


class _Canvas:
    """Module grid together with the marks of which modules are fixed patterns."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.modules = [[False] * size for _ in range(size)]
        self.function = [[False] * size for _ in range(size)]

    def set_function(self, x: int, y: int, on: bool) -> None:
        self.modules[y][x] = on
        self.function[y][x] = True

    def draw_finder(self, cx: int, cy: int) -> None:
        for i in range(-4, 5):
            for j in range(-4, 5):
                x, y = cx + j, cy + i
                if 0 <= x < self.size and 0 <= y < self.size:
                    self.set_function(x, y, max(abs(i), abs(j)) not in (2, 4))

    def draw_alignment(self, cx: int, cy: int) -> None:
        for i in range(-2, 3):
            for j in range(-2, 3):
                self.set_function(cx + j, cy + i, max(abs(i), abs(j)) != 1)

    def draw_format(self, ecc_bits: int, mask: int) -> None:
        data = ecc_bits << 3 | mask
        rem = data
        for _ in range(10):
            rem = (rem << 1) ^ ((rem >> 9) * 0x537)
        bits = (data << 10 | rem) ^ 0x5412

        def bit(i: int) -> bool:
            return (bits >> i) & 1 != 0

        size = self.size
        for i in range(6):
            self.set_function(8, i, bit(i))
        self.set_function(8, 7, bit(6))
        self.set_function(8, 8, bit(7))
        self.set_function(7, 8, bit(8))
        for i in range(9, 15):
            self.set_function(14 - i, 8, bit(i))

        for i in range(8):
            self.set_function(size - 1 - i, 8, bit(i))
        for i in range(8, 15):
            self.set_function(8, size - 15 + i, bit(i))
        self.set_function(8, size - 8, True)

    def draw_version(self, version: int) -> None:
        if version < 7:
            return
        rem = version
        for _ in range(12):
            rem = (rem << 1) ^ ((rem >> 11) * 0x1F25)
        data = version << 12 | rem
        for i in range(18):
            on = (data >> i) & 1 != 0
            a, b = self.size - 11 + i % 3, i // 3
            self.set_function(a, b, on)
            self.set_function(b, a, on)

    def draw_function_patterns(self, version: int, ecc_bits: int) -> None:
        size = self.size
        for i in range(size):
            self.set_function(6, i, i % 2 == 0)
            self.set_function(i, 6, i % 2 == 0)

        self.draw_finder(3, 3)
        self.draw_finder(size - 4, 3)
        self.draw_finder(3, size - 4)

        positions = _alignment_positions(version)
        last = len(positions) - 1
        for i, px in enumerate(positions):
            for j, py in enumerate(positions):
                if (i, j) in ((0, 0), (0, last), (last, 0)):
                    continue
                self.draw_alignment(px, py)

        self.draw_format(ecc_bits, 0)
        self.draw_version(version)

    def draw_codewords(self, codewords: bytes) -> None:
        bit_length = len(codewords) * 8
        size = self.size
        i = 0
        right = size - 1
        while right >= 1:
            if right == 6:
                right = 5
            for vert in range(size):
                for j in range(2):
                    x = right - j
                    upwards = ((right & 2) == 0) ^ (x < 6)
                    y = size - 1 - vert if upwards else vert
                    if not self.function[y][x] and i < bit_length:
                        self.modules[y][x] = (codewords[i >> 3] >> (7 - (i & 7))) & 1 != 0
                        i += 1
            right -= 2

    def apply_mask(self, mask: int) -> None:
        invert = _MASKS[mask]
        for y, (row, fixed) in enumerate(zip(self.modules, self.function)):
            for x in range(self.size):
                if not fixed[x] and invert(x, y):
                    row[x] = not row[x]


def _alignment_positions(version: int) -> list[int]:
    if version <= 1:
        return []
    count = version // 7 + 2
    if version == 32:
        step = 26
    else:
        step = (version * 4 + count * 2 + 1) // (2 * count - 2) * 2
    size = version * 4 + 17
    rest = [size - 7 - k * step for k in range(count - 1)]
    return [6, *reversed(rest)]


def _data_codewords(text: str | bytes, version: int, ecc: ErrorCorrection) -> tuple[Mode, bytes]:
    capacity_bits = data_capacity(version, ecc) * 8
    mode, buffer = encode_data(text, version)
    if len(buffer) > capacity_bits:
        raise ValueError(
            f"data needs {len(buffer)} bits, version {version} "
            f"at level {ecc.name} holds {capacity_bits}"
        )
    buffer.append_bits(0, min(4, capacity_bits - len(buffer)))
    buffer.append_bits(0, (8 - len(buffer) % 8) % 8)
    pad = 0xEC
    while len(buffer) < capacity_bits:
        buffer.append_bits(pad, 8)
        pad ^= 0xEC ^ 0x11
    return mode, buffer.to_bytes()


@dataclass(frozen=True)
class QrCode:
    """A finished QR symbol; ``modules[y][x]`` is True for a dark module."""

    version: int
    ecc: ErrorCorrection
    mode: Mode
    mask: int
    modules: tuple[tuple[bool, ...], ...]

    @property
    def size(self) -> int:
        return len(self.modules)

    @classmethod
    def from_text(cls, version: int, ecc: int, text: str | bytes) -> QrCode:
        """Encode ``text`` into a symbol of the given version and level."""
        level = ErrorCorrection(ecc)
        ecc_bits = FORMAT_BITS[level]
        mode, data = _data_codewords(text, version, level)
        codewords = add_error_correction(version, level, data)

        canvas = _Canvas(4 * version + 17)
        canvas.draw_function_patterns(version, ecc_bits)
        canvas.draw_codewords(codewords)

        best_mask = 0
        best_penalty: int | None = None
        for mask in range(len(_MASKS)):
            canvas.draw_format(ecc_bits, mask)
            canvas.apply_mask(mask)
            penalty = penalty_score(canvas.modules)
            if best_penalty is None or penalty < best_penalty:
                best_mask, best_penalty = mask, penalty
            canvas.apply_mask(mask)

        canvas.draw_format(ecc_bits, best_mask)
        canvas.apply_mask(best_mask)
        return cls(
            version=version,
            ecc=level,
            mode=mode,
            mask=best_mask,
            modules=tuple(tuple(row) for row in canvas.modules),
        )

    def module(self, x: int, y: int) -> bool:
        """Whether the module at column ``x``, row ``y`` is dark; False outside."""
        if not (0 <= x < self.size and 0 <= y < self.size):
            return False
        return self.modules[y][x]

    def to_text(self) -> str:
        """The symbol as lines of ``#`` (dark) and ``.`` (light)."""
        return "\n".join(
            "".join("#" if dark else "." for dark in row) for row in self.modules
        )