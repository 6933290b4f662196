"""QR code data encoding and Reed-Solomon error correction.

Error correction levels are given as integers: 0 low, 1 medium,
2 quartile, 3 high. Versions run from 1 to 40.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence

MIN_VERSION = 1
MAX_VERSION = 40

# Format-bit value for each error correction level (low, medium, quartile, high).
FORMAT_BITS = (1, 0, 3, 2)

# Tables below are indexed by format-bit value: medium, low, high, quartile.
_ECC_CODEWORDS = (
    (10, 16, 26, 36, 48, 64, 72, 88, 110, 130,
     150, 176, 198, 216, 240, 280, 308, 338, 364, 416,
     442, 476, 504, 560, 588, 644, 700, 728, 784, 812,
     868, 924, 980, 1036, 1064, 1120, 1204, 1260, 1316, 1372),
    (7, 10, 15, 20, 26, 36, 40, 48, 60, 72, 80, 96, 104, 120,
     132, 144, 168, 180, 196, 224, 224, 252, 270, 300, 312, 336, 360, 390,
     420, 450, 480, 510, 540, 570, 570, 600, 630, 660, 720, 750),
    (17, 28, 44, 64, 88, 112, 130, 156, 192, 224,
     264, 308, 352, 384, 432, 480, 532, 588, 650, 700,
     750, 816, 900, 960, 1050, 1110, 1200, 1260, 1350, 1440,
     1530, 1620, 1710, 1800, 1890, 1980, 2100, 2220, 2310, 2430),
    (13, 22, 36, 52, 72, 96, 108, 132, 160, 192,
     224, 260, 288, 320, 360, 408, 448, 504, 546, 600,
     644, 690, 750, 810, 870, 952, 1020, 1050, 1140, 1200,
     1290, 1350, 1440, 1530, 1590, 1680, 1770, 1860, 1950, 2040),
)

_ECC_BLOCKS = (
    (1, 1, 1, 2, 2, 4, 4, 4, 5, 5, 5, 8, 9, 9,
     10, 10, 11, 13, 14, 16, 17, 17, 18, 20, 21, 23, 25, 26,
     28, 29, 31, 33, 35, 37, 38, 40, 43, 45, 47, 49),
    (1, 1, 1, 1, 1, 2, 2, 2, 2, 4, 4, 4, 4, 4,
     6, 6, 6, 6, 7, 8, 8, 9, 9, 10, 12, 12, 12, 13,
     14, 15, 16, 17, 18, 19, 19, 20, 21, 22, 24, 25),
    (1, 1, 2, 4, 4, 4, 5, 6, 8, 8, 11, 11, 16, 16,
     18, 16, 19, 21, 25, 25, 25, 34, 30, 32, 35, 37, 40, 42,
     45, 48, 51, 54, 57, 60, 63, 66, 70, 74, 77, 81),
    (1, 1, 2, 2, 4, 4, 6, 6, 8, 8, 8, 10, 12, 16,
     12, 17, 16, 18, 21, 20, 23, 23, 25, 27, 29, 34, 34, 35,
     38, 40, 43, 45, 48, 51, 53, 56, 59, 62, 65, 68),
)

# Number of data and error-correction modules (bits) for each version.
NUM_RAW_DATA_MODULES = (
    208, 359, 567, 807, 1079, 1383, 1568, 1936, 2336, 2768, 3232, 3728, 4256,
    4651, 5243, 5867, 6523,
    7211, 7931, 8683, 9252, 10068, 10916, 11796, 12708, 13652, 14628, 15371,
    16411, 17483, 18587,
    19723, 20891, 22091, 23008, 24272, 25568, 26896, 28256, 29648,
)

_ALPHANUMERIC = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"
_ALPHANUMERIC_VALUES = {ord(c): i for i, c in enumerate(_ALPHANUMERIC)}

# Character count field widths for versions <=9, <=26 and <=40.
_COUNT_BITS = {
    0: (10, 12, 14),
    1: (9, 11, 13),
    2: (8, 16, 16),
}


class Mode(enum.IntEnum):
    """Data encoding mode; the mode indicator is ``1 << mode``."""

    NUMERIC = 0
    ALPHANUMERIC = 1
    BYTE = 2


def _check_version(version: int) -> None:
    if not MIN_VERSION <= version <= MAX_VERSION:
        raise ValueError(f"QR version must be in {MIN_VERSION}..{MAX_VERSION}, got {version}")


def _format_index(ecc: int) -> int:
    if not 0 <= ecc < len(FORMAT_BITS):
        raise ValueError(f"error correction level must be in 0..3, got {ecc}")
    return FORMAT_BITS[ecc]


class BitBuffer:
    """Growable buffer of bits, filled most significant bit first."""

    def __init__(self) -> None:
        self._data = bytearray()
        self._bits = 0

    def __len__(self) -> int:
        return self._bits

    def append_bits(self, value: int, length: int) -> None:
        """Append the low ``length`` bits of ``value``, highest bit first."""
        if length < 0:
            raise ValueError(f"bit length must not be negative, got {length}")
        for shift in reversed(range(length)):
            offset = self._bits & 7
            if offset == 0:
                self._data.append(0)
            if (value >> shift) & 1:
                self._data[-1] |= 0x80 >> offset
            self._bits += 1

    def to_bytes(self) -> bytes:
        """The bits packed into bytes; a trailing partial byte is zero-filled."""
        return bytes(self._data)


def mode_bits(version: int, mode: Mode) -> int:
    """Width of the character count field for a mode and version."""
    _check_version(version)
    widths = _COUNT_BITS[Mode(mode)]
    if version <= 9:
        return widths[0]
    if version <= 26:
        return widths[1]
    return widths[2]


def _as_bytes(text: str | bytes) -> bytes:
    return text.encode("utf-8") if isinstance(text, str) else bytes(text)


def encode_data(text: str | bytes, version: int) -> tuple[Mode, BitBuffer]:
    """Encode text in the most compact mode that holds it.

    Returns the chosen mode and the mode indicator, character count and
    data bits, without terminator or padding.
    """
    data = _as_bytes(text)
    buffer = BitBuffer()

    if all(0x30 <= b <= 0x39 for b in data):
        mode = Mode.NUMERIC
    elif all(b in _ALPHANUMERIC_VALUES for b in data):
        mode = Mode.ALPHANUMERIC
    else:
        mode = Mode.BYTE

    count_bits = mode_bits(version, mode)
    if len(data) >= 1 << count_bits:
        raise ValueError(
            f"{len(data)} characters do not fit a {count_bits}-bit count field"
        )

    buffer.append_bits(1 << mode, 4)
    buffer.append_bits(len(data), count_bits)

    if mode is Mode.NUMERIC:
        for start in range(0, len(data), 3):
            group = data[start:start + 3]
            buffer.append_bits(int(group.decode("ascii")), len(group) * 3 + 1)
    elif mode is Mode.ALPHANUMERIC:
        for start in range(0, len(data), 2):
            pair = data[start:start + 2]
            if len(pair) == 2:
                value = _ALPHANUMERIC_VALUES[pair[0]] * 45 + _ALPHANUMERIC_VALUES[pair[1]]
                buffer.append_bits(value, 11)
            else:
                buffer.append_bits(_ALPHANUMERIC_VALUES[pair[0]], 6)
    else:
        for byte in data:
            buffer.append_bits(byte, 8)

    return mode, buffer


def _gf_multiply(x: int, y: int) -> int:
    """Multiply in GF(2^8) modulo x^8 + x^4 + x^3 + x^2 + 1."""
    z = 0
    for shift in range(7, -1, -1):
        z = (z << 1) ^ ((z >> 7) * 0x11D)
        z ^= ((y >> shift) & 1) * x
    return z


def rs_generator(degree: int) -> list[int]:
    """Reed-Solomon generator coefficients, descending powers, leading 1 dropped."""
    if degree < 1:
        raise ValueError(f"generator degree must be positive, got {degree}")
    coeff = [0] * degree
    coeff[-1] = 1
    root = 1
    for _ in range(degree):
        for j in range(degree):
            coeff[j] = _gf_multiply(coeff[j], root)
            if j + 1 < degree:
                coeff[j] ^= coeff[j + 1]
        root = _gf_multiply(root, 0x02)
    return coeff


def rs_remainder(generator: Sequence[int], data: Iterable[int]) -> bytes:
    """Error correction bytes for ``data`` under the given generator."""
    degree = len(generator)
    result = [0] * degree
    for byte in data:
        factor = byte ^ result[0]
        result = result[1:] + [0]
        for j, coefficient in enumerate(generator):
            result[j] ^= _gf_multiply(coefficient, factor)
    return bytes(result)


def data_capacity(version: int, ecc: int) -> int:
    """Number of data codewords a version holds at an error correction level."""
    _check_version(version)
    index = _format_index(ecc)
    return NUM_RAW_DATA_MODULES[version - 1] // 8 - _ECC_CODEWORDS[index][version - 1]


def add_error_correction(version: int, ecc: int, codewords: bytes) -> bytes:
    """Split data into blocks, add error correction and interleave.

    ``codewords`` must be exactly :func:`data_capacity` bytes long. The
    result holds every codeword of the symbol, data blocks first.
    """
    _check_version(version)
    index = _format_index(ecc)
    data = bytes(codewords)
    capacity = data_capacity(version, ecc)
    if len(data) != capacity:
        raise ValueError(f"expected {capacity} data codewords, got {len(data)}")

    num_blocks = _ECC_BLOCKS[index][version - 1]
    total_codewords = NUM_RAW_DATA_MODULES[version - 1] // 8
    block_ecc_len = _ECC_CODEWORDS[index][version - 1] // num_blocks
    num_short_blocks = num_blocks - total_codewords % num_blocks
    short_data_len = total_codewords // num_blocks - block_ecc_len

    generator = rs_generator(block_ecc_len)
    blocks: list[bytes] = []
    start = 0
    for block_num in range(num_blocks):
        length = short_data_len + (0 if block_num < num_short_blocks else 1)
        blocks.append(data[start:start + length])
        start += length
    ecc_blocks = [rs_remainder(generator, block) for block in blocks]

    out = bytearray()
    for i in range(short_data_len + 1):
        out.extend(block[i] for block in blocks if i < len(block))
    for i in range(block_ecc_len):
        out.extend(block[i] for block in ecc_blocks)
    return bytes(out)