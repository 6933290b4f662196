"""HDLC-style framing: boundary markers, byte stuffing and a 16-bit FCS.

A frame on the wire is laid out as::

    BOUNDARY | size high | size low | payload (escaped) | fcs low | fcs high | BOUNDARY

Frames are built and parsed one byte at a time so that the codec can be
driven from a polling loop.
"""

from __future__ import annotations

import enum

BOUNDARY_MARKER = 0x7E
ESCAPE_MARKER = 0x7D
ESCAPE_XOR = 0x20
MAX_PAYLOAD = 0xFFFF


def _build_fcs16_table() -> tuple[int, ...]:
    table = []
    for index in range(256):
        crc = index
        for _ in range(8):
            crc = (crc >> 1) ^ 0x8408 if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_FCS16_TABLE = _build_fcs16_table()


def fcs16(fcs: int, value: int) -> int:
    """Fold one byte into a running 16-bit frame check sequence."""
    return (fcs >> 8) ^ _FCS16_TABLE[(fcs ^ value) & 0xFF]


class FrameMode(enum.Enum):
    """What the frame codec is doing, or how the last frame ended."""

    IDLE = enum.auto()
    SEND = enum.auto()
    DONE = enum.auto()
    ERROR_UNEXPECTED_BOUNDARY = enum.auto()
    ERROR_CRC_MISMATCH = enum.auto()
    ERROR_UNKNOWN_STATE = enum.auto()


class FrameState(enum.Enum):
    """Position of the codec inside the frame layout."""

    INIT_SYNC = enum.auto()
    SIZE_HIGH = enum.auto()
    SIZE_LOW = enum.auto()
    DATA = enum.auto()
    CRC_HIGH = enum.auto()
    CRC_LOW = enum.auto()


class HdlcFrame:
    """Incremental encoder and decoder for a single frame at a time."""

    def __init__(self) -> None:
        self.state = FrameState.INIT_SYNC
        self.mode = FrameMode.IDLE
        self._pos = 0
        self._len = 0
        self._crc = 0
        self._escape = False
        self._tx = b""
        self._rx = bytearray()

    def produce(self, data: bytes) -> int:
        """Load a payload to be sent with :meth:`put`; returns its length."""
        payload = bytes(data)
        if len(payload) > MAX_PAYLOAD:
            raise ValueError(f"payload too long: {len(payload)} > {MAX_PAYLOAD}")
        self._pos = 0
        self._len = len(payload)
        self._tx = payload
        self._escape = False
        self.state = FrameState.INIT_SYNC
        self.mode = FrameMode.SEND
        return len(payload)

    def consume(self) -> bytes | None:
        """Take the received payload, or None if no frame is complete."""
        if self.mode is not FrameMode.DONE:
            return None
        payload = bytes(self._rx)
        self._rx = bytearray()
        self.state = FrameState.INIT_SYNC
        self.mode = FrameMode.IDLE
        return payload

    def feed(self, byte: int) -> bool:
        """Process one received byte.

        Returns False when the byte ended the frame with an error; the error
        is then recorded in :attr:`mode`.
        """
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte: {byte!r}")
        state = self.state
        if state is FrameState.INIT_SYNC:
            if byte == BOUNDARY_MARKER:
                self.state = FrameState.SIZE_HIGH
                self._pos = 0
                self._crc = 0xFFFF
        elif state is FrameState.SIZE_HIGH:
            self._len = byte << 8
            self._crc = fcs16(self._crc, byte)
            self.state = FrameState.SIZE_LOW
        elif state is FrameState.SIZE_LOW:
            self._len |= byte
            self._crc = fcs16(self._crc, byte)
            self._rx = bytearray()
            self.state = FrameState.DATA if self._len > 0 else FrameState.CRC_HIGH
        elif state is FrameState.DATA:
            if self._escape:
                byte ^= ESCAPE_XOR
                self._escape = False
            elif byte == ESCAPE_MARKER:
                self._escape = True
                return True
            elif byte == BOUNDARY_MARKER:
                self.state = FrameState.INIT_SYNC
                self.mode = FrameMode.ERROR_UNEXPECTED_BOUNDARY
                return False
            self._rx.append(byte)
            self._pos += 1
            self._crc = fcs16(self._crc, byte)
            if self._pos == self._len:
                self.state = FrameState.CRC_HIGH
        elif state is FrameState.CRC_HIGH:
            if byte != (self._crc & 0xFF) ^ 0xFF:
                self.state = FrameState.INIT_SYNC
                self.mode = FrameMode.ERROR_CRC_MISMATCH
                return False
            self.state = FrameState.CRC_LOW
        elif state is FrameState.CRC_LOW:
            if byte != (self._crc >> 8) ^ 0xFF:
                self.state = FrameState.INIT_SYNC
                self.mode = FrameMode.ERROR_CRC_MISMATCH
                return False
            self.state = FrameState.INIT_SYNC
            self.mode = FrameMode.DONE
        else:
            self.state = FrameState.INIT_SYNC
            self.mode = FrameMode.ERROR_UNKNOWN_STATE
            return False
        return True

    def put(self) -> int:
        """Return the next byte of the frame loaded with :meth:`produce`."""
        state = self.state
        if state is FrameState.INIT_SYNC:
            byte = BOUNDARY_MARKER
            self.state = FrameState.SIZE_HIGH
            self._pos = 0
            self._crc = 0xFFFF
        elif state is FrameState.SIZE_HIGH:
            byte = (self._len >> 8) & 0xFF
            self._crc = fcs16(self._crc, byte)
            self.state = FrameState.SIZE_LOW
        elif state is FrameState.SIZE_LOW:
            byte = self._len & 0xFF
            self._crc = fcs16(self._crc, byte)
            self.state = FrameState.DATA
        elif state is FrameState.DATA:
            if self._escape:
                byte = self._tx[self._pos] ^ ESCAPE_XOR
                self._pos += 1
                self._crc = fcs16(self._crc, byte)
                self._escape = False
            elif self._pos < self._len:
                byte = self._tx[self._pos]
                if byte in (BOUNDARY_MARKER, ESCAPE_MARKER):
                    byte = ESCAPE_MARKER
                    self._escape = True
                else:
                    self._pos += 1
                self._crc = fcs16(self._crc, byte)
            else:
                self.state = FrameState.CRC_HIGH
                byte = (self._crc & 0xFF) ^ 0xFF
        elif state is FrameState.CRC_HIGH:
            byte = (self._crc >> 8) ^ 0xFF
            self.state = FrameState.CRC_LOW
        else:
            byte = BOUNDARY_MARKER
            self.state = FrameState.INIT_SYNC
            self.mode = FrameMode.DONE
        return byte

    def ready(self) -> bool:
        """True once a whole frame has been sent or received."""
        return self.mode is FrameMode.DONE and self._pos == self._len


def encode_frame(data: bytes) -> bytes:
    """Encode a payload into a complete frame."""
    frame = HdlcFrame()
    frame.produce(data)
    out = bytearray()
    while True:
        out.append(frame.put())
        if frame.mode is FrameMode.DONE:
            return bytes(out)