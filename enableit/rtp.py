"""RTP packet builder with a fixed 12-byte header."""

from __future__ import annotations

HEADER_SIZE = 12

_VERSION_MASK = 0xC0
_PADDING_MASK = 0x20
_EXTENSION_MASK = 0x10
_CC_MASK = 0x0F
_VERSION_SHIFT = 6
_MARKER_MASK = 0x80
_PT_MASK = 0x7F


class RtpPacket:
    """An RTP packet: header fields as properties plus a payload."""

    def __init__(self) -> None:
        self._header = bytearray(HEADER_SIZE)
        self._sequence = 0
        self.payload = b""

    def init(self, payload_type: int, ssrc: int) -> None:
        """Start a new packet: version 2, next sequence number, empty payload."""
        self._header[0] = 2 << _VERSION_SHIFT
        self.sequence = (self._sequence + 1) & 0xFFFF
        self.payload_type = payload_type
        self.ssrc = ssrc
        self.payload = b""

    def set_payload(self, payload: bytes) -> int:
        """Replace the payload; returns its length."""
        self.payload = bytes(payload)
        return len(self.payload)

    def to_bytes(self) -> bytes:
        """The packet as it goes on the wire."""
        return bytes(self._header) + self.payload

    def __len__(self) -> int:
        return HEADER_SIZE + len(self.payload)

    @property
    def size(self) -> int:
        return len(self)

    @property
    def version(self) -> int:
        return (self._header[0] & _VERSION_MASK) >> _VERSION_SHIFT

    @version.setter
    def version(self, value: int) -> None:
        self._header[0] = ((self._header[0] & ~_VERSION_MASK) | (value << _VERSION_SHIFT)) & 0xFF

    @property
    def padding(self) -> bool:
        return bool(self._header[0] & _PADDING_MASK)

    @property
    def extension(self) -> bool:
        return bool(self._header[0] & _EXTENSION_MASK)

    @property
    def cc(self) -> int:
        return self._header[0] & _CC_MASK

    @cc.setter
    def cc(self, value: int) -> None:
        self._header[0] = ((self._header[0] & ~_CC_MASK) | value) & 0xFF

    @property
    def marker(self) -> bool:
        return bool(self._header[1] & _MARKER_MASK)

    @marker.setter
    def marker(self, value: bool) -> None:
        if value:
            self._header[1] |= _MARKER_MASK
        else:
            self._header[1] &= ~_MARKER_MASK & 0xFF

    @property
    def payload_type(self) -> int:
        return self._header[1] & _PT_MASK

    @payload_type.setter
    def payload_type(self, value: int) -> None:
        self._header[1] = (self._header[1] & _MARKER_MASK) | (value & 0xFF)

    @property
    def sequence(self) -> int:
        return int.from_bytes(self._header[2:4], "big")

    @sequence.setter
    def sequence(self, value: int) -> None:
        self._sequence = value & 0xFFFF
        self._header[2:4] = self._sequence.to_bytes(2, "big")

    @property
    def timestamp(self) -> int:
        return int.from_bytes(self._header[4:8], "big")

    @timestamp.setter
    def timestamp(self, value: int) -> None:
        self._header[4:8] = (value & 0xFFFFFFFF).to_bytes(4, "big")

    @property
    def ssrc(self) -> int:
        return int.from_bytes(self._header[8:12], "big")

    @ssrc.setter
    def ssrc(self, value: int) -> None:
        self._header[8:12] = (value & 0xFFFFFFFF).to_bytes(4, "big")