import pytest

from enableit.hdlc_frame import (
    BOUNDARY_MARKER,
    ESCAPE_MARKER,
    ESCAPE_XOR,
    FrameMode,
    FrameState,
    HdlcFrame,
    encode_frame,
    fcs16,
)


def _feed_all(frame, wire):
    return [frame.feed(b) for b in wire]


def test_fcs16_table_entry():
    assert fcs16(0, 1) == 0x1189


def test_fcs16_check_value():
    crc = 0xFFFF
    for b in b"123456789":
        crc = fcs16(crc, b)
    assert crc ^ 0xFFFF == 0x906E


def test_encode_layout():
    wire = encode_frame(b"\x01\x02")
    assert len(wire) == 8
    assert wire[:5] == bytes([BOUNDARY_MARKER, 0, 2, 1, 2])
    assert wire[-1] == BOUNDARY_MARKER
    crc = 0xFFFF
    for b in wire[1:5]:
        crc = fcs16(crc, b)
    assert wire[5] == (crc & 0xFF) ^ 0xFF
    assert wire[6] == (crc >> 8) ^ 0xFF


def test_encode_escapes_special_bytes():
    wire = encode_frame(bytes([BOUNDARY_MARKER, ESCAPE_MARKER]))
    assert wire[:7] == bytes(
        [
            BOUNDARY_MARKER,
            0,
            2,
            ESCAPE_MARKER,
            BOUNDARY_MARKER ^ ESCAPE_XOR,
            ESCAPE_MARKER,
            ESCAPE_MARKER ^ ESCAPE_XOR,
        ]
    )


@pytest.mark.parametrize("payload", [b"", b"\x01", b"hello world", bytes(range(0x20, 0x70))])
def test_round_trip(payload):
    frame = HdlcFrame()
    assert all(_feed_all(frame, encode_frame(payload)[:-1]))
    assert frame.mode is FrameMode.DONE
    assert frame.ready()
    assert frame.consume() == payload
    assert frame.consume() is None
    assert frame.mode is FrameMode.IDLE


def test_leading_garbage_ignored():
    frame = HdlcFrame()
    _feed_all(frame, b"\x00\x11\x22" + encode_frame(b"abc"))
    assert frame.consume() == b"abc"


def test_decode_unescapes_payload():
    crc = 0xFFFF
    for b in (0, 1, BOUNDARY_MARKER):
        crc = fcs16(crc, b)
    wire = bytes(
        [
            BOUNDARY_MARKER,
            0,
            1,
            ESCAPE_MARKER,
            BOUNDARY_MARKER ^ ESCAPE_XOR,
            (crc & 0xFF) ^ 0xFF,
            (crc >> 8) ^ 0xFF,
        ]
    )
    frame = HdlcFrame()
    assert all(_feed_all(frame, wire))
    assert frame.consume() == bytes([BOUNDARY_MARKER])


def test_crc_mismatch():
    wire = bytearray(encode_frame(b"abc"))
    wire[-3] ^= 0xFF
    frame = HdlcFrame()
    results = _feed_all(frame, wire[:-2])
    assert results[-1] is False
    assert frame.mode is FrameMode.ERROR_CRC_MISMATCH
    assert frame.consume() is None


def test_unexpected_boundary():
    frame = HdlcFrame()
    results = _feed_all(frame, bytes([BOUNDARY_MARKER, 0, 3, ord("a"), BOUNDARY_MARKER]))
    assert results[-1] is False
    assert frame.mode is FrameMode.ERROR_UNEXPECTED_BOUNDARY
    assert frame.state is FrameState.INIT_SYNC


def test_send_ready_after_full_frame():
    frame = HdlcFrame()
    assert frame.produce(b"xy") == 2
    assert frame.mode is FrameMode.SEND
    assert not frame.ready()
    wire = bytearray()
    while frame.mode is not FrameMode.DONE:
        wire.append(frame.put())
    assert frame.ready()
    assert bytes(wire) == encode_frame(b"xy")


def test_produce_rejects_oversized_payload():
    with pytest.raises(ValueError):
        HdlcFrame().produce(bytes(0x10000))


def test_feed_rejects_non_byte():
    with pytest.raises(ValueError):
        HdlcFrame().feed(256)