from enableit.rtp import HEADER_SIZE, RtpPacket


def test_init_header_layout():
    packet = RtpPacket()
    packet.init(96, 0x12345678)
    wire = packet.to_bytes()
    assert len(wire) == HEADER_SIZE
    assert wire[0] == 2 << 6
    assert wire[1] == 96
    assert wire[2:4] == (1).to_bytes(2, "big")
    assert wire[8:12] == (0x12345678).to_bytes(4, "big")
    assert packet.version == 2


def test_sequence_increments_and_wraps():
    packet = RtpPacket()
    packet.init(0, 1)
    packet.init(0, 1)
    assert packet.sequence == 2
    packet.sequence = 0xFFFF
    packet.init(0, 1)
    assert packet.sequence == 0


def test_payload_and_size():
    packet = RtpPacket()
    packet.init(8, 7)
    assert packet.set_payload(b"abcd") == 4
    assert packet.size == HEADER_SIZE + 4
    assert packet.to_bytes()[HEADER_SIZE:] == b"abcd"
    packet.init(8, 7)
    assert packet.size == HEADER_SIZE


def test_marker_preserves_payload_type():
    packet = RtpPacket()
    packet.init(33, 0)
    packet.marker = True
    assert packet.marker
    assert packet.payload_type == 33
    assert packet.to_bytes()[1] == 0x80 | 33
    packet.marker = False
    assert packet.to_bytes()[1] == 33


def test_init_keeps_marker():
    packet = RtpPacket()
    packet.marker = True
    packet.init(10, 0)
    assert packet.marker
    assert packet.payload_type == 10


def test_timestamp_and_ssrc_round_trip():
    packet = RtpPacket()
    packet.init(0, 0)
    packet.timestamp = 0xDEADBEEF
    packet.ssrc = 42
    assert packet.timestamp == 0xDEADBEEF
    assert packet.ssrc == 42
    assert packet.to_bytes()[4:8] == (0xDEADBEEF).to_bytes(4, "big")


def test_version_and_cc_fields():
    packet = RtpPacket()
    packet.init(0, 0)
    packet.cc = 3
    packet.version = 1
    assert packet.cc == 3
    assert packet.version == 1
    assert not packet.padding
    assert not packet.extension