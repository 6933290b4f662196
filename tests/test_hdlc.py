from collections import deque

from enableit.hdlc import CommandState, HdlcCommandMode


class FakeTransport:
    def __init__(self, incoming=b""):
        self.incoming = deque(incoming)
        self.written = []

    def push(self, data):
        self.incoming.extend(data)

    def available(self):
        return len(self.incoming)

    def read(self):
        return self.incoming.popleft()

    def write(self, data):
        self.written.append(bytes(data))
        return len(data)


def test_full_handshake():
    transport = FakeTransport(b"xACK")
    mode = HdlcCommandMode(transport, 5, syn=b"SYN", rdy=b"RDY")
    mode.process()
    assert mode.state is CommandState.WAIT_ACK2_A
    assert transport.written == [b"SYN"]

    transport.push(b"ACK")
    mode.process()
    assert mode.state is CommandState.WAIT_GO_G
    assert transport.written == [b"SYN", b"RDY"]

    transport.push(b"GO ")
    mode.process()
    assert mode.state is CommandState.WAIT_GO_SPACE
    assert transport.available() == 0


def test_line_endings_do_not_start_handshake():
    transport = FakeTransport(b"\r\n\r\n")
    mode = HdlcCommandMode(transport, 5)
    mode.process()
    assert mode.state is CommandState.INIT
    assert mode.attempts == 0


def test_first_byte_counts_attempt():
    transport = FakeTransport(b"z")
    mode = HdlcCommandMode(transport, 5)
    mode.process()
    assert mode.state is CommandState.WAIT_ACK_A
    assert mode.attempts == 1


def test_attempts_reset_at_limit():
    transport = FakeTransport(b"z")
    mode = HdlcCommandMode(transport, 1)
    mode.process()
    assert mode.attempts == 0
    assert mode.state is CommandState.WAIT_ACK_A


def test_unexpected_bytes_are_ignored_while_waiting():
    transport = FakeTransport(b"xAqqCK")
    mode = HdlcCommandMode(transport, 5)
    mode.process()
    assert mode.state is CommandState.WAIT_ACK2_A
    assert transport.written == [b"SYN"]


def test_send_syn_writes_configured_message():
    transport = FakeTransport()
    mode = HdlcCommandMode(transport, 3, syn=b"HELLO")
    mode.send_syn()
    assert transport.written == [b"HELLO"]