import pytest

from enableit.console import (
    ConsolePriority,
    ConsoleTransport,
    ConsoleWrapper,
    format_message,
)


class FakeTransport(ConsoleTransport):
    def __init__(self, name, connected=False, incoming=b""):
        super().__init__(name)
        self.connected = connected
        self.incoming = bytearray(incoming)
        self.written = bytearray()

    def is_connected(self):
        return self.connected

    def available(self):
        return len(self.incoming)

    def read(self):
        return self.incoming.pop(0) if self.incoming else -1

    def peek(self):
        return self.incoming[0] if self.incoming else -1

    def write(self, byte):
        self.written.append(byte)
        return 1

    def connect(self):
        self.connected = True
        self.notify_connect()

    def disconnect(self):
        self.connected = False
        self.notify_disconnect()


class PollingTransport(FakeTransport):
    needs_poll = True

    def __init__(self, name):
        super().__init__(name)
        self.polls = 0

    def poll(self):
        self.polls += 1


@pytest.fixture
def serial():
    return FakeTransport("serial", connected=True)


def test_fallback_active_without_transports(serial):
    console = ConsoleWrapper(serial)
    assert console.select_active_transport() is serial
    assert console.active_transport is serial


def test_connected_higher_priority_wins(serial):
    console = ConsoleWrapper(serial)
    console.register_transport(serial, ConsolePriority.SERIAL)
    telnet = FakeTransport("telnet")
    console.register_transport(telnet, ConsolePriority.TELNET)
    assert console.active_transport is serial
    telnet.connect()
    assert console.active_transport is telnet
    telnet.disconnect()
    assert console.active_transport is serial


def test_equal_priority_keeps_first(serial):
    console = ConsoleWrapper(serial)
    first = FakeTransport("a", connected=True)
    second = FakeTransport("b", connected=True)
    console.register_transport(first, ConsolePriority.TELNET)
    console.register_transport(second, ConsolePriority.TELNET)
    assert console.active_transport is first


def test_unregister_reselects(serial):
    console = ConsoleWrapper(serial)
    telnet = FakeTransport("telnet", connected=True)
    console.register_transport(telnet, ConsolePriority.TELNET)
    assert console.active_transport is telnet
    console.unregister_transport(telnet)
    assert console.active_transport is serial
    assert console.transports == []


def test_io_routed_to_active(serial):
    console = ConsoleWrapper(serial)
    telnet = FakeTransport("telnet", connected=True, incoming=b"hi")
    console.register_transport(telnet, ConsolePriority.TELNET)
    assert console.available() == 2
    assert console.peek() == ord("h")
    assert console.read() == ord("h")
    assert console.write(ord("x")) == 1
    console.echo(ord("y"))
    assert bytes(telnet.written) == b"xy"
    assert serial.written == bytearray()


def test_no_transport_at_all():
    console = ConsoleWrapper()
    assert console.write(65) == 0
    assert console.read() == -1
    assert console.peek() == -1
    assert console.available() == 0


def test_poll_only_polling_transports(serial):
    console = ConsoleWrapper(serial)
    polling = PollingTransport("poll")
    console.register_transport(serial, ConsolePriority.SERIAL)
    console.register_transport(polling, ConsolePriority.TELNET)
    console.poll()
    console.poll()
    assert polling.polls == 2


def test_debug_suppressed_when_disabled(serial):
    console = ConsoleWrapper(serial)
    console.debug(True, "P", True, "fn", "value %d", 7)
    assert serial.written == bytearray()


def test_debug_with_prefix_and_function(serial):
    console = ConsoleWrapper(serial, debug_enabled=True)
    console.debug(True, "P", True, "fn", "value %d", 7)
    assert bytes(serial.written) == b"P:fn: value 7\n"


def test_debug_without_linefeed_skips_prefix(serial):
    console = ConsoleWrapper(serial)
    console.debug(False, "P", False, "fn", "%s!", "go")
    assert bytes(serial.written) == b"go!"


def test_format_basic():
    assert format_message("%s=%d", "a", 3) == "a=3"
    assert format_message("100%%") == "100%"
    assert format_message("ab%qcd") == "abcd"


def test_format_unsigned_and_hex():
    assert format_message("%x", 255) == "ff"
    assert format_message("%u", -1) == "4294967295"
    assert format_message("%f", 1.5) == "1.500000"


def test_format_missing_argument():
    with pytest.raises(TypeError):
        format_message("%d and %d", 1)