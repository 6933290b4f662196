"""Command-mode handshake that precedes framed HDLC traffic."""

from __future__ import annotations

import enum
from typing import Protocol


class HdlcTransport(Protocol):
    """Byte stream the handshake runs over."""

    def available(self) -> int: ...

    def read(self) -> int: ...

    def write(self, data: bytes) -> int: ...


class CommandState(enum.Enum):
    """Handshake progress: ACK, SYN, ACK, RDY, then GO."""

    INIT = enum.auto()
    WAIT_ACK_A = enum.auto()
    WAIT_ACK_C = enum.auto()
    WAIT_ACK_K = enum.auto()
    WAIT_ACK2_A = enum.auto()
    WAIT_ACK2_C = enum.auto()
    WAIT_ACK2_K = enum.auto()
    WAIT_GO_G = enum.auto()
    WAIT_GO_O = enum.auto()
    WAIT_GO_SPACE = enum.auto()


_TRANSITIONS = {
    CommandState.WAIT_ACK_A: (ord("A"), CommandState.WAIT_ACK_C),
    CommandState.WAIT_ACK_C: (ord("C"), CommandState.WAIT_ACK_K),
    CommandState.WAIT_ACK_K: (ord("K"), CommandState.WAIT_ACK2_A),
    CommandState.WAIT_ACK2_A: (ord("A"), CommandState.WAIT_ACK2_C),
    CommandState.WAIT_ACK2_C: (ord("C"), CommandState.WAIT_ACK2_K),
    CommandState.WAIT_ACK2_K: (ord("K"), CommandState.WAIT_GO_G),
    CommandState.WAIT_GO_G: (ord("G"), CommandState.WAIT_GO_O),
    CommandState.WAIT_GO_O: (ord("O"), CommandState.WAIT_GO_SPACE),
    CommandState.WAIT_GO_SPACE: (ord(" "), CommandState.WAIT_GO_SPACE),
}

_LINE_ENDINGS = (ord("\n"), ord("\r"))


class HdlcCommandMode:
    """Drives the text handshake on a transport, one read byte at a time."""

    def __init__(
        self,
        transport: HdlcTransport,
        max_attempts: int,
        *,
        syn: bytes = b"SYN",
        rdy: bytes = b"RDY",
    ) -> None:
        self._transport = transport
        self.max_attempts = max_attempts
        self.attempts = 0
        self.state = CommandState.INIT
        self._syn = bytes(syn)
        self._rdy = bytes(rdy)

    def process(self) -> None:
        """Consume every byte the transport has available."""
        while self._transport.available() > 0:
            byte = self._transport.read()
            step = _TRANSITIONS.get(self.state)
            if step is None:
                self._restart(byte)
                continue
            expected, next_state = step
            if byte != expected:
                continue
            if self.state is CommandState.WAIT_ACK_K:
                self.send_syn()
            elif self.state is CommandState.WAIT_ACK2_K:
                self._transport.write(self._rdy)
            self.state = next_state

    def send_syn(self) -> None:
        """Write the SYN message to the transport."""
        self._transport.write(self._syn)

    def _restart(self, byte: int) -> None:
        if byte in _LINE_ENDINGS:
            return
        self.state = CommandState.WAIT_ACK_A
        self.attempts += 1
        if self.attempts >= self.max_attempts:
            self.attempts = 0