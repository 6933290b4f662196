"""Console multiplexer that routes byte I/O to the best connected transport.

Transports are registered with a priority. Among the connected ones the one
with the highest priority is active; when none is connected the console falls
back to a default transport, normally the serial port.
"""

from __future__ import annotations

import abc
import enum
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

log = logging.getLogger(__name__)

_INT_FIELD = 15


class ConsolePriority(enum.IntEnum):
    """Transport priority; a higher value wins when several are connected."""

    SERIAL = 1
    TELNET = 2


class TransportState(enum.Enum):
    """Connection state the console tracks for a transport."""

    CONNECTED = enum.auto()
    DISCONNECTED = enum.auto()


class ConsoleTransport(abc.ABC):
    """A byte stream the console can read from and write to.

    Transports that must be serviced regularly set ``needs_poll`` to True and
    define ``poll()``.
    """

    needs_poll: ClassVar[bool] = False

    def __init__(self, name: str) -> None:
        self.name = name
        self.wrapper: ConsoleWrapper | None = None

    def attach(self, wrapper: ConsoleWrapper) -> None:
        """Remember the console that connection events are reported to."""
        self.wrapper = wrapper

    def notify_connect(self) -> None:
        """Tell the attached console that this transport connected."""
        if self.wrapper is not None:
            self.wrapper.on_transport_connected(self)

    def notify_disconnect(self) -> None:
        """Tell the attached console that this transport disconnected."""
        if self.wrapper is not None:
            self.wrapper.on_transport_disconnected(self)

    @abc.abstractmethod
    def is_connected(self) -> bool:
        """Whether a peer is currently connected."""

    @abc.abstractmethod
    def available(self) -> int:
        """Number of bytes waiting to be read."""

    @abc.abstractmethod
    def read(self) -> int:
        """Next byte, or -1 if there is none."""

    @abc.abstractmethod
    def peek(self) -> int:
        """Next byte without consuming it, or -1 if there is none."""

    @abc.abstractmethod
    def write(self, byte: int) -> int:
        """Send one byte; returns the number of bytes written."""


def _unsigned(value: Any) -> int:
    return int(value) & 0xFFFFFFFF


_CONVERSIONS: dict[str, Callable[[Any], str]] = {
    "s": str,
    "d": lambda v: str(int(v))[:_INT_FIELD],
    "i": lambda v: str(int(v))[:_INT_FIELD],
    "u": lambda v: str(_unsigned(v)),
    "x": lambda v: format(_unsigned(v), "x"),
    "f": lambda v: f"{float(v):f}"[:_INT_FIELD],
}

_SPEC = re.compile(r"%(.|$)", re.DOTALL)


def format_message(fmt: str, *args: Any) -> str:
    """Format with the small printf subset the console supports.

    ``%s``, ``%d``, ``%i``, ``%u``, ``%x`` and ``%f`` take an argument each,
    ``%%`` gives a percent sign and any other conversion is dropped.
    """
    remaining = iter(args)
    missing = object()

    def replace(match: re.Match[str]) -> str:
        spec = match.group(1)
        if spec == "%":
            return "%"
        convert = _CONVERSIONS.get(spec)
        if convert is None:
            return ""
        value = next(remaining, missing)
        if value is missing:
            raise TypeError(f"not enough arguments for format {fmt!r}")
        return convert(value)

    return _SPEC.sub(replace, fmt)


@dataclass
class _TransportEntry:
    transport: ConsoleTransport
    priority: int
    state: TransportState


class ConsoleWrapper:
    """The console: forwards I/O to the active transport."""

    def __init__(
        self, fallback: ConsoleTransport | None = None, debug_enabled: bool = False
    ) -> None:
        self.fallback = fallback
        self.debug_enabled = debug_enabled
        self._entries: list[_TransportEntry] = []
        self._active: ConsoleTransport | None = fallback

    @property
    def active_transport(self) -> ConsoleTransport | None:
        return self._active

    @property
    def transports(self) -> list[ConsoleTransport]:
        return [entry.transport for entry in self._entries]

    def register_transport(self, transport: ConsoleTransport, priority: int) -> None:
        """Add a transport and reselect the active one."""
        log.info("Registering transport %s with priority %d", transport.name, priority)
        state = (
            TransportState.CONNECTED if transport.is_connected() else TransportState.DISCONNECTED
        )
        self._entries.append(_TransportEntry(transport, int(priority), state))
        transport.attach(self)
        self.select_active_transport()

    def unregister_transport(self, transport: ConsoleTransport) -> None:
        """Remove a transport and reselect the active one."""
        for index, entry in enumerate(self._entries):
            if entry.transport is transport:
                log.info("Unregistering transport %s", transport.name)
                del self._entries[index]
                break
        self.select_active_transport()

    def _set_state(self, transport: ConsoleTransport, state: TransportState) -> None:
        for entry in self._entries:
            if entry.transport is transport:
                log.info("Transport %s %s", transport.name, state.name.lower())
                entry.state = state
                break
        self.select_active_transport()

    def on_transport_connected(self, transport: ConsoleTransport) -> None:
        """Mark a transport connected and reselect."""
        self._set_state(transport, TransportState.CONNECTED)

    def on_transport_disconnected(self, transport: ConsoleTransport) -> None:
        """Mark a transport disconnected and reselect."""
        self._set_state(transport, TransportState.DISCONNECTED)

    def select_active_transport(self) -> ConsoleTransport | None:
        """Activate the connected transport with the highest priority.

        Ties go to the one registered first; with none connected the
        fallback becomes active.
        """
        best: ConsoleTransport | None = None
        best_priority = 0
        for entry in self._entries:
            if entry.state is TransportState.CONNECTED and entry.priority > best_priority:
                best = entry.transport
                best_priority = entry.priority
        if best is None:
            log.info("No active transport, using fallback")
            best = self.fallback
        else:
            log.info("Selected transport %s with priority %d", best.name, best_priority)
        self._active = best
        return best

    def poll(self) -> None:
        """Service every registered transport that needs polling."""
        for entry in self._entries:
            if entry.transport.needs_poll:
                entry.transport.poll()  # type: ignore[attr-defined]

    def write(self, byte: int) -> int:
        """Write one byte to the active transport."""
        if self._active is None:
            return 0
        return self._active.write(byte)

    def read(self) -> int:
        """Read one byte from the active transport, -1 if there is none."""
        if self._active is None:
            return -1
        return self._active.read()

    def available(self) -> int:
        """Bytes waiting on the active transport."""
        if self._active is None:
            return 0
        return self._active.available()

    def peek(self) -> int:
        """Next byte on the active transport without consuming it."""
        if self._active is None:
            return -1
        return self._active.peek()

    def echo(self, byte: int) -> None:
        """Send a received byte back to the active transport."""
        if self._active is not None:
            self._active.write(byte)

    def debug(
        self,
        dbg: bool,
        prefix: str | None,
        addlf: bool,
        function: str | None,
        fmt: str,
        *args: Any,
    ) -> None:
        """Write a formatted message.

        Debug messages (``dbg``) are dropped unless debugging is enabled. With
        ``addlf`` the message is preceded by ``prefix:`` and ``function: ``
        and followed by a newline.
        """
        if dbg and not self.debug_enabled:
            return
        parts = []
        if prefix and addlf:
            parts.append(f"{prefix}:")
        if function and addlf:
            parts.append(f"{function}: ")
        parts.append(format_message(fmt, *args))
        if addlf:
            parts.append("\n")
        for byte in "".join(parts).encode("utf-8"):
            self.write(byte)