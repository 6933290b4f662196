"""Thread-safe byte stream buffer with a fixed capacity and trigger level."""

from __future__ import annotations

import logging
import threading

log = logging.getLogger(__name__)


class CircularBuffer:
    """Bounded byte FIFO: producers never block, consumers may wait."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._data = bytearray()
        self._capacity = 0
        self._trigger = 1
        self.item_len = 0
        self.bytes_in = 0
        self.bytes_out = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def resize(self, count: int, item_len: int, trigger: int = 1) -> None:
        """Reallocate to hold ``count`` items of ``item_len`` bytes, dropping contents."""
        capacity = count * item_len
        trigger = max(trigger, 1)
        if capacity > 0 and trigger > capacity:
            raise ValueError(f"trigger level {trigger} exceeds capacity {capacity}")
        with self._cond:
            self.item_len = item_len
            self._capacity = max(capacity, 0)
            self._trigger = trigger
            self._data = bytearray()
            if capacity > 0:
                log.debug("Allocated buffer, size[%d]", capacity)
            self._cond.notify_all()

    def produce(self, data: bytes) -> int:
        """Append as much of ``data`` as fits; returns the number of bytes stored."""
        with self._cond:
            if self._capacity <= 0:
                return 0
            room = self._capacity - len(self._data)
            chunk = bytes(data)[:room]
            self._data.extend(chunk)
            self.bytes_in += len(chunk)
            if len(self._data) >= self._trigger:
                self._cond.notify_all()
            return len(chunk)

    def consume(self, size: int, timeout: float = 0) -> bytes:
        """Take up to ``size`` bytes, waiting up to ``timeout`` ms if empty."""
        if size < 0:
            raise ValueError("size must not be negative")
        with self._cond:
            if self._capacity <= 0:
                return b""
            if not self._data and timeout > 0:
                self._cond.wait_for(
                    lambda: len(self._data) >= self._trigger, timeout=timeout / 1000
                )
            chunk = bytes(self._data[:size])
            del self._data[: len(chunk)]
            self.bytes_out += len(chunk)
            return chunk

    def __len__(self) -> int:
        with self._cond:
            return len(self._data)

    def dump(self) -> str:
        """Describe the fill level and counters, and log the description."""
        message = f"Buffer: avail({len(self)}), datain({self.bytes_in}), dataout({self.bytes_out})"
        log.debug(message)
        return message