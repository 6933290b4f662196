import threading

import pytest

from enableit.circular_buffer import CircularBuffer


def test_produce_limited_by_capacity():
    buf = CircularBuffer()
    buf.resize(4, 2, 1)
    assert buf.capacity == 8
    assert buf.produce(bytes(range(10))) == 8
    assert len(buf) == 8
    assert buf.produce(b"x") == 0


def test_consume_preserves_order_and_counters():
    buf = CircularBuffer()
    buf.resize(4, 2, 1)
    buf.produce(b"abcdefgh")
    assert buf.consume(5) == b"abcde"
    assert len(buf) == 3
    buf.produce(b"ijk")
    assert buf.consume(100) == b"fghijk"
    assert buf.bytes_in == 11
    assert buf.bytes_out == 11
    assert len(buf) == 0


def test_consume_empty_without_timeout():
    buf = CircularBuffer()
    buf.resize(8, 1, 1)
    assert buf.consume(4) == b""


def test_unallocated_buffer_is_inert():
    buf = CircularBuffer()
    buf.resize(0, 4, 1)
    assert buf.produce(b"abc") == 0
    assert buf.consume(3, 10) == b""
    assert len(buf) == 0


def test_resize_drops_contents():
    buf = CircularBuffer()
    buf.resize(8, 1, 1)
    buf.produce(b"abc")
    buf.resize(16, 1, 1)
    assert len(buf) == 0
    assert buf.capacity == 16


def test_trigger_above_capacity_rejected():
    buf = CircularBuffer()
    with pytest.raises(ValueError):
        buf.resize(2, 2, 5)


def test_negative_size_rejected():
    buf = CircularBuffer()
    buf.resize(2, 2, 1)
    with pytest.raises(ValueError):
        buf.consume(-1)


def test_consumer_wakes_when_data_arrives():
    buf = CircularBuffer()
    buf.resize(16, 1, 1)
    timer = threading.Timer(0.05, buf.produce, args=(b"hello",))
    timer.start()
    try:
        assert buf.consume(16, 5000) == b"hello"
    finally:
        timer.join()


def test_timeout_returns_data_below_trigger():
    buf = CircularBuffer()
    buf.resize(16, 1, 4)
    timer = threading.Timer(0.01, buf.produce, args=(b"ab",))
    timer.start()
    try:
        assert buf.consume(8, 300) == b"ab"
    finally:
        timer.join()


def test_dump_reports_counters():
    buf = CircularBuffer()
    buf.resize(8, 1, 1)
    buf.produce(b"abc")
    buf.consume(1)
    assert buf.dump() == "Buffer: avail(2), datain(3), dataout(1)"