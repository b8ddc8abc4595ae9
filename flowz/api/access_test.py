import time
import typing as tp

import pytest

import flowz as fz

T = tp.TypeVar("T")


def test_write_sync():
    channel = fz.Channel(maxsize=1)
    write = fz.write_to(channel)

    write(1)

    assert channel.get() == 1


def test_write_async():
    channel = fz.Channel()
    write = fz.write_to(channel, fz.WriteMode.ASYNC)

    # returns right away even though nobody is reading
    write(1)

    assert channel.get(timeout=1) == 1


def test_write_if_free():
    channel = fz.Channel(maxsize=1)
    write = fz.write_to(channel.writer(), fz.WriteMode.IF_FREE)

    write(1)
    write(2)

    assert channel.get() == 1
    assert channel.qsize() == 0


def test_write_if_free_rendezvous_without_reader():
    channel = fz.Channel()
    write = fz.write_to(channel, fz.WriteMode.IF_FREE)

    write(1)

    assert channel.qsize() == 0

    channel.close()

    assert list(channel) == []


def test_write_to_closed_channel():
    channel = fz.Channel(maxsize=1)
    channel.close()

    with pytest.raises(fz.ChannelClosedError):
        fz.write_to(channel)(1)


def test_read_wait():
    channel = fz.Channel(maxsize=2)
    read = fz.read_from(channel)

    channel.put(1)
    channel.close()

    assert read() == (1, True)
    assert read() == (None, False)


def test_read_if_waiting():
    channel = fz.Channel(maxsize=1)
    read = fz.read_from(channel.reader(), fz.ReadMode.IF_WAITING)

    assert read() == (None, False)

    channel.put(1)

    assert read() == (1, True)


def test_read_wait_blocks_until_written():
    channel = fz.Channel()
    read = fz.read_from(channel)

    fz.write_to(channel, fz.WriteMode.ASYNC)(3)

    start = time.time()

    assert read() == (3, True)
    assert time.time() - start < 1


def test_bad_modes():
    channel = fz.Channel()

    with pytest.raises(ValueError):
        fz.write_to(channel, "sync")

    with pytest.raises(ValueError):
        fz.read_from(channel, "wait")
