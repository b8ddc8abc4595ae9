import threading
import time
import typing as tp
from collections import deque
from queue import Empty, Full

from .done import Done
from .utils import T, Cancelled, ChannelClosedError, EndOfStream


class _Slot(tp.Generic[T]):
    __slots__ = ("value", "taken", "done")

    def __init__(self, value: T, done: tp.Optional[Done] = None):
        self.value = value
        self.taken = False
        self.done = done

    def withdrawn(self) -> bool:
        return self.done is not None and self.done.closed


class Channel(tp.Generic[T], tp.Iterable[T]):
    """
    A FIFO hand-off between threads with a closed state.

    Arguments:
        maxsize: Capacity of the buffer. `0` (default) makes every `put` wait until a receiver took the element, `None` makes the buffer unbounded.
    """

    def __init__(self, maxsize: tp.Optional[int] = 0):
        if maxsize is not None and maxsize < 0:
            raise ValueError(f"maxsize must be >= 0 or None, got {maxsize}")

        self.maxsize = maxsize
        self._buffer: tp.Deque[_Slot[T]] = deque()
        self._condition = threading.Condition(threading.Lock())
        self._closed = False
        self._exception: tp.Optional[BaseException] = None
        self._waiting_receivers = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        with self._condition:
            if self.maxsize == 0:
                return 0

            return len(self._buffer)

    def empty(self) -> bool:
        return self.qsize() == 0

    def full(self) -> bool:
        with self._condition:
            if self.maxsize is None:
                return False

            return len(self._buffer) >= self.maxsize

    def put(
        self,
        x: T,
        block: bool = True,
        timeout: tp.Optional[float] = None,
        done: tp.Optional[Done] = None,
    ):
        deadline = _deadline(block, timeout)

        with self._condition, _Listening(done, self._condition):
            while True:
                if done is not None and done.closed:
                    raise Cancelled()

                if self._closed:
                    raise ChannelClosedError("put on a closed channel")

                if self.maxsize == 0:
                    return self._hand_off(x, block, deadline, done)

                if self.maxsize is None or len(self._buffer) < self.maxsize:
                    self._buffer.append(_Slot(x))
                    self._condition.notify_all()
                    return

                if not self._wait(block, deadline):
                    raise Full()

    def _hand_off(
        self,
        x: T,
        block: bool,
        deadline: tp.Optional[float],
        done: tp.Optional[Done],
    ):
        if not block and self._waiting_receivers <= len(self._buffer):
            raise Full()

        slot = _Slot(x, done)
        self._buffer.append(slot)
        self._condition.notify_all()

        while not slot.taken:
            if slot.withdrawn():
                self._discard(slot)
                raise Cancelled()

            if not block:
                # only receivers already waiting may take it
                if self._buffer.index(slot) >= self._waiting_receivers:
                    self._discard(slot)
                    raise Full()

                self._condition.wait()
                continue

            if not self._wait(block, deadline):
                if slot.taken:
                    return

                self._discard(slot)
                raise Full()

    def get(
        self,
        block: bool = True,
        timeout: tp.Optional[float] = None,
        done: tp.Optional[Done] = None,
    ) -> T:
        deadline = _deadline(block, timeout)

        with self._condition, _Listening(done, self._condition):
            while True:
                if done is not None and done.closed:
                    self._condition.notify_all()
                    raise Cancelled()

                while self._buffer:
                    slot = self._buffer.popleft()

                    # the sender was cancelled while handing it over
                    if slot.withdrawn():
                        continue

                    slot.taken = True
                    self._condition.notify_all()
                    return slot.value

                if self._closed:
                    if self._exception is not None:
                        raise self._exception

                    raise EndOfStream()

                self._waiting_receivers += 1
                try:
                    waited = self._wait(block, deadline)
                finally:
                    self._waiting_receivers -= 1

                if not waited:
                    self._condition.notify_all()
                    raise Empty()

    def close(self, exception: tp.Optional[BaseException] = None):
        """
        Closes the channel. Buffered elements remain readable, after them readers get `EndOfStream` or, if given, `exception`.
        """
        with self._condition:
            if self._closed:
                raise ChannelClosedError("channel already closed")

            self._closed = True
            self._exception = exception
            self._condition.notify_all()

    def to_iterable(self, done: tp.Optional[Done] = None) -> tp.Iterable[T]:
        while True:
            try:
                x = self.get(done=done)
            except EndOfStream:
                return

            yield x

    def __iter__(self) -> tp.Iterator[T]:
        return iter(self.to_iterable())

    def __or__(self, f):
        return f(self)

    def reader(self) -> "Receiver[T]":
        return Receiver(self)

    def writer(self) -> "Sender[T]":
        return Sender(self)

    def _discard(self, slot: _Slot[T]):
        try:
            self._buffer.remove(slot)
        except ValueError:
            pass

    def _wait(self, block: bool, deadline: tp.Optional[float]) -> bool:
        if not block:
            return False

        if deadline is None:
            self._condition.wait()
            return True

        remaining = deadline - time.monotonic()

        if remaining <= 0:
            return False

        self._condition.wait(remaining)
        return True

    def __repr__(self):
        return f"Channel(maxsize={self.maxsize}, closed={self._closed})"


class Receiver(tp.Generic[T], tp.Iterable[T]):
    """
    Receive-only view of a `Channel`. It does not own the channel and cannot close it.
    """

    def __init__(self, channel: Channel[T]):
        self._channel = channel

    @property
    def maxsize(self) -> tp.Optional[int]:
        return self._channel.maxsize

    @property
    def closed(self) -> bool:
        return self._channel.closed

    def qsize(self) -> int:
        return self._channel.qsize()

    def empty(self) -> bool:
        return self._channel.empty()

    def get(
        self,
        block: bool = True,
        timeout: tp.Optional[float] = None,
        done: tp.Optional[Done] = None,
    ) -> T:
        return self._channel.get(block=block, timeout=timeout, done=done)

    def to_iterable(self, done: tp.Optional[Done] = None) -> tp.Iterable[T]:
        return self._channel.to_iterable(done=done)

    def __iter__(self) -> tp.Iterator[T]:
        return iter(self._channel)

    def __or__(self, f):
        return f(self)

    def __repr__(self):
        return f"Receiver({self._channel!r})"


class Sender(tp.Generic[T]):
    """
    Send-only view of a `Channel`.
    """

    def __init__(self, channel: Channel[T]):
        self._channel = channel

    @property
    def maxsize(self) -> tp.Optional[int]:
        return self._channel.maxsize

    @property
    def closed(self) -> bool:
        return self._channel.closed

    def qsize(self) -> int:
        return self._channel.qsize()

    def full(self) -> bool:
        return self._channel.full()

    def put(
        self,
        x: T,
        block: bool = True,
        timeout: tp.Optional[float] = None,
        done: tp.Optional[Done] = None,
    ):
        self._channel.put(x, block=block, timeout=timeout, done=done)

    def close(self, exception: tp.Optional[BaseException] = None):
        self._channel.close(exception)

    def __repr__(self):
        return f"Sender({self._channel!r})"


class OutputQueues(tp.List[Channel[T]], tp.Generic[T]):
    def put(self, x: T, done: tp.Optional[Done] = None):
        for queue in self:
            queue.put(x, done=done)

    def close(self, exception: tp.Optional[BaseException] = None):
        for queue in self:
            queue.close(exception)

    def readers(self) -> tp.List[Receiver[T]]:
        return readers(*self)


def readers(*channels: tp.Union[Channel[T], Receiver[T]]) -> tp.List[Receiver[T]]:
    """
    Narrows channels to receive-only views.
    """
    return [
        channel if isinstance(channel, Receiver) else Receiver(channel)
        for channel in channels
    ]


def writers(*channels: tp.Union[Channel[T], Sender[T]]) -> tp.List[Sender[T]]:
    """
    Narrows channels to send-only views.
    """
    return [
        channel if isinstance(channel, Sender) else Sender(channel)
        for channel in channels
    ]


class _Listening:
    """
    Registers a channel's condition on a `Done` for the duration of one operation so that closing the signal wakes the operation up.
    """

    def __init__(self, done: tp.Optional[Done], condition: threading.Condition):
        self.done = done
        self.condition = condition

    def __enter__(self):
        if self.done is not None:
            self.done.add_listener(self.condition)

    def __exit__(self, *args):
        if self.done is not None:
            self.done.remove_listener(self.condition)


def _deadline(block: bool, timeout: tp.Optional[float]) -> tp.Optional[float]:
    if not block or timeout is None:
        return None

    if timeout < 0:
        raise ValueError("'timeout' must be a non-negative number")

    return time.monotonic() + timeout
