import enum
import typing as tp
from queue import Empty, Full

from flowz import utils as flowz_utils
from flowz.utils import A, EndOfStream

from ..channel import Channel, Receiver, Sender


class WriteMode(enum.Enum):
    SYNC = "sync"
    ASYNC = "async"
    IF_FREE = "if_free"


class ReadMode(enum.Enum):
    WAIT = "wait"
    IF_WAITING = "if_waiting"


def write_to(
    channel: tp.Union[Channel[A], Sender[A]], mode: WriteMode = WriteMode.SYNC
) -> tp.Callable[[A], None]:
    """
    Returns a function that writes its argument to `channel`.

    Arguments:
        channel: A Channel or Sender.
        mode: `WriteMode.SYNC` blocks until the element is accepted, `WriteMode.ASYNC` writes from a background thread and returns immediately, `WriteMode.IF_FREE` writes only if the channel can accept the element right away and drops it otherwise. On a rendezvous channel that means a receiver was already waiting, if it gives up before taking the element the element is dropped.
    """

    if not isinstance(mode, WriteMode):
        raise ValueError(f"unknown write mode {mode!r}")

    def write(x: A):
        if mode is WriteMode.SYNC:
            channel.put(x)
        elif mode is WriteMode.ASYNC:
            flowz_utils.start_workers(channel.put, args=(x,))
        else:
            try:
                channel.put(x, block=False)
            except Full:
                pass

    return write


def read_from(
    channel: tp.Union[Channel[A], Receiver[A]], mode: ReadMode = ReadMode.WAIT
) -> tp.Callable[[], tp.Tuple[tp.Optional[A], bool]]:
    """
    Returns a function that reads one element from `channel` and returns it as a `(value, ok)` pair. `ok` is `False` when nothing was read, in which case `value` is `None`.

    Arguments:
        channel: A Channel or Receiver.
        mode: `ReadMode.WAIT` blocks until an element arrives or the channel ends, `ReadMode.IF_WAITING` only takes an element that is available right away.
    """

    if not isinstance(mode, ReadMode):
        raise ValueError(f"unknown read mode {mode!r}")

    def read() -> tp.Tuple[tp.Optional[A], bool]:
        try:
            return channel.get(block=mode is ReadMode.WAIT), True
        except (Empty, EndOfStream):
            return None, False

    return read
