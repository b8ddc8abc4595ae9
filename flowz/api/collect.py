import logging
import typing as tp
from queue import Empty

from flowz import utils as flowz_utils
from flowz.utils import A, Cancelled, EndOfStream

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from .to_receiver import to_receiver

logger = logging.getLogger(__name__)


def collect(
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    done: DoneLike = None,
) -> tp.Union[tp.List[A], flowz_utils.Partial[tp.List[A]]]:
    """
    Reads `stage` until its end and returns every element in order.

    ```python
    import flowz as fz

    fz.collect(fz.map(lambda x: x * 2, [1, 2, 3])) # [2, 4, 6]
    ```

    If `done` is given and gets closed before the end, the elements received so far are returned.

    Arguments:
        stage: A Receiver, Channel or Iterable.
        done: A `Done` signal (or a list of them) that stops reading when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `list`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(lambda stage: collect(stage, done=done))

    done = to_done(done)
    stage = to_receiver(stage, done=done)
    elems = []

    try:
        for elem in stage.to_iterable(done=done):
            elems.append(elem)
    except Cancelled:
        if done is None or not done.closed:
            raise

    return elems


def drop_all(
    stage: tp.Union[Receiver[A], Channel[A], tp.Iterable[A]],
    use_thread: bool = False,
) -> None:
    """
    Reads `stage` until its end discarding every element. Use it to release upstream stages whose output nobody needs anymore.

    Arguments:
        stage: A Receiver, Channel or Iterable.
        use_thread: If `True` the stage is drained on a background thread and this function returns immediately. An exception raised by `stage` is then logged at DEBUG level instead of being raised.
    """

    def dropper():
        for _ in stage:
            pass

    if use_thread:
        flowz_utils.start_workers(_logged, args=(dropper,))
        return

    dropper()


def take_buffer(stage: tp.Union[Receiver[A], Channel[A]]) -> tp.List[A]:
    """
    Returns the elements currently buffered in `stage` without waiting for more.
    """
    elems = []

    for _ in range(stage.qsize()):
        try:
            elems.append(stage.get(block=False))
        except (Empty, EndOfStream):
            break

    return elems


def drop_buffer(
    stage: tp.Union[Receiver[A], Channel[A]], use_thread: bool = False
) -> None:
    """
    Discards the elements currently buffered in `stage` without waiting for more.
    """

    def dropper():
        take_buffer(stage)

    if use_thread:
        flowz_utils.start_workers(_logged, args=(dropper,))
        return

    dropper()


def buffer(
    size: int,
    stage: tp.Union[Receiver[A], Channel[A]],
    done: DoneLike = None,
) -> tp.Tuple[tp.List[A], bool]:
    """
    Reads up to `size` elements from `stage`, waiting for them as needed.

    ```python
    import flowz as fz

    stage = fz.generate(range(5))

    fz.buffer(3, stage) # ([0, 1, 2], True)
    fz.buffer(3, stage) # ([3, 4], False)
    ```

    Arguments:
        size: Maximum number of elements to read.
        stage: A Receiver or Channel.
        done: A `Done` signal (or a list of them) that stops reading when closed.

    Returns:
        The elements read and whether `stage` may still have more, which is `False` only once its end was reached.
    """
    done = to_done(done)
    elems: tp.List[A] = []

    while len(elems) < size:
        try:
            elems.append(stage.get(done=done))
        except EndOfStream:
            return elems, False
        except Cancelled:
            if done is None or not done.closed:
                raise

            break

    return elems, True


def _logged(f: tp.Callable[[], None]):
    # nobody is left to re-raise to on a background thread
    try:
        f()
    except BaseException:
        logger.debug("background drain failed", exc_info=True)
