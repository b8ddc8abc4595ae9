import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import A, B

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import ApplyProcess, Worker
from .to_receiver import to_receiver


class MapFn(tp.Protocol):
    def __call__(self, elem: A) -> B:
        ...


class PeekFn(tp.Protocol):
    def __call__(self, elem: A) -> None:
        ...


@dataclass
class Map(ApplyProcess):
    f: MapFn

    def apply(self, worker: Worker, elem: tp.Any):
        y = self.f(elem)
        worker.send(worker.output_queue, y)


@dataclass
class Peek(ApplyProcess):
    f: PeekFn

    def apply(self, worker: Worker, elem: tp.Any):
        self.f(elem)
        worker.send(worker.output_queue, elem)


@tp.overload
def map(
    f: MapFn,
    stage: tp.Union[Receiver[A], Channel[A], tp.Iterable[A]],
    maxsize: int = 0,
    done: DoneLike = None,
) -> Receiver[B]:
    ...


@tp.overload
def map(
    f: MapFn,
    maxsize: int = 0,
    done: DoneLike = None,
) -> flowz_utils.Partial[Receiver[B]]:
    ...


def map(
    f: MapFn,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[B], flowz_utils.Partial[Receiver[B]]]:
    """
    Creates a stage that maps a function `f` over the data. It behaves like python's built-in `map` but runs on its own thread and hands its results over through a channel.

    ```python
    import flowz as fz

    stage = fz.generate([1, 2, 3, 4])
    stage = fz.map(str, stage)

    fz.collect(stage) # ["1", "2", "3", "4"]
    ```

    Order is preserved. If `done` is closed while a result is waiting to be handed over, that result is discarded.

    Arguments:
        f: A function with signature `f(x) -> y`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel, `0` (default) means every element is handed over directly to a reader.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: map(f, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Map(f),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output


def peek(
    f: PeekFn,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that calls `f` on every element and then forwards the element itself. No copy is made, if `f` mutates the element downstream sees the mutation.

    ```python
    import flowz as fz

    stage = fz.peek(print, [1, 2, 3])
    fz.collect(stage) # prints 1, 2, 3 and returns [1, 2, 3]
    ```

    Arguments:
        f: A function with signature `f(x) -> None`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: peek(f, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Peek(f),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output
