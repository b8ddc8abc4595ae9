import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import A, EndOfStream

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import ApplyProcess, Worker
from .to_receiver import to_receiver


class FilterFn(tp.Protocol):
    def __call__(self, elem: A) -> bool:
        ...


class EqualFn(tp.Protocol):
    def __call__(self, a: A, b: A) -> bool:
        ...


@dataclass
class Filter(ApplyProcess):
    f: FilterFn

    def apply(self, worker: Worker, elem: tp.Any):
        if self.f(elem):
            worker.send(worker.output_queue, elem)


@dataclass
class Compact:
    equal: EqualFn

    def __call__(self, worker: Worker):
        try:
            last = worker.get(worker.input_queue)
        except EndOfStream:
            return

        worker.send(worker.output_queue, last)

        for elem in worker.receive(worker.input_queue):
            if self.equal(last, elem):
                continue

            last = elem
            worker.send(worker.output_queue, elem)


@tp.overload
def filter(
    f: FilterFn,
    stage: tp.Union[Receiver[A], Channel[A], tp.Iterable[A]],
    maxsize: int = 0,
    done: DoneLike = None,
) -> Receiver[A]:
    ...


@tp.overload
def filter(
    f: FilterFn,
    maxsize: int = 0,
    done: DoneLike = None,
) -> flowz_utils.Partial[Receiver[A]]:
    ...


def filter(
    f: FilterFn,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that forwards only the elements for which `f` returns `True`. Its intended to behave like python's built-in `filter` function.

    ```python
    import flowz as fz

    stage = fz.generate([1, 2, 3, 4, 5, 6, 7, 8])
    stage = fz.filter(lambda x: x % 2 == 0, stage)

    fz.collect(stage) # [2, 4, 6, 8]
    ```

    Arguments:
        f: A function with signature `f(x) -> bool`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel, `0` (default) means every element is handed over directly to a reader.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: filter(f, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Filter(f),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output


def compact(
    equal: EqualFn,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that drops consecutive duplicates. The first element is always forwarded, after that an element is forwarded only if `equal(last_forwarded, elem)` is `False`.

    ```python
    import operator
    import flowz as fz

    stage = fz.compact(operator.eq, [1, 1, 2, 3, 3, 3, 1])
    fz.collect(stage) # [1, 2, 3, 1]
    ```

    Arguments:
        equal: A function with signature `equal(a, b) -> bool`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: compact(equal, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Compact(equal),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output
