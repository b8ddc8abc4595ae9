import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import A, B, C, EndOfStream

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import ApplyProcess, Worker
from .to_receiver import to_receiver


@dataclass
class Zip:
    f: tp.Callable[[tp.Any, tp.Any], tp.Any]

    def __call__(self, worker: Worker):
        left, right = worker.stage_params.input_queues

        while True:
            try:
                a = worker.get(left)
                b = worker.get(right)
            except EndOfStream:
                return

            worker.send(worker.output_queue, self.f(a, b))


@dataclass
class Unzip(ApplyProcess):
    split: tp.Callable[[tp.Any], tp.Tuple[tp.Any, tp.Any]]

    def apply(self, worker: Worker, elem: tp.Any):
        left, right = worker.stage_params.output_queues
        a, b = self.split(elem)

        worker.send(left, a)
        worker.send(right, b)


def zip(
    f: tp.Callable[[A, B], C],
    left: tp.Union[Receiver[A], Channel[A], tp.Iterable[A]],
    right: tp.Union[Receiver[B], Channel[B], tp.Iterable[B]],
    maxsize: int = 0,
    done: DoneLike = None,
) -> Receiver[C]:
    """
    Combines two stages pairwise: for each pair it reads one element from `left`, then one from `right` and forwards `f(a, b)`. The output closes as soon as either side is exhausted.

    ```python
    import flowz as fz

    stage = fz.zip(lambda n, s: f"{n}{s}", [1, 2, 3, 4], ["a", "b", "c"])
    fz.collect(stage) # ["1a", "2b", "3c"]
    ```

    !!! note
        The longer side is not drained, an element already read from `left` when `right` turns out to be exhausted is discarded.

    Arguments:
        f: A function with signature `f(a, b) -> c`.
        left: A Receiver, Channel or Iterable.
        right: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        A `Receiver` over the combined elements.
    """

    done = to_done(done)
    dependencies = [to_receiver(left, done=done), to_receiver(right, done=done)]

    [output] = Stage(
        process_fn=Zip(f),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=dependencies,
        done=done,
    ).start()

    return output


def unzip(
    split: tp.Callable[[C], tp.Tuple[A, B]],
    stage: tp.Union[
        Receiver[C], Channel[C], tp.Iterable[C], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[
    tp.Tuple[Receiver[A], Receiver[B]],
    flowz_utils.Partial[tp.Tuple[Receiver[A], Receiver[B]]],
]:
    """
    Splits every element with `split(x) -> (a, b)` and sends `a` to the left output and then `b` to the right output.

    ```python
    import flowz as fz

    numbers, letters = fz.unzip(lambda x: x, [(1, "a"), (2, "b")])
    ```

    !!! note
        Both outputs have to be consumed concurrently.

    Arguments:
        split: A function with signature `split(x) -> (a, b)`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of each output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `(left, right)` tuple of Receivers, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: unzip(split, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    left, right = Stage(
        process_fn=Unzip(split),
        workers=1,
        maxsize=maxsize,
        total_outputs=2,
        dependencies=[stage],
        done=done,
    ).start()

    return left, right
