import typing as tp
from dataclasses import dataclass

from flowz import utils as flowz_utils
from flowz.utils import A

from ..channel import Channel, Receiver
from ..done import DoneLike, to_done
from ..stage import Stage
from ..worker import Worker
from .to_receiver import to_receiver


@dataclass
class DropWhile:
    f: tp.Callable[[tp.Any], bool]

    def __call__(self, worker: Worker):
        dropping = True

        for elem in worker.receive(worker.input_queue):
            if dropping and self.f(elem):
                continue

            dropping = False
            worker.send(worker.output_queue, elem)


@dataclass
class Drop:
    n: int

    def __call__(self, worker: Worker):
        remaining = self.n

        for elem in worker.receive(worker.input_queue):
            if remaining > 0:
                remaining -= 1
                continue

            worker.send(worker.output_queue, elem)


def drop_while(
    f: tp.Callable[[A], bool],
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that discards elements while `f` returns `True`. From the first element for which `f` returns `False` on, everything is forwarded.

    ```python
    import flowz as fz

    stage = fz.drop_while(lambda x: x < 3, [1, 2, 3, 4, 1])
    fz.collect(stage) # [3, 4, 1]
    ```

    Arguments:
        f: A function with signature `f(x) -> bool`.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: drop_while(f, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=DropWhile(f),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output


def drop(
    n: int,
    stage: tp.Union[
        Receiver[A], Channel[A], tp.Iterable[A], flowz_utils.Undefined
    ] = flowz_utils.UNDEFINED,
    maxsize: int = 0,
    done: DoneLike = None,
) -> tp.Union[Receiver[A], flowz_utils.Partial[Receiver[A]]]:
    """
    Creates a stage that discards the first `n` elements and forwards the rest.

    Arguments:
        n: The number of elements to discard.
        stage: A Receiver, Channel or Iterable.
        maxsize: Capacity of the output channel.
        done: A `Done` signal (or a list of them) that stops the stage when closed.

    Returns:
        If the `stage` parameters is given then this function returns a `Receiver`, else it returns a `Partial`.
    """

    if isinstance(stage, flowz_utils.Undefined):
        return flowz_utils.Partial(
            lambda stage: drop(n, stage=stage, maxsize=maxsize, done=done)
        )

    done = to_done(done)
    stage = to_receiver(stage, done=done)

    [output] = Stage(
        process_fn=Drop(n),
        workers=1,
        maxsize=maxsize,
        total_outputs=1,
        dependencies=[stage],
        done=done,
    ).start()

    return output
